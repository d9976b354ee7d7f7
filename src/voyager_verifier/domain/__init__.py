"""Domain layer: pure verification logic with zero framework dependencies."""

from voyager_verifier.domain.compiler_protocol import (
    DynamicCompiler,
    supports_toolchain,
)
from voyager_verifier.domain.enums import (
    Network,
    SupportedCairoVersions,
    SupportedScarbVersions,
    VerifyJobStatus,
)
from voyager_verifier.domain.exceptions import (
    BadRequestError,
    ConfigurationError,
    JobFailedError,
    JobNotFoundError,
    ProtocolError,
    VerificationTimeoutError,
    VoyagerVerifierError,
)
from voyager_verifier.domain.state_machine import JobStatusMachine
from voyager_verifier.domain.submission import FileInfo, ProjectMetadataInfo

__all__ = [
    "DynamicCompiler",
    "supports_toolchain",
    "Network",
    "SupportedCairoVersions",
    "SupportedScarbVersions",
    "VerifyJobStatus",
    "BadRequestError",
    "ConfigurationError",
    "JobFailedError",
    "JobNotFoundError",
    "ProtocolError",
    "VerificationTimeoutError",
    "VoyagerVerifierError",
    "JobStatusMachine",
    "FileInfo",
    "ProjectMetadataInfo",
]
