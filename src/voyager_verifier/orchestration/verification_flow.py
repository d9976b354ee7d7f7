"""Verification Flow: runs one class verification from submission to result.

    [exists?] -> [compile] -> dispatch -> poll -> VerificationJob

Both bracketed steps are opt-in. The existence pre-check asks the internal
API whether the class hash is known; the compile step builds the project
locally with a DynamicCompiler so that a broken project fails here instead
of after a round trip to the service.

Strictly sequential, one job per call. Callers wanting several verifications
in parallel run several flows; they share no mutable state.

Usage:
    from voyager_verifier.orchestration import VerificationFlow

    job = VerificationFlow().run(
        network=Network.SEPOLIA,
        class_hash="0x044dc2b3...",
        license="MIT",
        name="MyContract",
        project_metadata=metadata,
        files=files,
    )
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from voyager_verifier.config import get_settings
from voyager_verifier.domain.compiler_protocol import supports_toolchain
from voyager_verifier.domain.exceptions import (
    ClassNotFoundError,
    UnsupportedToolchainError,
)
from voyager_verifier.logging_config import get_logger
from voyager_verifier.services.dispatch_service import DispatchService
from voyager_verifier.services.polling_service import PollingService

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    import httpx

    from voyager_verifier.config import Settings
    from voyager_verifier.domain.compiler_protocol import DynamicCompiler
    from voyager_verifier.domain.enums import Network
    from voyager_verifier.domain.submission import FileInfo, ProjectMetadataInfo
    from voyager_verifier.schemas.job import VerificationJob

logger = get_logger(__name__)


class VerificationFlow:
    """Dispatch-then-poll pipeline for a single verification job."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._dispatcher = DispatchService(self._settings, transport)
        self._poller = PollingService(self._settings, transport, sleep=sleep or time.sleep)

    def run(
        self,
        network: Network,
        class_hash: str,
        license: str,
        name: str,
        project_metadata: ProjectMetadataInfo,
        files: Iterable[FileInfo],
        max_retries: int | None = None,
        compiler: DynamicCompiler | None = None,
        check_class_exists: bool = False,
        project_root: Path | None = None,
    ) -> VerificationJob:
        """Verify a class and return the successful job record.

        Args:
            network: Target deployment.
            class_hash: Class the sources are verified against.
            license: License identifier.
            name: Contract display name.
            project_metadata: Toolchain versions and bundle layout.
            files: Source files to submit.
            max_retries: Polling ceiling, see PollingService.
            compiler: When given, build the project locally before dispatch.
            check_class_exists: When True, fail fast if the class is unknown.
            project_root: Bundle root that project_dir_path is relative to.
                Defaults to the current working directory.

        Raises:
            ClassNotFoundError: The pre-check found no such class.
            UnsupportedToolchainError: The compiler does not handle the
                metadata's version pair.
            CompilationError: The local build failed.
            VoyagerVerifierError: Any dispatch or polling failure.
        """
        structlog.contextvars.bind_contextvars(network=str(network), class_hash=class_hash)
        try:
            if check_class_exists and not self._dispatcher.does_class_exist(network, class_hash):
                raise ClassNotFoundError(class_hash, str(network))

            if compiler is not None:
                self._compile(compiler, project_metadata, project_root)

            job_id = self._dispatcher.dispatch_class_verification_job(
                network=network,
                address=class_hash,
                license=license,
                name=name,
                project_metadata=project_metadata,
                files=files,
            )
            job = self._poller.poll_verification_status(network, job_id, max_retries)
            logger.info("verification.succeeded", job_id=job_id, contract=job.name)
            return job
        finally:
            structlog.contextvars.unbind_contextvars("network", "class_hash")

    def _compile(
        self,
        compiler: DynamicCompiler,
        project_metadata: ProjectMetadataInfo,
        project_root: Path | None,
    ) -> None:
        if not supports_toolchain(
            compiler, project_metadata.scarb_version, project_metadata.cairo_version
        ):
            raise UnsupportedToolchainError(
                str(project_metadata.scarb_version), str(project_metadata.cairo_version)
            )
        project_path = Path(project_root or Path.cwd()) / project_metadata.project_dir_path
        logger.info("verification.compiling", project=str(project_path))
        compiler.compile_project(project_path)
