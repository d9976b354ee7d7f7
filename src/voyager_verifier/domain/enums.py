"""Domain enumerations for the verification client.

These enums define the canonical networks, job states and toolchain version
tags used throughout the system. They are framework-agnostic (no httpx, no
pydantic imports).
"""

import enum

from voyager_verifier.domain.exceptions import UnknownJobStatusError


class Network(enum.StrEnum):
    """Logical network selector.

    Each member resolves to exactly one (internal, public) URL pair.
    See services/endpoint_resolver.py for the table.
    """

    MAINNET = "mainnet"
    SEPOLIA = "sepolia"
    LOCAL = "local"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: str) -> "Network":
        """Parse a network name, case-insensitively."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown network: {value!r}. Valid networks: {valid}") from None


class VerifyJobStatus(enum.IntEnum):
    """Status of a remote verification job, encoded on the wire as 0-4.

    SUCCESS, FAIL and COMPILE_FAILED are terminal. See
    domain/state_machine.py for the allowed progressions.
    """

    SUBMITTED = 0
    COMPILED = 1
    COMPILE_FAILED = 2
    FAIL = 3
    SUCCESS = 4

    @classmethod
    def from_code(cls, code: int) -> "VerifyJobStatus":
        """Decode a wire status code.

        Raises:
            UnknownJobStatusError: If the code is not one of 0-4.
        """
        if isinstance(code, bool) or not isinstance(code, int):
            raise UnknownJobStatusError(code)
        try:
            return cls(code)
        except ValueError:
            raise UnknownJobStatusError(code) from None

    @property
    def is_terminal(self) -> bool:
        return self in (
            VerifyJobStatus.COMPILE_FAILED,
            VerifyJobStatus.FAIL,
            VerifyJobStatus.SUCCESS,
        )

    @property
    def label(self) -> str:
        """Human-readable name, as the service reports it."""
        return _STATUS_LABELS[self]

    @classmethod
    def from_label(cls, label: str) -> "VerifyJobStatus":
        for status, status_label in _STATUS_LABELS.items():
            if status_label == label:
                return status
        raise ValueError(f"Unknown status label: {label!r}")


_STATUS_LABELS = {
    VerifyJobStatus.SUBMITTED: "Submitted",
    VerifyJobStatus.COMPILED: "Compiled",
    VerifyJobStatus.COMPILE_FAILED: "CompileFailed",
    VerifyJobStatus.FAIL: "Fail",
    VerifyJobStatus.SUCCESS: "Success",
}


class SupportedCairoVersions(enum.StrEnum):
    """Cairo compiler versions a concrete compiler may declare.

    The value is the tag sent as ``compiler_version`` on dispatch.
    """

    V2_5_0 = "2.5.0"
    V2_8_4 = "2.8.4"


class SupportedScarbVersions(enum.StrEnum):
    """Scarb build-system versions a concrete compiler may declare.

    The value is the tag sent as ``scarb_version`` on dispatch.
    """

    V2_5_0 = "2.5.0"
    V2_8_4 = "2.8.4"
