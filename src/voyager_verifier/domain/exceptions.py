"""Domain exceptions for the verification client.

Every failure in the dispatch/poll pipeline surfaces as exactly one of these.
A job that the service itself reports as failed (JobFailedError) is kept
apart from a client that gave up waiting (VerificationTimeoutError) and from
a service that answered in an unexpected way (ProtocolError).
"""


class VoyagerVerifierError(Exception):
    """Base exception for all verification client errors."""

    def __init__(self, message: str, code: str = "VOYAGER_VERIFIER_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


# --- Local Errors ---


class ConfigurationError(VoyagerVerifierError):
    """Raised when a required setting is missing or invalid.

    Example: Network.CUSTOM selected without CUSTOM_PUBLIC_API_ENDPOINT_URL.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message=message, code="CONFIGURATION_ERROR")


class FileReadError(VoyagerVerifierError):
    """Raised when a source file to be submitted cannot be read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            message=f"Failed to read {path}: {reason}",
            code="FILE_READ_ERROR",
        )
        self.path = path


# --- Transport / Protocol Errors ---


class TransportError(VoyagerVerifierError):
    """Raised when a request could not be completed at the network layer."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(
            message=f"Request to {url} failed: {reason}",
            code="TRANSPORT_ERROR",
        )
        self.url = url


class ProtocolError(VoyagerVerifierError):
    """Raised when the service answers in a shape the client does not expect."""

    def __init__(self, message: str, code: str = "PROTOCOL_ERROR") -> None:
        super().__init__(message=message, code=code)


class UnexpectedResponseError(ProtocolError):
    """Raised for an HTTP status outside the documented decision table."""

    def __init__(self, message: str, status_code: int, body: str = "") -> None:
        super().__init__(
            message=f"{message} with status {status_code}: {body}",
            code="UNEXPECTED_RESPONSE",
        )
        self.status_code = status_code
        self.body = body


class UnknownJobStatusError(ProtocolError):
    """Raised when a job record carries a status code outside 0-4."""

    def __init__(self, status: object) -> None:
        super().__init__(
            message=f"Unknown status: {status}",
            code="UNKNOWN_JOB_STATUS",
        )
        self.status = status


# --- Service Domain Errors ---


class JobNotFoundError(VoyagerVerifierError):
    """Raised when the service answers 404 for a dispatch or a job lookup."""

    def __init__(self, identifier: str) -> None:
        super().__init__(
            message=f"Job not found: {identifier}",
            code="JOB_NOT_FOUND",
        )
        self.identifier = identifier


class ClassNotFoundError(VoyagerVerifierError):
    """Raised when a class hash is unknown to the service (existence pre-check)."""

    def __init__(self, class_hash: str, network: str) -> None:
        super().__init__(
            message=f"Class {class_hash} not found on {network}",
            code="CLASS_NOT_FOUND",
        )
        self.class_hash = class_hash


class BadRequestError(VoyagerVerifierError):
    """Raised when the service rejects a dispatch with a 400 and a message."""

    def __init__(self, error: str) -> None:
        super().__init__(
            message=f"Failed to dispatch verification job with status 400: {error}",
            code="BAD_REQUEST",
        )
        self.error = error


# --- Job Outcome Errors ---


class JobFailedError(VoyagerVerifierError):
    """Raised when the service reports the job as failed."""

    def __init__(self, job_id: str, description: str, prefix: str = "Failed to verify") -> None:
        super().__init__(message=f"{prefix}: {description}", code="JOB_FAILED")
        self.job_id = job_id
        self.description = description


class CompilationFailedError(JobFailedError):
    """Raised when the service could not compile the submitted sources."""

    def __init__(self, job_id: str, description: str) -> None:
        super().__init__(job_id=job_id, description=description, prefix="Compilation failed")
        self.code = "COMPILATION_FAILED"


class VerificationTimeoutError(VoyagerVerifierError):
    """Raised when the polling ceiling is exceeded while the job is still pending.

    Not a JobFailedError: the job itself may still succeed later.
    """

    def __init__(self, job_id: str, attempts: int) -> None:
        super().__init__(
            message=(
                "Timeout: Verification job took too long to complete "
                f"(job {job_id}, {attempts} polls)"
            ),
            code="VERIFICATION_TIMEOUT",
        )
        self.job_id = job_id
        self.attempts = attempts


# --- Compiler Errors ---


class CompilerError(VoyagerVerifierError):
    """Base exception for local toolchain failures."""

    def __init__(self, message: str, code: str = "COMPILER_ERROR") -> None:
        super().__init__(message=message, code=code)


class ArtifactDiscoveryError(CompilerError):
    """Raised when a project layout does not yield contracts to verify."""

    def __init__(self, project_path: str, reason: str) -> None:
        super().__init__(
            message=f"Invalid project at {project_path}: {reason}",
            code="ARTIFACT_DISCOVERY_ERROR",
        )
        self.project_path = project_path


class CompilationError(CompilerError):
    """Raised when a local build fails. Carries the partial diagnostic output."""

    def __init__(
        self,
        message: str,
        stdout: str = "",
        stderr: str = "",
        exit_code: int | None = None,
    ) -> None:
        super().__init__(message=message, code="COMPILATION_ERROR")
        self.stdout = stdout
        self.stderr = stderr
        self.exit_code = exit_code

    @property
    def diagnostics(self) -> str:
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


class UnsupportedToolchainError(CompilerError):
    """Raised when no compiler handles the requested scarb/cairo version pair."""

    def __init__(self, scarb_version: str, cairo_version: str) -> None:
        super().__init__(
            message=(
                f"Unsupported toolchain: scarb {scarb_version} with cairo {cairo_version}"
            ),
            code="UNSUPPORTED_TOOLCHAIN",
        )
        self.scarb_version = scarb_version
        self.cairo_version = cairo_version
