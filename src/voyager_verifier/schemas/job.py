"""Pydantic schemas for the verification service's wire format.

These mirror the JSON bodies returned by the public API. They are separate
from the domain enums so that a malformed body is caught at the boundary as a
ValidationError and translated into a ProtocolError by the caller.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from voyager_verifier.domain.enums import VerifyJobStatus

# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------


class VerificationJobDispatch(BaseModel):
    """Body of a successful ``POST /class-verify/{class_hash}``."""

    job_id: str = Field(..., description="Opaque handle used for all later polling")


class ApiError(BaseModel):
    """Body of a 400 response."""

    error: str


class VerificationJob(BaseModel):
    """Job record returned by ``GET /class-verify/job/{job_id}``.

    Only ``status`` and ``status_description`` drive the poll loop; the rest
    is passed through for display.
    """

    model_config = ConfigDict(extra="ignore")

    job_id: str
    status: int = Field(..., strict=True, description="Wire status code, 0-4")
    status_description: str | None = None
    class_hash: str
    created_timestamp: float | None = None
    updated_timestamp: float | None = None
    address: str | None = None
    contract_file: str | None = None
    name: str | None = None
    version: str | None = None
    license: str | None = None

    @property
    def job_status(self) -> VerifyJobStatus:
        """Decode ``status``.

        Raises:
            UnknownJobStatusError: If the code is outside 0-4.
        """
        return VerifyJobStatus.from_code(self.status)
