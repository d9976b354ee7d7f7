"""Pydantic wire schemas."""

from voyager_verifier.schemas.job import (
    ApiError,
    VerificationJob,
    VerificationJobDispatch,
)

__all__ = [
    "ApiError",
    "VerificationJob",
    "VerificationJobDispatch",
]
