"""Orchestration layer: the end-to-end verification flow."""

from voyager_verifier.orchestration.verification_flow import VerificationFlow

__all__ = ["VerificationFlow"]
