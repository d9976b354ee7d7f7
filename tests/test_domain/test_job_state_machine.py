"""Tests for the JobStatusMachine domain guard.

These tests verify that:
    1. Non-terminal statuses can repeat and alternate.
    2. Every terminal status is final.
    3. Nothing can be observed after a final status.
"""

from __future__ import annotations

import pytest
from statemachine.exceptions import TransitionNotAllowed

from voyager_verifier.domain.enums import VerifyJobStatus
from voyager_verifier.domain.state_machine import JobStatusMachine


class TestHappyPath:
    def test_submitted_compiled_success(self) -> None:
        sm = JobStatusMachine()
        assert sm.status is VerifyJobStatus.SUBMITTED

        sm.observe(VerifyJobStatus.SUBMITTED)
        assert sm.status is VerifyJobStatus.SUBMITTED

        sm.observe(VerifyJobStatus.COMPILED)
        assert sm.status is VerifyJobStatus.COMPILED
        assert sm.is_terminal is False

        sm.observe(VerifyJobStatus.SUCCESS)
        assert sm.status is VerifyJobStatus.SUCCESS
        assert sm.is_terminal is True

    def test_success_straight_from_submitted(self) -> None:
        sm = JobStatusMachine()
        assert sm.observe(VerifyJobStatus.SUCCESS) is VerifyJobStatus.SUCCESS


class TestNonTerminalRepeats:
    def test_compiled_repeats(self) -> None:
        sm = JobStatusMachine(VerifyJobStatus.COMPILED)
        sm.observe(VerifyJobStatus.COMPILED)
        sm.observe(VerifyJobStatus.COMPILED)
        assert sm.status is VerifyJobStatus.COMPILED

    def test_requeued_after_compile(self) -> None:
        sm = JobStatusMachine(VerifyJobStatus.COMPILED)
        sm.observe(VerifyJobStatus.SUBMITTED)
        assert sm.status is VerifyJobStatus.SUBMITTED


class TestFailurePaths:
    def test_compile_failed_is_final(self) -> None:
        sm = JobStatusMachine()
        sm.observe(VerifyJobStatus.COMPILE_FAILED)
        assert sm.is_terminal is True
        assert sm.get_allowed_events() == []

    def test_fail_after_compiled(self) -> None:
        sm = JobStatusMachine(VerifyJobStatus.COMPILED)
        sm.observe(VerifyJobStatus.FAIL)
        assert sm.status is VerifyJobStatus.FAIL
        assert sm.is_terminal is True


class TestIllegalTransitions:
    def test_nothing_after_success(self) -> None:
        sm = JobStatusMachine(VerifyJobStatus.SUCCESS)
        with pytest.raises(TransitionNotAllowed):
            sm.observe(VerifyJobStatus.SUBMITTED)

    def test_nothing_after_fail(self) -> None:
        sm = JobStatusMachine(VerifyJobStatus.FAIL)
        with pytest.raises(TransitionNotAllowed):
            sm.observe(VerifyJobStatus.SUCCESS)


class TestAllowedEvents:
    def test_submitted_allowed(self) -> None:
        allowed = set(JobStatusMachine().get_allowed_events())
        assert allowed == {"submitted", "compiled", "compile_failed", "failed", "succeeded"}

    def test_invalid_start_status(self) -> None:
        with pytest.raises(ValueError):
            JobStatusMachine(9)
