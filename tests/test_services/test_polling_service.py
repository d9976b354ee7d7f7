"""Tests for PollingService: status state machine, ceiling and sleep counts.

The sleep between polls is injected as a MagicMock, so every test runs
instantly and can assert exactly how many waits happened.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import httpx
import pytest

from voyager_verifier.domain.enums import Network
from voyager_verifier.domain.exceptions import (
    CompilationFailedError,
    ConfigurationError,
    JobFailedError,
    JobNotFoundError,
    ProtocolError,
    UnexpectedResponseError,
    UnknownJobStatusError,
    VerificationTimeoutError,
)
from voyager_verifier.services.polling_service import UNKNOWN_FAILURE, PollingService

SUBMITTED, COMPILED, COMPILE_FAILED, FAIL, SUCCESS = range(5)


@pytest.fixture
def status_responses(job_record):
    def _make(*statuses: int, description: str | None = None) -> list[httpx.Response]:
        return [httpx.Response(200, json=job_record(s, description)) for s in statuses]

    return _make


def _poller(service, settings) -> tuple[PollingService, MagicMock]:
    sleep = MagicMock()
    return PollingService(settings, transport=service.transport, sleep=sleep), sleep


class TestSuccessfulPolling:
    def test_submitted_compiled_success(
        self, scripted_service, settings, status_responses
    ) -> None:
        service = scripted_service(*status_responses(SUBMITTED, COMPILED, SUCCESS))
        poller, sleep = _poller(service, settings)

        job = poller.poll_verification_status(Network.SEPOLIA, "abc123", max_retries=10)

        assert job.job_id == "abc123"
        assert job.status == SUCCESS
        assert job.name == "HelloStarknet"
        assert len(service.requests) == 3
        assert sleep.call_count == 2
        sleep.assert_called_with(5.0)

    def test_polls_public_status_endpoint(
        self, scripted_service, settings, status_responses
    ) -> None:
        service = scripted_service(*status_responses(SUCCESS))
        poller, sleep = _poller(service, settings)

        poller.poll_verification_status(Network.MAINNET, "abc123", max_retries=0)

        (request,) = service.requests
        assert request.method == "GET"
        assert str(request.url) == "https://api.voyager.online/beta/class-verify/job/abc123"
        sleep.assert_not_called()

    def test_configured_interval(
        self, scripted_service, make_settings, status_responses
    ) -> None:
        service = scripted_service(*status_responses(SUBMITTED, SUCCESS))
        poller, sleep = _poller(service, make_settings(polling_interval_seconds=0.5))

        poller.poll_verification_status(Network.LOCAL, "abc123", max_retries=3)

        sleep.assert_called_once_with(0.5)


class TestTerminalFailures:
    def test_fail_stops_immediately(self, scripted_service, settings, status_responses) -> None:
        service = scripted_service(*status_responses(FAIL, description="class hash mismatch"))
        poller, sleep = _poller(service, settings)

        with pytest.raises(JobFailedError, match="class hash mismatch") as exc_info:
            poller.poll_verification_status(Network.SEPOLIA, "abc123", max_retries=5)

        assert not isinstance(exc_info.value, CompilationFailedError)
        assert exc_info.value.job_id == "abc123"
        sleep.assert_not_called()

    def test_compile_failed_carries_description(
        self, scripted_service, settings, status_responses
    ) -> None:
        service = scripted_service(
            *status_responses(SUBMITTED, COMPILE_FAILED, description="error: unknown import")
        )
        poller, sleep = _poller(service, settings)

        with pytest.raises(CompilationFailedError, match="Compilation failed: error: unknown import"):
            poller.poll_verification_status(Network.SEPOLIA, "abc123", max_retries=5)

        assert sleep.call_count == 1

    def test_missing_description_uses_placeholder(
        self, scripted_service, settings, status_responses
    ) -> None:
        service = scripted_service(*status_responses(FAIL))
        poller, _ = _poller(service, settings)

        with pytest.raises(JobFailedError) as exc_info:
            poller.poll_verification_status(Network.SEPOLIA, "abc123", max_retries=5)

        assert exc_info.value.description == UNKNOWN_FAILURE


class TestRetryCeiling:
    def test_timeout_after_ceiling_exceeded(
        self, scripted_service, make_settings, status_responses
    ) -> None:
        service = scripted_service(*status_responses(SUBMITTED, SUBMITTED, SUBMITTED, SUBMITTED))
        poller, sleep = _poller(service, make_settings(use_polling_max_retries=True))

        with pytest.raises(VerificationTimeoutError, match="Timeout") as exc_info:
            poller.poll_verification_status(Network.SEPOLIA, "abc123", max_retries=2)

        assert exc_info.value.attempts == 3
        assert len(service.requests) == 3
        assert service.remaining == 1
        assert sleep.call_count == 2

    def test_timeout_is_not_a_job_failure(
        self, scripted_service, make_settings, status_responses
    ) -> None:
        service = scripted_service(*status_responses(COMPILED))
        poller, _ = _poller(service, make_settings(use_polling_max_retries=True))

        with pytest.raises(VerificationTimeoutError) as exc_info:
            poller.poll_verification_status(Network.SEPOLIA, "abc123", max_retries=0)

        assert not isinstance(exc_info.value, JobFailedError)

    def test_ceiling_ignored_when_flag_unset(
        self, scripted_service, settings, status_responses
    ) -> None:
        service = scripted_service(
            *status_responses(SUBMITTED, SUBMITTED, SUBMITTED, COMPILED, COMPILED, SUCCESS)
        )
        poller, sleep = _poller(service, settings)

        job = poller.poll_verification_status(Network.SEPOLIA, "abc123", max_retries=1)

        assert job.status == SUCCESS
        assert sleep.call_count == 5

    def test_flag_read_from_environment(
        self, scripted_service, monkeypatch, status_responses
    ) -> None:
        monkeypatch.setenv("USE_POLLING_MAX_RETRIES", "true")
        service = scripted_service(*status_responses(SUBMITTED, SUBMITTED))
        sleep = MagicMock()
        poller = PollingService(transport=service.transport, sleep=sleep)

        with pytest.raises(VerificationTimeoutError):
            poller.poll_verification_status(Network.SEPOLIA, "abc123", max_retries=1)

        assert sleep.call_count == 1

    def test_negative_ceiling_rejected(self, scripted_service, settings) -> None:
        poller, _ = _poller(scripted_service(), settings)
        with pytest.raises(ValueError):
            poller.poll_verification_status(Network.SEPOLIA, "abc123", max_retries=-1)


class TestProtocolFailures:
    def test_404_is_job_not_found(self, scripted_service, settings) -> None:
        service = scripted_service(httpx.Response(404))
        poller, sleep = _poller(service, settings)

        with pytest.raises(JobNotFoundError, match="abc123"):
            poller.poll_verification_status(Network.SEPOLIA, "abc123", max_retries=5)
        sleep.assert_not_called()

    def test_unexpected_status_is_fatal(self, scripted_service, settings, status_responses) -> None:
        service = scripted_service(
            *status_responses(SUBMITTED), httpx.Response(502, text="bad gateway")
        )
        poller, sleep = _poller(service, settings)

        with pytest.raises(UnexpectedResponseError, match="502: bad gateway"):
            poller.poll_verification_status(Network.SEPOLIA, "abc123", max_retries=5)
        assert sleep.call_count == 1

    def test_out_of_range_status_is_fatal(self, scripted_service, settings, job_record) -> None:
        service = scripted_service(httpx.Response(200, json=job_record(9)))
        poller, sleep = _poller(service, settings)

        with pytest.raises(UnknownJobStatusError, match="Unknown status: 9"):
            poller.poll_verification_status(Network.SEPOLIA, "abc123", max_retries=5)
        sleep.assert_not_called()

    def test_malformed_record_is_protocol_error(self, scripted_service, settings) -> None:
        service = scripted_service(httpx.Response(200, json={"job_id": "abc123"}))
        poller, _ = _poller(service, settings)

        with pytest.raises(ProtocolError, match="Malformed job record"):
            poller.poll_verification_status(Network.SEPOLIA, "abc123", max_retries=5)

    def test_non_json_body_is_protocol_error(self, scripted_service, settings) -> None:
        service = scripted_service(httpx.Response(200, text="<html></html>"))
        poller, _ = _poller(service, settings)

        with pytest.raises(ProtocolError, match="Unparseable"):
            poller.poll_verification_status(Network.SEPOLIA, "abc123", max_retries=5)

    def test_custom_network_without_endpoint(self, scripted_service, settings) -> None:
        poller, _ = _poller(scripted_service(), settings)
        with pytest.raises(ConfigurationError):
            poller.poll_verification_status(Network.CUSTOM, "abc123", max_retries=5)
