"""Polling Service: follows a dispatched job until it reaches a terminal status.

The verification service is asynchronous and has no push notification, so
the job is polled on a fixed interval. Each poll is one GET; anything other
than a 200 with a well-formed record ends the loop immediately.

Status handling:
    Submitted, Compiled -> wait POLLING_INTERVAL_SECONDS, poll again
    CompileFailed       -> CompilationFailedError(status_description)
    Fail                -> JobFailedError(status_description)
    Success             -> return the VerificationJob

The wait/stop policy is a tenacity Retrying that only retries the internal
"still pending" signal. The ceiling is opt-in: with USE_POLLING_MAX_RETRIES
unset the loop polls until the job finishes; with it set the loop gives up
after max_retries + 1 non-terminal polls (max_retries sleeps) and raises
VerificationTimeoutError, which is not a job failure.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from pydantic import ValidationError
from tenacity import (
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    stop_never,
    wait_fixed,
)

from voyager_verifier.config import get_settings
from voyager_verifier.domain.enums import Network, VerifyJobStatus
from voyager_verifier.domain.exceptions import (
    CompilationFailedError,
    JobFailedError,
    JobNotFoundError,
    ProtocolError,
    UnexpectedResponseError,
    VerificationTimeoutError,
)
from voyager_verifier.domain.state_machine import JobStatusMachine
from voyager_verifier.infrastructure.api_client import (
    ApiEndpoints,
    VoyagerApiClient,
    parse_json,
)
from voyager_verifier.logging_config import get_logger
from voyager_verifier.schemas.job import VerificationJob
from voyager_verifier.services.endpoint_resolver import require_public_api

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from voyager_verifier.config import Settings

logger = get_logger(__name__)

UNKNOWN_FAILURE = "unknown failure"


class _JobPending(Exception):
    """Raised by a single poll when the job is not terminal yet."""

    def __init__(self, job: VerificationJob) -> None:
        super().__init__(f"Job {job.job_id} still pending")
        self.job = job


class PollingService:
    """Polls the status endpoint of one verification job."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize with optional overrides.

        Args:
            settings: Overrides the cached settings (ceiling flag, interval).
            transport: Custom httpx transport, e.g. httpx.MockTransport in tests.
            sleep: Blocking wait between polls. Tests pass a mock.
        """
        self._settings = settings or get_settings()
        self._transport = transport
        self._sleep = sleep

    def poll_verification_status(
        self,
        network: Network,
        job_id: str,
        max_retries: int | None = None,
    ) -> VerificationJob:
        """Block until the job reaches a terminal status.

        Args:
            network: Deployment the job was dispatched to.
            job_id: Identifier returned by dispatch.
            max_retries: Ceiling on non-terminal polls, only enforced when
                USE_POLLING_MAX_RETRIES is set. Defaults to DEFAULT_MAX_RETRIES.

        Returns:
            The job record, once it reports Success.

        Raises:
            JobNotFoundError: The service answered 404.
            ProtocolError: Unexpected status, malformed body or unknown status code.
            CompilationFailedError: The job reported CompileFailed.
            JobFailedError: The job reported Fail.
            VerificationTimeoutError: The ceiling was exceeded.
            TransportError: A request did not complete.
        """
        if max_retries is None:
            max_retries = self._settings.default_max_retries
        if max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {max_retries}")

        public_url = require_public_api(network, self._settings)
        machine = JobStatusMachine()

        if self._settings.use_polling_max_retries:
            stop = stop_after_attempt(max_retries + 1)
        else:
            stop = stop_never

        retryer = Retrying(
            stop=stop,
            wait=wait_fixed(self._settings.polling_interval_seconds),
            retry=retry_if_exception_type(_JobPending),
            sleep=self._sleep,
            before_sleep=_log_waiting,
        )

        logger.info(
            "poll.start",
            network=str(network),
            job_id=job_id,
            max_retries=max_retries if self._settings.use_polling_max_retries else None,
        )

        with VoyagerApiClient(public_url, self._settings, self._transport) as client:
            try:
                return retryer(self._poll_once, client, job_id, machine)
            except RetryError as exc:
                attempts = exc.last_attempt.attempt_number
                logger.warning("poll.timeout", job_id=job_id, attempts=attempts)
                raise VerificationTimeoutError(job_id, attempts) from exc

    def _poll_once(
        self,
        client: VoyagerApiClient,
        job_id: str,
        machine: JobStatusMachine,
    ) -> VerificationJob:
        response = client.get(ApiEndpoints.GET_JOB_STATUS, job_id)

        if response.status_code == 404:
            raise JobNotFoundError(job_id)
        if response.status_code != 200:
            raise UnexpectedResponseError(
                "Unexpected response while polling job", response.status_code, response.text
            )

        try:
            job = VerificationJob.model_validate(parse_json(response))
        except ValidationError as exc:
            raise ProtocolError(f"Malformed job record: {response.text[:200]}") from exc

        status = machine.observe(job.job_status)
        logger.info(
            "poll.status",
            job_id=job_id,
            status=status.label,
            description=job.status_description,
        )

        if status is VerifyJobStatus.SUCCESS:
            return job
        if status is VerifyJobStatus.COMPILE_FAILED:
            raise CompilationFailedError(job_id, job.status_description or UNKNOWN_FAILURE)
        if status is VerifyJobStatus.FAIL:
            raise JobFailedError(job_id, job.status_description or UNKNOWN_FAILURE)
        raise _JobPending(job)


def _log_waiting(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    pending = outcome.exception() if outcome is not None else None
    logger.debug(
        "poll.waiting",
        job_id=pending.job.job_id if isinstance(pending, _JobPending) else None,
        retries=retry_state.attempt_number,
        sleep_seconds=retry_state.next_action.sleep if retry_state.next_action else None,
    )
