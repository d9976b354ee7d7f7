"""Verification Job State Machine Guard.

Uses python-statemachine to track the status a remote verification job
reports while it is being polled. Once a final state is reached no further
event is accepted, so a poll loop that keeps observing after a terminal
status fails loudly instead of silently continuing.

The service may report the same non-terminal status many times in a row,
and a compiled job may be re-queued, so Submitted and Compiled move freely
between each other.

Transition table:
    Submitted -> Submitted      (submitted)
    Compiled  -> Submitted      (submitted)
    Submitted -> Compiled       (compiled)
    Compiled  -> Compiled       (compiled)
    Submitted -> CompileFailed  (compile_failed)
    Compiled  -> CompileFailed  (compile_failed)
    Submitted -> Fail           (failed)
    Compiled  -> Fail           (failed)
    Submitted -> Success        (succeeded)
    Compiled  -> Success        (succeeded)
"""

from __future__ import annotations

from statemachine import State, StateMachine

from voyager_verifier.domain.enums import VerifyJobStatus


class JobStatusMachine(StateMachine):
    """State machine that follows one verification job through its statuses.

    Usage:
        sm = JobStatusMachine()
        sm.observe(VerifyJobStatus.COMPILED)
        sm.status        # VerifyJobStatus.COMPILED
        sm.is_terminal   # False
    """

    # --- States (value is the status label the service reports) ---
    SUBMITTED = State("Submitted", value=VerifyJobStatus.SUBMITTED.label, initial=True)
    COMPILED = State("Compiled", value=VerifyJobStatus.COMPILED.label)
    COMPILE_FAILED = State(
        "CompileFailed", value=VerifyJobStatus.COMPILE_FAILED.label, final=True
    )
    FAIL = State("Fail", value=VerifyJobStatus.FAIL.label, final=True)
    SUCCESS = State("Success", value=VerifyJobStatus.SUCCESS.label, final=True)

    # --- Events / Transitions ---
    submitted = SUBMITTED.to.itself() | COMPILED.to(SUBMITTED)
    compiled = SUBMITTED.to(COMPILED) | COMPILED.to.itself()
    compile_failed = SUBMITTED.to(COMPILE_FAILED) | COMPILED.to(COMPILE_FAILED)
    failed = SUBMITTED.to(FAIL) | COMPILED.to(FAIL)
    succeeded = SUBMITTED.to(SUCCESS) | COMPILED.to(SUCCESS)

    def __init__(self, current_status: VerifyJobStatus = VerifyJobStatus.SUBMITTED) -> None:
        """Initialize the state machine at a given status.

        Args:
            current_status: The status to start from. Defaults to SUBMITTED,
                which is what a freshly dispatched job reports.
        """
        status = VerifyJobStatus(current_status)
        super().__init__(start_value=status.label)

    @property
    def status(self) -> VerifyJobStatus:
        """Return the current state as a VerifyJobStatus."""
        return VerifyJobStatus.from_label(self.current_state.value)

    @property
    def is_terminal(self) -> bool:
        return bool(self.current_state.final)

    def observe(self, status: VerifyJobStatus) -> VerifyJobStatus:
        """Fire the event matching a status reported by the service.

        Raises:
            TransitionNotAllowed: If the job is already in a final state.
        """
        self.send(_EVENT_BY_STATUS[status])
        return self.status

    def get_allowed_events(self) -> list[str]:
        """Return a list of event names that can fire from the current state.

        Every non-final state accepts every event (see the table above).
        """
        if self.is_terminal:
            return []
        return list(_EVENT_BY_STATUS.values())


_EVENT_BY_STATUS = {
    VerifyJobStatus.SUBMITTED: "submitted",
    VerifyJobStatus.COMPILED: "compiled",
    VerifyJobStatus.COMPILE_FAILED: "compile_failed",
    VerifyJobStatus.FAIL: "failed",
    VerifyJobStatus.SUCCESS: "succeeded",
}
