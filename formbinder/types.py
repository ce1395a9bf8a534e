"""Core type definitions for formbinder.

This module defines the enumerations shared across the package:
- SubmissionState: Derived lifecycle state of a form
- ConcurrencyPolicy: How a coordinator treats a submit issued while busy
- EventType: Event types emitted during the submission lifecycle
"""

from enum import Enum


class SubmissionState(str, Enum):
    """Lifecycle state of a form, derived from its busy/successful flags.

    A form is PROCESSING while a request is in flight, SUCCEEDED after the
    most recent submission settled cleanly, and IDLE otherwise.
    """
    IDLE = "idle"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"


class ConcurrencyPolicy(str, Enum):
    """Behaviour of ``submit`` when the form is already busy.

    ALLOW starts a second, independent request (last resolution wins on
    shared state). REJECT raises SubmissionInProgressError without touching
    the form.
    """
    ALLOW = "allow"
    REJECT = "reject"


class EventType(str, Enum):
    """Event types emitted by the submission coordinator."""
    SUBMISSION_STARTED = "submission.started"
    SUBMISSION_SUCCEEDED = "submission.succeeded"
    SUBMISSION_FAILED = "submission.failed"
    ERRORS_RECORDED = "errors.recorded"


__all__ = [
    "SubmissionState",
    "ConcurrencyPolicy",
    "EventType",
]
