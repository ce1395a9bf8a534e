"""Submission coordinator for formbinder.

This module drives a single submission of a form through an injected
transport and reconciles the outcome back into the form:

- Processing entry (before the transport is called): errors cleared,
  busy=True, successful=False
- Success: busy=False, successful=True; the transport's response is returned
  unmodified
- Failure: busy=False; if the failure carries a response, its payload is
  normalized into the form's ErrorStore; the exception is always re-raised

Each call makes exactly one attempt. Overlapping submissions on the same form
are allowed by default and race on shared state (last resolution wins);
configure ``ConcurrencyPolicy.REJECT`` to refuse a submit while busy.

Usage:
    >>> from formbinder.form import FormState
    >>> from formbinder.submission import SubmissionCoordinator
    >>> form = FormState({"email": "ada@example.com"})
    >>> coordinator = SubmissionCoordinator(form, transport=my_transport)  # doctest: +SKIP
    >>> response = await coordinator.post("/subscribe")  # doctest: +SKIP
"""

import asyncio
import logging
import uuid
from collections import deque
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional

from formbinder.config import FormConfig
from formbinder.errors import SubmissionInProgressError
from formbinder.events import EventEmitter, FormEvent
from formbinder.form import FormState
from formbinder.normalization import extract_errors, response_payload
from formbinder.routes import RouteResolver
from formbinder.transport import HttpxTransport, Transport
from formbinder.types import ConcurrencyPolicy, EventType

logger = logging.getLogger(__name__)

# Methods whose field set travels as query parameters (case-sensitive)
QUERY_METHODS = frozenset({"get"})

# Events retained per coordinator by default
DEFAULT_MAX_EVENTS = 500


class SubmissionCoordinator:
    """Orchestrates form submissions through a transport.

    Attributes:
        form: The form whose fields are submitted and whose state is updated
        config: Configuration (defaults to the form's config)
        routes: Resolver applied to every submission URL

    Examples:
        >>> form = FormState({"q": "python"})
        >>> coordinator = SubmissionCoordinator(form)
        >>> coordinator.build_request("get", "/search")
        {'url': '/search', 'method': 'get', 'params': {'q': 'python'}}
    """

    def __init__(
        self,
        form: FormState,
        transport: Optional[Transport] = None,
        config: Optional[FormConfig] = None,
        emitter: Optional[EventEmitter] = None,
        max_events: Optional[int] = DEFAULT_MAX_EVENTS,
    ):
        """Initialize the coordinator.

        Args:
            form: The form to submit
            transport: Transport performing requests; an HttpxTransport is
                created on first use when omitted
            config: Configuration; defaults to the form's config
            emitter: Optional emitter notified of lifecycle events
            max_events: Number of most recent events kept in the history
                (None keeps every event)
        """
        self.form = form
        self.config = config or form.config
        self.routes = RouteResolver(self.config.routes)
        self.emitter = emitter
        self._transport = transport
        # Default transports created here; closed by aclose()
        self._owned_transports: List[HttpxTransport] = []
        self._events: Deque[FormEvent] = deque(maxlen=max_events)

    @property
    def transport(self) -> Transport:
        """The transport in use, creating the default one if needed."""
        if self._transport is None:
            self._transport = HttpxTransport()
            self._owned_transports.append(self._transport)
        return self._transport

    @transport.setter
    def transport(self, transport: Optional[Transport]) -> None:
        """Replace the transport; None restores the lazily created default."""
        self._transport = transport

    async def aclose(self) -> None:
        """Close every default transport this coordinator created.

        Injected transports belong to the caller and are left open.
        """
        owned, self._owned_transports = self._owned_transports, []
        for transport in owned:
            if self._transport is transport:
                self._transport = None
            await transport.aclose()

    async def __aenter__(self) -> "SubmissionCoordinator":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def build_request(self, method: str, url: str, **extra: Any) -> Dict[str, Any]:
        """Build the transport options for a submission of the current fields.

        Get-style methods send the fields as ``params``; every other method
        sends them as ``data``. ``extra`` options override computed ones.
        """
        options: Dict[str, Any] = {"url": self.routes.resolve(url), "method": method}
        if method in QUERY_METHODS:
            options["params"] = self.form.data()
        else:
            options["data"] = self.form.data()
        options.update(extra)
        return options

    async def submit(self, method: str, url: str, **extra: Any) -> Any:
        """Submit the form's fields.

        Args:
            method: HTTP method name ("get", "post", "put", "patch", "delete")
            url: Route name or literal URL
            **extra: Extra transport options (headers, timeout...)

        Returns:
            The transport's response, unmodified

        Raises:
            SubmissionInProgressError: If the REJECT policy is configured and
                the form is busy
            Exception: Whatever the transport raised, re-raised unchanged
        """
        if self.form.busy and self.config.concurrency == ConcurrencyPolicy.REJECT:
            raise SubmissionInProgressError()

        self.form.start_processing()
        options = self.build_request(method, url, **extra)
        self._emit(EventType.SUBMISSION_STARTED, {"method": method, "url": options["url"]})
        logger.debug("Submitting form via %s %s", method, options["url"])

        try:
            response = await self.transport.request(**options)
        except asyncio.CancelledError:
            self.form.fail_processing()
            raise
        except Exception as exc:
            self._handle_failure(exc)
            raise

        self.form.finish_processing()
        self._emit(EventType.SUBMISSION_SUCCEEDED, {"method": method, "url": options["url"]})
        logger.debug("Submission via %s %s succeeded", method, options["url"])
        return response

    def _handle_failure(self, exc: Exception) -> None:
        """Reconcile a failed submission into the form."""
        self.form.fail_processing()

        response = getattr(exc, "response", None)
        if response is not None:
            errors = extract_errors(response_payload(response), self.config.error_message)
            self.form.errors.set(errors)
            self._emit(EventType.ERRORS_RECORDED, {"errors": self.form.errors.all()})

        self._emit(
            EventType.SUBMISSION_FAILED,
            {"error": str(exc), "hasResponse": response is not None},
        )
        logger.debug("Submission failed: %s", exc)

    async def get(self, url: str, **extra: Any) -> Any:
        """Submit the form via a GET request."""
        return await self.submit("get", url, **extra)

    async def post(self, url: str, **extra: Any) -> Any:
        """Submit the form via a POST request."""
        return await self.submit("post", url, **extra)

    async def put(self, url: str, **extra: Any) -> Any:
        """Submit the form via a PUT request."""
        return await self.submit("put", url, **extra)

    async def patch(self, url: str, **extra: Any) -> Any:
        """Submit the form via a PATCH request."""
        return await self.submit("patch", url, **extra)

    async def delete(self, url: str, **extra: Any) -> Any:
        """Submit the form via a DELETE request."""
        return await self.submit("delete", url, **extra)

    def _emit(self, event_type: EventType, payload: Dict[str, Any]) -> None:
        event = FormEvent(
            event_id=f"evt_{uuid.uuid4().hex[:16]}",
            type=event_type,
            ts=datetime.now(timezone.utc),
            state=self.form.state,
            payload=payload,
        )
        self._events.append(event)
        if self.emitter is not None:
            self.emitter.emit(event)

    def get_events(self) -> List[FormEvent]:
        """Get the retained events emitted by this coordinator, oldest first."""
        return list(self._events)

    def clear_events(self) -> None:
        """Drop the retained event history."""
        self._events.clear()


__all__ = [
    "SubmissionCoordinator",
    "QUERY_METHODS",
    "DEFAULT_MAX_EVENTS",
]
