"""Form facade combining field state and submission.

``Form`` is a FormState that can submit itself. It owns a
SubmissionCoordinator bound to its own fields and exposes the HTTP verbs
directly on the form, which is the usual entry point for application code.

Usage:
    >>> from formbinder.runtime import Form
    >>> form = Form({"email": "", "password": ""})
    >>> form.fill({"email": "ada@example.com", "password": "secret"})
    >>> response = await form.post("/login")  # doctest: +SKIP
    >>> form.successful  # doctest: +SKIP
    True
"""

from typing import Any, List, Mapping, Optional

from formbinder.config import FormConfig
from formbinder.events import EventEmitter, FormEvent
from formbinder.form import FormState
from formbinder.submission import SubmissionCoordinator
from formbinder.transport import Transport


class Form(FormState):
    """A form bound to a submission transport.

    Attributes:
        transport: The transport used for submissions; may be replaced at any
            time. Without one, an HttpxTransport is created on first use and
            closed by ``aclose`` (or ``async with``)

    Examples:
        >>> form = Form({"name": "Ada"}, config=FormConfig(routes={"users.show": "/users/{id}"}))
        >>> form.route("users.show", 7)
        '/users/7'
        >>> form.keys()
        ['name']
    """

    def __init__(
        self,
        data: Optional[Mapping[str, Any]] = None,
        transport: Optional[Transport] = None,
        config: Optional[FormConfig] = None,
        emitter: Optional[EventEmitter] = None,
    ):
        super().__init__(data, config=config)
        self._coordinator = SubmissionCoordinator(
            self, transport=transport, config=self.config, emitter=emitter
        )

    @property
    def coordinator(self) -> SubmissionCoordinator:
        return self._coordinator

    @property
    def transport(self) -> Transport:
        """The transport used for submissions (the default one is created on first use)."""
        return self._coordinator.transport

    @transport.setter
    def transport(self, transport: Optional[Transport]) -> None:
        self._coordinator.transport = transport

    async def aclose(self) -> None:
        """Close the default transport if this form created one."""
        await self._coordinator.aclose()

    async def __aenter__(self) -> "Form":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def submit(self, method: str, url: str, **extra: Any) -> Any:
        """Submit the form data via an HTTP request.

        Args:
            method: HTTP method name (get, post, put, patch, delete)
            url: Route name or literal URL
            **extra: Extra transport options

        Returns:
            The transport's response
        """
        return await self._coordinator.submit(method, url, **extra)

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

    def route(self, name: str, parameters: Any = None) -> str:
        """Resolve a named route with this form's route table."""
        return self._coordinator.routes.resolve(name, parameters)

    def get_events(self) -> List[FormEvent]:
        """Get the lifecycle events of this form's submissions."""
        return self._coordinator.get_events()


__all__ = [
    "Form",
]
