"""formbinder: form state and submission lifecycle for HTTP endpoints.

formbinder binds a set of editable form fields to a remote endpoint:
- Field values with an immutable original snapshot (fill, reset, data)
- Submission lifecycle flags (busy, successful)
- Server validation errors normalized into a per-field error store
- Pluggable async transport (httpx by default) and named routes

Basic usage:
    >>> from formbinder import Form
    >>> form = Form({"email": "", "password": ""})
    >>> form.email = "ada@example.com"
    >>> form.data()
    {'email': 'ada@example.com', 'password': ''}
"""

__version__ = "0.1.0"
__author__ = "formbinder contributors"

# Version info
VERSION = (0, 1, 0)

# Core exports
from formbinder.config import FormConfig
from formbinder.errors import ErrorStore
from formbinder.form import FormState
from formbinder.runtime import Form
from formbinder.submission import SubmissionCoordinator
from formbinder.transport import HttpxTransport, TransportError

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "Form",
    "FormConfig",
    "FormState",
    "ErrorStore",
    "SubmissionCoordinator",
    "HttpxTransport",
    "TransportError",
]
