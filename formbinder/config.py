"""Static configuration for formbinder.

Process-wide defaults live here as module constants. ``FormConfig`` bundles
them (plus the named route table and the concurrency policy) into an
immutable object that is injected into forms and submission coordinators.

Usage:
    >>> from formbinder.config import FormConfig
    >>> config = FormConfig(routes={"users.update": "/users/{id}"})
    >>> config.error_message
    'Something went wrong. Please try again.'
    >>> "busy" in config.reserved_fields
    True
"""

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from formbinder.types import ConcurrencyPolicy


DEFAULT_ERROR_MESSAGE = "Something went wrong. Please try again."

# Key under which generic (non field-scoped) errors are stored
GENERIC_ERROR_KEY = "error"

# Bookkeeping attribute names that are never treated as form fields
RESERVED_FIELDS: FrozenSet[str] = frozenset(
    {"busy", "successful", "errors", "original_data", "transport"}
)


@dataclass(frozen=True)
class FormConfig:
    """Immutable configuration shared by a form and its coordinator.

    Attributes:
        error_message: Message installed when a failed response carries no
            usable payload
        reserved_fields: Attribute names excluded from the field set; always
            a superset of RESERVED_FIELDS
        routes: Named route table mapping route names to URL templates
        concurrency: Policy for a submit issued while the form is busy

    Examples:
        >>> config = FormConfig(reserved_fields={"meta"})
        >>> sorted(config.reserved_fields)
        ['busy', 'errors', 'meta', 'original_data', 'successful', 'transport']
    """
    error_message: str = DEFAULT_ERROR_MESSAGE
    reserved_fields: FrozenSet[str] = RESERVED_FIELDS
    routes: Mapping[str, str] = field(default_factory=dict)
    concurrency: ConcurrencyPolicy = ConcurrencyPolicy.ALLOW

    def __post_init__(self):
        """Normalize fields."""
        object.__setattr__(
            self, "reserved_fields", frozenset(self.reserved_fields) | RESERVED_FIELDS
        )
        object.__setattr__(self, "routes", MappingProxyType(dict(self.routes)))

        # Convert string concurrency to ConcurrencyPolicy enum if needed
        if isinstance(self.concurrency, str):
            object.__setattr__(self, "concurrency", ConcurrencyPolicy(self.concurrency))

    def with_routes(self, routes: Mapping[str, str]) -> "FormConfig":
        """Return a copy of this config with additional named routes."""
        merged = dict(self.routes)
        merged.update(routes)
        return FormConfig(
            error_message=self.error_message,
            reserved_fields=self.reserved_fields,
            routes=merged,
            concurrency=self.concurrency,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "errorMessage": self.error_message,
            "reservedFields": sorted(self.reserved_fields),
            "routes": dict(self.routes),
            "concurrency": self.concurrency.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormConfig":
        """Create FormConfig from dict."""
        reserved: Iterable[str] = data.get("reservedFields") or ()
        return cls(
            error_message=data.get("errorMessage", DEFAULT_ERROR_MESSAGE),
            reserved_fields=frozenset(reserved),
            routes=data.get("routes") or {},
            concurrency=data.get("concurrency", ConcurrencyPolicy.ALLOW),
        )

    @classmethod
    def from_env(
        cls,
        prefix: str = "FORMBINDER_",
        dotenv_path: Optional[str] = None,
    ) -> "FormConfig":
        """Build a config from environment variables.

        Loads ``dotenv_path`` (or a ``.env`` found from the working directory)
        first; variables already set in the environment take precedence.

        Recognised variables:
            {prefix}ERROR_MESSAGE: default error message
            {prefix}CONCURRENCY: "allow" or "reject"

        Raises:
            ValueError: If the concurrency variable holds an unknown policy
        """
        load_dotenv(dotenv_path or find_dotenv(usecwd=True))
        concurrency = os.getenv(f"{prefix}CONCURRENCY")
        return cls(
            error_message=os.getenv(f"{prefix}ERROR_MESSAGE") or DEFAULT_ERROR_MESSAGE,
            concurrency=(
                concurrency.strip().lower() if concurrency else ConcurrencyPolicy.ALLOW
            ),
        )


DEFAULT_CONFIG = FormConfig()


__all__ = [
    "DEFAULT_ERROR_MESSAGE",
    "GENERIC_ERROR_KEY",
    "RESERVED_FIELDS",
    "FormConfig",
    "DEFAULT_CONFIG",
]
