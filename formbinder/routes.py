"""Named route resolution.

Routes are a static table of URL templates keyed by name. Templates use
``{param}`` placeholders. Names that are not registered are used as literal
URLs, so a coordinator can be handed either a route name or a plain URL.

Usage:
    >>> resolver = RouteResolver({"users.show": "/users/{id}"})
    >>> resolver.resolve("users.show", 5)
    '/users/5'
    >>> resolver.resolve("/plain/url")
    '/plain/url'
"""

import re
from typing import Any, Dict, Mapping, Optional

# Characters whose escapes keep URL structure and are left encoded
URI_RESERVED = frozenset(";/?:@&=+$,#")

_ESCAPE_RUN = re.compile(r"(?:%[0-9A-Fa-f]{2})+")


def _decode_escape_run(match: "re.Match[str]") -> str:
    run = match.group(0)
    parts = []
    pending = bytearray()
    for start in range(0, len(run), 3):
        token = run[start:start + 3]
        byte = int(token[1:], 16)
        if chr(byte) in URI_RESERVED:
            if pending:
                parts.append(pending.decode("utf-8", "replace"))
                pending = bytearray()
            parts.append(token)
        else:
            pending.append(byte)
    if pending:
        parts.append(pending.decode("utf-8", "replace"))
    return "".join(parts)


def decode_template(template: str) -> str:
    """Percent-decode a URL template, keeping escapes of reserved characters.

    ``%7Bid%7D`` becomes ``{id}`` while ``%2F``, ``%3F``, ``%23``... stay
    encoded so the template's path and query structure is unchanged.
    Invalid UTF-8 sequences decode to U+FFFD.

    Examples:
        >>> decode_template("/files/a%2Fb/%7Bid%7D")
        '/files/a%2Fb/{id}'
    """
    return _ESCAPE_RUN.sub(_decode_escape_run, template)


class RouteResolver:
    """Resolve route names (or literal URLs) to URL strings."""

    def __init__(self, routes: Optional[Mapping[str, str]] = None):
        self._routes: Dict[str, str] = dict(routes or {})

    def has(self, name: str) -> bool:
        return name in self._routes

    def resolve(self, name: str, parameters: Any = None) -> str:
        """Resolve a route name with optional parameters.

        Args:
            name: Registered route name, or a literal URL
            parameters: Mapping of placeholder values; any other non-None
                value is shorthand for ``{"id": value}``

        Returns:
            The URL with the first occurrence of each ``{key}`` substituted
        """
        url = name
        if name in self._routes:
            # Templates may be stored percent-encoded
            url = decode_template(self._routes[name])

        if parameters is None:
            parameters = {}
        elif not isinstance(parameters, Mapping):
            parameters = {"id": parameters}

        for key, value in parameters.items():
            url = url.replace(f"{{{key}}}", str(value), 1)

        return url


__all__ = [
    "RouteResolver",
    "decode_template",
]
