"""Wren exception hierarchy.

Shared across the resolver, the container locator, the decoration
strategy, and the stores so every module raises and catches the same types.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when configuration is invalid.

    Typically raised at startup, e.g. when ``DecorationStrategy`` compiles
    an ignore pattern that is not a valid regular expression.
    """


class InvalidArgument(WrenError, ValueError):  # noqa: N818 — mirrors ValueError
    """A caller passed a value the core refuses to work with.

    Signals programmer or configuration misuse (a reserved internal route
    name, an unknown lookup field), not a runtime data problem.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    The boundary layer catches these and renders the matching response.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — the requested resource does not exist."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class PageNotFound(NotFound):
    """No page matches the given locator.

    Raised by every resolution path. Always recoverable: the caller
    usually renders a standard not-found page.
    """

    def __init__(self, detail: str = "Unable to retrieve the page") -> None:
        super().__init__(detail=detail)
