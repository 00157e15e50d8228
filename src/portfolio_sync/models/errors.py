"""Exception types raised by the portfolio sync pipeline."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when required configuration or credentials are missing or invalid.

    This is the only fatal error class: it aborts a run before any fetch begins.
    """


class TransportError(RuntimeError):
    """Raised when a document source cannot be reached or answers with an error.

    Attributes:
        project_id: Identifier of the project being fetched, if known.
        status_code: HTTP status code, if the failure came from an HTTP response.
    """

    def __init__(
        self, message: str, *, project_id: str | None = None, status_code: int | None = None
    ) -> None:
        super().__init__(message)
        self.project_id = project_id
        self.status_code = status_code


class FrontmatterParseError(ValueError):
    """Raised when a document's header block is not valid YAML mapping data."""
