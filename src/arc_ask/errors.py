"""User-facing error types for arc-ask.

Every failure is wrapped into one of these where it is first detected and then
propagated unchanged up to the CLI, which prints it and exits with status 1.
"""

from typing import Iterator, Sequence


class CLIError(Exception):
    """An error with a short message, optional cause, hint and next commands."""

    kind = "error"

    def __init__(
        self,
        message: str,
        cause: BaseException | str | None = None,
        hint: str | None = None,
        suggestions: Sequence[str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.hint = hint
        self.suggestions = list(suggestions or [])

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def format_lines(self) -> Iterator[str]:
        """Yield the lines shown to the user after the headline."""
        if self.hint:
            yield f"Hint: {self.hint}"
        if self.suggestions:
            yield "Try:"
            for suggestion in self.suggestions:
                yield f"  {suggestion}"


class InvalidInputError(CLIError):
    kind = "invalid-input"


class NotFoundError(CLIError):
    kind = "not-found"


class TemplateNotFound(NotFoundError):
    def __init__(self, name: str, **kwargs):
        super().__init__(f"template '{name}' not found", **kwargs)
        self.name = name


class TemplateError(CLIError):
    """A template file exists but cannot be parsed into a usable definition."""

    kind = "template"


class ReadError(CLIError):
    kind = "read"


class RenderError(CLIError):
    kind = "render"


class BackendError(CLIError):
    kind = "backend"


class BackendTimeoutError(BackendError):
    kind = "timeout"

    def __init__(self, timeout: float, **kwargs):
        super().__init__(f"AI request timed out after {timeout:g}s", **kwargs)
        self.timeout = timeout


class SerializationError(CLIError):
    kind = "serialization"
