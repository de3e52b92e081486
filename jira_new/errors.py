"""Error taxonomy. Everything the CLI reports to the user derives from JiraNewError."""


class JiraNewError(Exception):
    """Base class for user-facing failures; the CLI prints these and exits 1."""


class ApiError(JiraNewError):
    """Jira answered with a non-2xx status."""

    def __init__(self, action: str, status_code: int, body: str) -> None:
        self.action = action
        self.status_code = status_code
        self.body = body
        super().__init__(f"Failed to {action} ({status_code}): {body}")


class EmptyResultError(JiraNewError):
    """Jira returned no projects at all."""


class ValidationError(JiraNewError):
    """A required input was empty or malformed."""


class UsageError(JiraNewError):
    """The command line itself is malformed."""


class NetworkError(JiraNewError):
    """The request never got an HTTP response (DNS, refused connection, timeout)."""
