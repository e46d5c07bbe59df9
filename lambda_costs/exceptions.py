"""
Exceptions for the Lambda cost report.
"""


class MalformedFieldError(ValueError):
    """Raised when a REPORT field value cannot be converted to its type."""

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"could not parse {field}: {value!r}")


class PageRetrievalError(RuntimeError):
    """Raised when a page of log events cannot be fetched for a function."""

    def __init__(self, function_name: str, original_error):
        self.function_name = function_name
        self.original_error = original_error
        super().__init__(f"failed to get next page of logs for {function_name}: {original_error}")


class SetupError(RuntimeError):
    """Raised when credentials, account lookup or snapshot I/O fail."""


class CollectionInterrupted(RuntimeError):
    """Raised when log collection is interrupted by the user."""

    def __init__(self):
        super().__init__("log collection interrupted by user")


if __name__ == "__main__":
    pass
