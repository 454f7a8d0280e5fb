"""Domain exceptions surfaced through the HTTP adapter.

Error handling strategy:
    Storage, export, and LLM layers raise `HttpError` (or a subclass) when a
    failure must reach the client with a specific status code. The API layer
    renders them as `{"error": message}` JSON responses.
"""


class HttpError(Exception):
    """Failure carrying the HTTP status code it should be reported with."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class NotFoundError(HttpError):
    def __init__(self, message: str):
        super().__init__(404, message)


class ConflictError(HttpError):
    def __init__(self, message: str):
        super().__init__(409, message)
