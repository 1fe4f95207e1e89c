class RecipeAppError(Exception):
    """Base error; carries the HTTP status the API answers with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RecipeAppError):
    status_code = 400


class ConfigurationError(RecipeAppError):
    status_code = 500


class UpstreamError(RecipeAppError):
    """The generation webhook answered with a non-success status or could not be reached."""
    status_code = 502


class UpstreamEmptyResponseError(UpstreamError):
    pass


class UpstreamParseError(UpstreamError):
    def __init__(self, message: str, raw_body: str = ""):
        super().__init__(message)
        self.raw_body = raw_body


class StorageConnectionError(RecipeAppError):
    status_code = 503


class StorageOperationError(RecipeAppError):
    status_code = 500
