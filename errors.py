"""Error taxonomy shared by the gateway, the extractor and the routes."""


class AppError(Exception):
    """Base class for failures that map onto an HTTP status."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(AppError):
    """Missing or unusable AI settings (key, base URL, model)."""

    status_code = 400


class ValidationError(AppError):
    """A required request field is missing or malformed."""

    status_code = 400


class UpstreamError(AppError):
    """The AI provider answered with an error or could not be reached."""

    status_code = 502


class ParseError(AppError):
    """No usable JSON could be recovered from the model output."""

    status_code = 502
