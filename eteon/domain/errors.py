"""
Error taxonomy for the relay.

Only ConfigurationError is fatal. Media and upstream failures are recovered
at the message boundary, markup rejections inside the delivery fallback.
"""


class RelayError(Exception):
    """Base class for all relay errors"""


class ConfigurationError(RelayError):
    """Required configuration is missing or invalid"""


class MediaRetrievalError(RelayError):
    """An attachment could not be fetched or was empty"""

    def __init__(self, message: str, file_id: str = ""):
        super().__init__(message)
        self.file_id = file_id


class UpstreamServiceError(RelayError):
    """The completion service call failed or timed out"""


class MarkupRejectedError(RelayError):
    """The chat channel refused the text because its markup did not parse"""
