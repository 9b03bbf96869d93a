"""Feed domain exceptions."""

from firehose.core.domain.exceptions import DomainException


class FeedTransportError(DomainException):
    """Raised by a transport when a feed cannot be retrieved or parsed."""

    error_code = "FEED_TRANSPORT_ERROR"

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(message)


class FeedConfigError(DomainException):
    """Raised when the feed source configuration is invalid."""

    error_code = "FEED_CONFIG_ERROR"

    def __init__(self, message: str):
        super().__init__(f"Invalid feed configuration: {message}")
