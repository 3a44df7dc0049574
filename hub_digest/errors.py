class HubError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidFormat(HubError):
    """Image reference string can not be split into namespace, repository and tag."""


class ConfigurationError(HubError):
    """Missing required input or an input out of its allowed range."""


class TransportError(HubError):
    """Non-200 response or connection level failure for a single page request."""


class ParseError(HubError):
    """Page payload is not a valid tags listing."""


class TagNotFound(HubError):
    """Search finished without a matching image variant."""
