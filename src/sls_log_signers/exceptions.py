class BaseLogSDKException(Exception):
    """Top-level exception to capture SDK-related errors."""

    ...


class InvalidRequestException(BaseLogSDKException, ValueError):
    """The request has an unsupported method or a relative path."""

    ...


class ExpiredIdentityException(BaseLogSDKException, ValueError):
    """The credential's STS token expired before the request was signed."""

    ...


class LogServiceError(BaseLogSDKException):
    """The log service received the request and rejected it.

    Raised only for a delivered response whose JSON body carries an error
    envelope. Transport failures are never wrapped in this type.
    """

    kind = "service"

    def __init__(self, message: str, code: str, request_id: str = "unknown"):
        super().__init__(message)
        self.message = message
        self.code = code
        self.request_id = request_id

    @property
    def name(self) -> str:
        return f"{self.code}Error"

    def __str__(self) -> str:
        return f"{self.name}: {self.message} (request id: {self.request_id})"
