from fastapi import status


class RelayError(Exception):
    """Base error; maps onto an HTTP status and a client-facing message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    public_message: str = "Internal Server Error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message

    @property
    def detail(self) -> str:
        # Internal failures never leak SDK error text to the client
        if self.status_code >= 500:
            return self.public_message
        return self.message


class ValidationError(RelayError):
    status_code = status.HTTP_400_BAD_REQUEST
    public_message = "Bad Request"


class NotFoundError(RelayError):
    status_code = status.HTTP_404_NOT_FOUND
    public_message = "Not Found"


class StorageError(RelayError):
    pass


class DirectoryError(RelayError):
    pass


class CompletionError(RelayError):
    pass
