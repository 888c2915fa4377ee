from typing import Optional


class KiiError(Exception):
    """Base class for every failure raised by the Kii client."""


class KiiTransportError(KiiError):
    """The request could not be sent or the response could not be read."""


class KiiSerializationError(KiiError):
    """A request body could not be encoded or a response body could not be decoded."""


class KiiRemoteError(KiiError):
    """
    The server answered with a status outside of 200-399.

    The message is the raw response body, exactly as the server sent it.
    """

    def __init__(self, body: str, status_code: Optional[int] = None):
        super().__init__(body)
        self.body = body
        self.status_code = status_code
