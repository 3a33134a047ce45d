from enum import Enum


class FormatRejection(str, Enum):
    """Reason of an `InvalidSampleFormat`"""

    ENDIANNESS = "endianness"
    CHANNELS = "channels"
    RESOLUTION = "resolution"
    ENCODING = "encoding"
    CONTAINER = "container"


class DecodeError(Exception):
    """Base class of all sample decoding errors

    Attributes:
        kind (str): Error kind, the name of the concrete class
        message (str): Human-readable description
        cause (DecodeError | None): Wrapped error, if any
    """

    def __init__(self, message: str, cause: "DecodeError | None" = None):
        """Constructor

        Args:
            message (str): Human-readable description
            cause (DecodeError | None, optional): Wrapped error. Defaults to None.
        """

        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @property
    def kind(self) -> str:
        return type(self).__name__

    def __repr__(self) -> str:
        return f"{self.kind}(message={self.message!r}, cause={self.cause!r})"


class CannotReadFile(DecodeError):
    """File cannot be opened or read"""


class InvalidSampleFormat(DecodeError):
    """Sample format is not supported, or cannot be read from the container"""

    def __init__(self, message: str, reason: FormatRejection):
        super().__init__(message)
        self.reason = reason

    def __repr__(self) -> str:
        return f"{self.kind}(message={self.message!r}, reason={self.reason.value!r})"


class CannotAllocateMemory(DecodeError):
    """Raw audio data cannot be held in memory"""


class MalformedStream(DecodeError):
    """Compressed stream is not made of whole packets"""

    def __init__(self, message: str, reason: str = "packet alignment"):
        super().__init__(message)
        self.reason = reason


class MalformedBuffer(DecodeError):
    """Sample bytes do not hold a whole number of frames"""


class CannotCreateBuffer(DecodeError):
    """Sample buffer cannot be created, see `cause`"""
