from collections.abc import Iterator
from enum import Enum
from typing import NamedTuple, Protocol, Union

Range = Union[int, tuple[int], tuple[int, int]]

Specifier = Union[str, Range]


class Transport(Protocol):
    """The subset of the socket interface a session needs."""

    def sendall(self, data: bytes, /) -> None: ...

    def recv(self, bufsize: int, /) -> bytes: ...

    def close(self) -> None: ...


class PostingStatus(str, Enum):
    PERMITTED = "y"
    MODERATED = "m"
    NOT_PERMITTED = "n"

    @classmethod
    def parse(cls, token: str) -> "PostingStatus":
        """Map a LIST posting flag, anything unrecognised is NOT_PERMITTED."""
        if token == cls.PERMITTED.value:
            return cls.PERMITTED
        if token == cls.MODERATED.value:
            return cls.MODERATED
        return cls.NOT_PERMITTED


class Group(NamedTuple):
    name: str
    low: int
    high: int
    count: int
    """Estimated number of articles.

    Reported by the server for GROUP, derived from the water marks for LIST.
    """
    posting: PostingStatus = PostingStatus.NOT_PERMITTED


class Article(NamedTuple):
    number: int
    remainder: str
    """Rest of the status message, normally the message-id."""
    lines: Iterator[bytes]
    """Lazy reader over the dot-unstuffed lines of the response block."""

    def read(self) -> bytes:
        """Consume the block and return it as a single bytes object."""
        return b"".join(self.lines)


class SSLMode(str, Enum):
    IMPLICIT = "implicit"
    """Establish secure connection immediately.
    You need to use a different port (usually 563) in this mode.
    """

    STARTTLS = "starttls"
    """Establish secure connection dynamically after sending a `STARTTLS` command.
    This mode is not recommended. See <https://www.rfc-editor.org/rfc/rfc8143.html#section-2>
    You can use the same port (usually 119) this mode.
    """
