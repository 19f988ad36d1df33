from __future__ import annotations

from typing import Callable, Union

import pytest

from nntpsession import Session, connect


class FakeTransport:
    """In-memory stand-in for a connected socket.

    Everything the server will send is queued up front. recv() hands it out
    at most chunk_size bytes at a time.
    """

    def __init__(self, *lines: Union[str, bytes], chunk_size: int = 0) -> None:
        self.incoming = bytearray()
        self.sent = bytearray()
        self.chunk_size = chunk_size
        self.closed = False
        self.feed(*lines)

    def feed(self, *lines: Union[str, bytes]) -> None:
        for line in lines:
            if isinstance(line, str):
                line = line.encode("utf-8")
            self.incoming += line + b"\r\n"

    def sendall(self, data: bytes) -> None:
        if self.closed:
            raise OSError(9, "Bad file descriptor")
        self.sent += data

    def recv(self, bufsize: int) -> bytes:
        if self.closed:
            raise OSError(9, "Bad file descriptor")
        if self.chunk_size:
            bufsize = min(bufsize, self.chunk_size)
        data = bytes(self.incoming[:bufsize])
        del self.incoming[:bufsize]
        return data

    def close(self) -> None:
        self.closed = True

    @property
    def commands(self) -> list[str]:
        return self.sent.decode("utf-8").split("\r\n")[:-1]


class FakeSSLContext:
    """Stand-in for ssl.SSLContext that "wraps" into a prepared transport."""

    def __init__(self, wrapped: FakeTransport) -> None:
        self.wrapped = wrapped
        self.calls: list[tuple[object, Union[str, None]]] = []

    def wrap_socket(
        self, sock: object, server_hostname: Union[str, None] = None
    ) -> FakeTransport:
        self.calls.append((sock, server_hostname))
        return self.wrapped


@pytest.fixture
def make_session() -> Callable[..., tuple[Session, FakeTransport]]:
    """Factory for sessions over a fake transport.

    The greeting is queued before the given server lines.
    """

    def factory(
        *lines: Union[str, bytes], chunk_size: int = 0
    ) -> tuple[Session, FakeTransport]:
        transport = FakeTransport(
            "200 news.example.com ready", *lines, chunk_size=chunk_size
        )
        session = connect(transport)
        return session, transport

    return factory
