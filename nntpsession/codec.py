"""
NNTP line protocol codec.
Copyright (C) 2013-2024  Byron Platt

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see <http://www.gnu.org/licenses/>.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from types import TracebackType
from typing import TYPE_CHECKING, Literal

from .errors import NNTPSyncError, NNTPTransportError
from .fifo import BytesFifo
from .status import parse_status

if TYPE_CHECKING:
    from typing_extensions import Self

    from .types import Transport

__all__ = ["BlockWriter", "LineCodec"]


CRLF = b"\r\n"
TERMINATOR = b".\r\n"


class LineCodec:
    """Translates between a byte stream and NNTP lines.

    Status lines and commands are text; the lines of a block are left as
    bytes.
    """

    encoding = "utf-8"
    errors = "surrogateescape"

    def __init__(self, transport: Transport, recv_size: int = 4096) -> None:
        self.transport = transport
        self.recv_size = recv_size
        self._buffer = BytesFifo()
        self._reading = False

    @property
    def pending(self) -> int:
        """Number of received bytes that have not been consumed yet."""
        return len(self._buffer)

    @property
    def reading(self) -> bool:
        """True while a block reader has not reached its terminator."""
        return self._reading

    def _recv(self) -> None:
        """Reads data from the transport into the buffer.

        Raises:
            NNTPTransportError: When the read fails or the stream has ended.
        """
        try:
            data = self.transport.recv(self.recv_size)
        except OSError as e:
            raise NNTPTransportError(f"Failed to read from transport: {e}") from e
        if not data:
            raise NNTPTransportError("Connection closed by server")
        self._buffer.write(data)

    def _line(self) -> bytes:
        while True:
            line = self._buffer.readline()
            if line:
                return line
            self._recv()

    def send(self, data: bytes) -> None:
        """Writes raw bytes to the transport.

        Raises:
            NNTPTransportError: When the write fails.
        """
        try:
            self.transport.sendall(data)
        except OSError as e:
            raise NNTPTransportError(f"Failed to write to transport: {e}") from e

    def write_line(self, text: str) -> None:
        """Sends a single command line.

        Raises:
            NNTPSyncError: If a block reader is still active.
            NNTPTransportError: When the write fails.
        """
        if self._reading:
            raise NNTPSyncError("Command issued while a block reader is active")
        self.send(text.encode(self.encoding, self.errors) + CRLF)

    def read_status_line(self) -> tuple[int, str]:
        """Reads and parses a status line.

        Returns:
            A tuple of status code and status message.

        Raises:
            NNTPTransportError: If the stream ends or the read fails.
            NNTPProtocolError: If the status line can't be parsed.
        """
        line = self._line()
        return parse_status(line.decode(self.encoding, self.errors))

    def read_block(self) -> Iterator[bytes]:
        """Starts reading a dot terminated block.

        The codec is considered busy from this call until the returned
        iterator consumes the terminating line, so no further commands can be
        written until the block has been read in full.

        Returns:
            An iterator over the lines of the block. Each line keeps its CRLF
            and has had one leading period removed if it was dot-stuffed. The
            terminating line is consumed but not yielded.
        """
        self._reading = True
        return self._block()

    def _block(self) -> Iterator[bytes]:
        while True:
            line = self._line()
            if line == TERMINATOR:
                break
            if line.startswith(b"."):
                line = line[1:]
            yield line
        self._reading = False

    def read_block_text(self) -> Iterator[str]:
        """Like read_block() but yields decoded lines without the CRLF."""
        return (
            line[: -len(CRLF)].decode(self.encoding, self.errors)
            for line in self.read_block()
        )

    def open_block_writer(self) -> BlockWriter:
        return BlockWriter(self)

    def close(self) -> None:
        """Closes the transport.

        Raises:
            NNTPTransportError: If closing the transport fails.
        """
        self._buffer.clear()
        try:
            self.transport.close()
        except OSError as e:
            raise NNTPTransportError(f"Failed to close transport: {e}") from e


class BlockWriter:
    """Writes a dot terminated block.

    Data can be written in arbitrary chunks. It is split into lines on LF,
    every line is sent with a CRLF terminator and lines that start with a
    period are dot-stuffed. Closing the writer sends the terminating line,
    exactly once.
    """

    def __init__(self, codec: LineCodec) -> None:
        self._codec = codec
        self._partial = b""
        self.closed = False

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> Literal[False]:
        # a failed copy leaves the block unterminated
        if exc_type is None:
            self.close()
        return False

    @staticmethod
    def _stuff(line: bytes) -> bytes:
        if line.endswith(b"\r"):
            line = line[:-1]
        if line.startswith(b"."):
            line = b"." + line
        return line + CRLF

    def write(self, data: bytes) -> int:
        if self.closed:
            raise ValueError("write to closed block writer")
        *lines, self._partial = (self._partial + bytes(data)).split(b"\n")
        if lines:
            self._codec.send(b"".join(self._stuff(line) for line in lines))
        return len(data)

    def writelines(self, lines: Iterable[bytes]) -> None:
        for line in lines:
            self.write(line)

    def close(self) -> None:
        """Flushes any unterminated last line and sends the terminator."""
        if self.closed:
            return
        self.closed = True
        data = self._stuff(self._partial) if self._partial else b""
        self._partial = b""
        self._codec.send(data + TERMINATOR)
