"""
An NNTP session over an already connected byte stream.
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

import builtins
import io
import logging
import socket
import ssl
from collections.abc import Iterable
from types import TracebackType
from typing import TYPE_CHECKING, BinaryIO, Literal, Union

from . import utils
from .codec import LineCodec
from .errors import (
    NNTPCapabilitiesNotPopulated,
    NNTPCapabilityNotFound,
    NNTPDataError,
    NNTPError,
    NNTPProtocolError,
    NNTPTLSActiveError,
    NNTPTransportError,
)
from .status import ANY, expect_code
from .types import Article, Group, Specifier, SSLMode

if TYPE_CHECKING:
    from typing_extensions import Self

    from .types import Transport

__all__ = ["Session", "connect", "dial"]

log = logging.getLogger(__name__)

ArticleSource = Union[bytes, bytearray, memoryview, BinaryIO, Iterable[bytes]]

_CHUNK_SIZE = 8192


def _chunks(source: ArticleSource) -> Iterable[bytes]:
    if isinstance(source, (bytes, bytearray, memoryview)):
        yield bytes(source)
        return
    read = getattr(source, "read", None)
    if read is not None:
        while True:
            chunk = read(_CHUNK_SIZE)
            if not chunk:
                return
            yield chunk
        return
    for chunk in source:
        if not isinstance(chunk, (bytes, bytearray, memoryview)):
            raise TypeError("Article must be bytes")
        yield chunk


class Session:
    """NNTP Session.

    Drives the command/response exchanges of a single NNTP connection. A
    session is strictly synchronous: every command must have been answered,
    and any block handed out must have been read to its end, before the next
    command can be issued.

    Sessions are created with connect() (from an already connected transport)
    or dial() (from a host and port). They are not thread safe.

    Note: All commands can raise the following exceptions:
            NNTPTransportError
            NNTPProtocolError
            NNTPReplyError (NNTPTemporaryError, NNTPPermanentError)
            NNTPSyncError
    """

    def __init__(
        self,
        codec: LineCodec,
        banner: str,
        tls_active: bool = False,
        host: Union[str, None] = None,
    ) -> None:
        self._codec = codec
        self.host = host
        self._banner = banner
        self._tls_active = tls_active
        self._capabilities: Union[list[str], None] = None

    def __enter__(self) -> Self:
        """Support for the 'with' context manager statement."""
        return self

    def __exit__(
        self,
        exc_type: Union[type[BaseException], None],
        exc_val: Union[BaseException, None],
        exc_tb: Union[TracebackType, None],
    ) -> Literal[False]:
        """Support for the 'with' context manager statement.

        Sends QUIT unless a block is still being read, in which case the
        transport is just closed.
        """
        if self._codec.reading:
            self.close()
            return False
        try:
            self.quit()
        except NNTPError:
            self.close()
            raise
        return False

    @property
    def banner(self) -> str:
        """The greeting message sent by the server on connect."""
        return self._banner

    @property
    def tls_active(self) -> bool:
        return self._tls_active

    @property
    def capability_list(self) -> Union[list[str], None]:
        """The cached capability lines, None if they haven't been fetched."""
        if self._capabilities is None:
            return None
        return list(self._capabilities)

    def _status(self, expect: int) -> tuple[int, str]:
        code, message = self._codec.read_status_line()
        log.debug("< %d %s", code, message)
        return expect_code(code, message, expect)

    def _command(
        self, verb: str, args: Union[str, None] = None, expect: int = ANY
    ) -> tuple[int, str]:
        cmd = f"{verb} {args}" if args else verb
        log.debug("> %s", f"{verb} ****" if verb == "AUTHINFO PASS" else cmd)
        self._codec.write_line(cmd)
        return self._status(expect)

    def command(self, line: str, expect: int = ANY) -> tuple[int, str]:
        """Send a low-level command and read the response status.

        Args:
            line: The full command line, without the CRLF.
            expect: The expected response code. A 3 digit code must match
                exactly, a 1 or 2 digit code matches any response code that
                starts with it ("2" accepts 200 to 299) and -1 (the default)
                accepts anything.

        Returns:
            A tuple of status code and status message.

        Note: Any block that follows the status is left unread. Don't use this
            for commands that return a block.
        """
        return self._command(line, None, expect)

    def close(self) -> None:
        """Closes the transport.

        Once this method has been called, no other methods of the Session
        object should be called.
        """
        log.debug("closing session")
        self._codec.close()

    def quit(self) -> None:
        """QUIT command.

        Tells the server to close the connection and then closes the
        transport.

        See <http://tools.ietf.org/html/rfc3977#section-5.4>
        """
        self._command("QUIT", None, 205)
        self.close()

    def mode_reader(self) -> bool:
        """MODE READER command.

        See <http://tools.ietf.org/html/rfc3977#section-5.3>

        Returns:
            Boolean value indicating whether posting is allowed or not.
        """
        code, _ = self._command("MODE READER", None, 20)
        return code == 200

    def authenticate(self, username: str, password: str) -> str:
        """AUTHINFO USER/PASS authentication.

        See <https://tools.ietf.org/html/rfc4643#section-2.3>

        Returns:
            The message of the final (281) response.

        Raises:
            NNTPReplyError: If the server doesn't ask for a password after the
                username or rejects the credentials.
        """
        self._command("AUTHINFO USER", username, 381)
        _, message = self._command("AUTHINFO PASS", password, 281)
        return message

    # capabilities
    def capabilities(self) -> list[str]:
        """CAPABILITIES command.

        Fetches the capabilities of the server and replaces the cached ones.
        Lines are upper cased.

        See <https://datatracker.ietf.org/doc/html/rfc3977#section-5.2.2>

        Returns:
            The capability lines.
        """
        self._command("CAPABILITIES", None, 101)
        caps = [line.upper() for line in self._codec.read_block_text()]
        self._capabilities = caps
        return list(caps)

    def get_capability(self, label: str) -> Union[str, None]:
        """Look up a cached capability line by its label.

        No command is sent. The label is case insensitive.

        Returns:
            The first capability line with a matching label, or None if there
            is none or the capabilities have not been fetched.
        """
        label = label.upper()
        for line in self._capabilities or ():
            tokens = utils.capability_tokens(line)
            if tokens and tokens[0] == label:
                return line
        return None

    def has_capability_argument(self, label: str, argument: str) -> bool:
        """Check whether a capability lists an argument.

        Here, "argument" means any token after the label in a capability
        line. Some, like "ACTIVE" in "LIST ACTIVE", are not command arguments
        but keywords of the variants of a command.

        See <https://datatracker.ietf.org/doc/html/rfc3977#section-9.5>

        Raises:
            NNTPCapabilitiesNotPopulated: If capabilities() hasn't been called.
            NNTPCapabilityNotFound: If there is no such capability.
        """
        if self._capabilities is None:
            raise NNTPCapabilitiesNotPopulated("Capabilities unpopulated")
        line = self.get_capability(label)
        if line is None:
            raise NNTPCapabilityNotFound(f"No such capability {label.upper()}")
        return argument.upper() in utils.capability_tokens(line)[1:]

    def start_tls(
        self,
        context: Union[ssl.SSLContext, None] = None,
        server_hostname: Union[str, None] = None,
    ) -> None:
        """STARTTLS command.

        Upgrades the connection to TLS in place and then refetches the
        capabilities, since those advertised over plain text can't be trusted.

        See <https://datatracker.ietf.org/doc/html/rfc4642>

        Args:
            context: The SSL context to wrap the transport with. Defaults to
                ssl.create_default_context().
            server_hostname: The host name to verify the certificate against.
                Defaults to the host the session was connected to.

        Raises:
            NNTPTLSActiveError: If TLS is already active. Nothing is sent.
            ValueError: If the context checks host names and there is no
                host name to check. Nothing is sent.
            NNTPTransportError: If the TLS handshake fails.
        """
        if self._tls_active:
            raise NNTPTLSActiveError("TLS already active")
        if context is None:
            context = ssl.create_default_context()
        if server_hostname is None:
            server_hostname = self.host
        if getattr(context, "check_hostname", False) and not server_hostname:
            raise ValueError("check_hostname requires server_hostname")
        self._command("STARTTLS", None, 382)
        if self._codec.pending:
            raise NNTPProtocolError("Data received before TLS negotiation")
        try:
            transport = context.wrap_socket(
                self._codec.transport,  # type: ignore[arg-type]
                server_hostname=server_hostname,
            )
        except OSError as e:
            raise NNTPTransportError(f"TLS negotiation failed: {e}") from e
        self._codec, self._tls_active = LineCodec(transport), True
        log.debug("TLS negotiated")
        self.capabilities()

    # newsgroup commands
    def list(
        self, keyword: str = "", pattern: Union[str, None] = None
    ) -> builtins.list[Group]:
        """LIST command.

        Lines that can't be parsed as "name high low posting" are skipped.

        See <http://tools.ietf.org/html/rfc3977#section-7.6.3>

        Args:
            keyword: The LIST variant, empty for the default (ACTIVE).
            pattern: An optional wildmat restricting the newsgroups listed.
                A pattern without a keyword lists ACTIVE.

        Returns:
            The newsgroups in the order the server listed them.
        """
        if pattern and not keyword:
            keyword = "ACTIVE"
        args = " ".join(arg for arg in (keyword, pattern) if arg)
        self._command("LIST", args, 215)
        groups = []
        for line in self._codec.read_block_text():
            try:
                groups.append(utils.parse_list_line(line))
            except NNTPDataError:
                log.debug("skipping invalid LIST line %r", line)
        return groups

    def group(self, name: str) -> Group:
        """GROUP command.

        Selects a newsgroup.

        See <http://tools.ietf.org/html/rfc3977#section-6.1.1>

        Returns:
            The newsgroup with the estimated article count and water marks
            reported by the server.

        Raises:
            NNTPDataError: If the status message can't be parsed.
        """
        _, message = self._command("GROUP", name, 211)
        return utils.parse_group_status(message)

    # article commands
    def _articleish(
        self, verb: str, expect: int, specifier: Union[Specifier, None]
    ) -> Article:
        args = None
        if specifier is not None:
            args = utils.unparse_specifier(specifier)
        _, message = self._command(verb, args, expect)
        number, remainder = utils.parse_article_status(message, verb)
        return Article(number, remainder, self._codec.read_block())

    def article(self, specifier: Union[Specifier, None] = None) -> Article:
        """ARTICLE command.

        See <https://tools.ietf.org/html/rfc3977#section-6.2.1>

        Args:
            specifier: A message-id as a string, or an article number as an
                integer. None (the default) uses the current article.

        Returns:
            The article number, the rest of the status message and a lazy
            reader over the lines of the article. The reader must be read to
            its end before the next command is issued.
        """
        return self._articleish("ARTICLE", 220, specifier)

    def head(self, specifier: Union[Specifier, None] = None) -> Article:
        """HEAD command. Like article() but only the headers are presented."""
        return self._articleish("HEAD", 221, specifier)

    def body(self, specifier: Union[Specifier, None] = None) -> Article:
        """BODY command. Like article() but only the body is presented."""
        return self._articleish("BODY", 222, specifier)

    def post(self, article: ArticleSource) -> str:
        """POST command.

        See <https://tools.ietf.org/html/rfc3977#section-6.3.1>

        Args:
            article: The complete article, headers, an empty line and the
                body. Either bytes, a binary file object or an iterable of
                bytes. It is sent as is apart from line ending normalisation
                and dot-stuffing.

        Returns:
            The message of the final (240) response.

        Raises:
            TypeError: If the article is given as a string or a text file.
                Nothing is sent. An iterable that yields strings raises it
                part way through the article.

        Note: If writing the article fails the session is left in an unknown
            state and should not be reused.
        """
        if isinstance(article, (str, io.TextIOBase)):
            raise TypeError("Article must be bytes")
        self._command("POST", None, 340)
        with self._codec.open_block_writer() as writer:
            for chunk in _chunks(article):
                writer.write(chunk)
        _, message = self._status(240)
        return message

    # overview commands
    def list_overview_fmt(self) -> builtins.list[str]:
        """LIST OVERVIEW.FMT command.

        The presence of an OVER capability means this LIST variant is
        supported.

        See <https://datatracker.ietf.org/doc/html/rfc3977#section-8.4>

        Returns:
            The field names of the overview database, as sent.
        """
        self._command("LIST", "OVERVIEW.FMT", 215)
        return list(self._codec.read_block_text())

    def over(self, specifier: Union[Specifier, None] = None) -> builtins.list[str]:
        """OVER command.

        See <https://datatracker.ietf.org/doc/html/rfc3977#section-8.3>

        Returns:
            The raw overview lines, fields separated by tabs.
        """
        args = None
        if specifier is not None:
            args = utils.unparse_specifier(specifier)
        self._command("OVER", args, 224)
        return list(self._codec.read_block_text())


def connect(
    transport: Transport, expect: int = ANY, host: Union[str, None] = None
) -> Session:
    """Start a session on a connected transport.

    Reads the server greeting. A transport that is already an SSL socket
    starts the session with TLS active.

    Args:
        transport: A connected socket, or anything with the same sendall(),
            recv() and close() methods.
        expect: The expected greeting code, any code by default.
        host: The server host name, used to verify the certificate on
            start_tls().

    Raises:
        NNTPTransportError: If the greeting can't be read.
        NNTPProtocolError: If the greeting can't be parsed.
        NNTPReplyError: If the greeting code isn't expected.
    """
    codec = LineCodec(transport)
    code, message = codec.read_status_line()
    log.debug("< %d %s", code, message)
    expect_code(code, message, expect)
    return Session(
        codec,
        message,
        tls_active=isinstance(transport, ssl.SSLSocket),
        host=host,
    )


def dial(
    host: str,
    port: Union[int, None] = None,
    timeout: Union[float, None] = 30,
    ssl_mode: Union[SSLMode, None] = None,
    ssl_context: Union[ssl.SSLContext, None] = None,
) -> Session:
    """Connect to a usenet server and start a session.

    Args:
        host: Hostname for usenet server.
        port: Port for usenet server. Defaults to 563 for implicit TLS and
            119 otherwise.
        timeout: Socket timeout, applies to every read and write.
        ssl_mode: None for plain text, SSLMode.IMPLICIT to negotiate TLS on
            connect or SSLMode.STARTTLS to upgrade after the greeting.
        ssl_context: The SSL context to use, defaults to
            ssl.create_default_context().

    Raises:
        NNTPTransportError: If the connection can't be established.
    """
    if port is None:
        port = 563 if ssl_mode == SSLMode.IMPLICIT else 119
    log.debug("connecting to %s:%d", host, port)
    try:
        sock = socket.create_connection((host, port), timeout=timeout)
    except OSError as e:
        raise NNTPTransportError(f"Failed to connect to {host}:{port}: {e}") from e
    try:
        if ssl_mode == SSLMode.IMPLICIT:
            context = ssl_context or ssl.create_default_context()
            try:
                sock = context.wrap_socket(sock, server_hostname=host)
            except OSError as e:
                raise NNTPTransportError(f"TLS negotiation failed: {e}") from e
        session = connect(sock, host=host)
    except BaseException:
        sock.close()
        raise
    if ssl_mode == SSLMode.STARTTLS:
        try:
            session.start_tls(ssl_context)
        except BaseException:
            session.close()
            raise
    return session
