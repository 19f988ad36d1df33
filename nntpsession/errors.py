"""
NNTP session errors.
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

from typing import Union

__all__ = [
    "NNTPCapabilitiesNotPopulated",
    "NNTPCapabilityError",
    "NNTPCapabilityNotFound",
    "NNTPDataError",
    "NNTPError",
    "NNTPPermanentError",
    "NNTPProtocolError",
    "NNTPReplyError",
    "NNTPSyncError",
    "NNTPTLSActiveError",
    "NNTPTemporaryError",
    "NNTPTransportError",
    "reply_error",
]


class NNTPError(Exception):
    """Base class for all NNTP errors."""


class NNTPTransportError(NNTPError):
    """NNTP transport errors.

    Raised when reading from, writing to or closing the underlying stream
    fails, including when the server closes the stream. The session should be
    considered dead after one of these.
    """


class NNTPSyncError(NNTPError):
    """NNTP sync errors.

    Raised when a command is issued while a block reader handed out by a
    previous command has not yet been read up to its terminator.
    """


class NNTPReplyError(NNTPError):
    """NNTP response status errors."""

    def __init__(self, code: int, message: str, expected: int = -1) -> None:
        """NNTP response error.

        Args:
            code: The response status code.
            message: The response message.
            expected: The expected status code (or code prefix).
        """
        self.code = code
        self.message = message
        self.expected = expected
        super().__init__(code, message, expected)

    def __str__(self) -> str:
        return "%d %s" % (self.code, self.message)


class NNTPTemporaryError(NNTPReplyError):
    """NNTP temporary errors.

    Temporary errors have response codes from 400 to 499.
    """


class NNTPPermanentError(NNTPReplyError):
    """NNTP permanent errors.

    Permanent errors have response codes from 500 to 599.
    """


class NNTPProtocolError(NNTPError):
    """NNTP protocol error.

    Protocol errors are raised when the response status line is invalid.
    """

    def __init__(self, message: str, line: Union[str, bytes] = "") -> None:
        self.line = line
        super().__init__(message)


class NNTPDataError(NNTPProtocolError):
    """NNTP data error.

    Data errors are raised when a structured field of a response (a status
    message or a line of a block) cannot be parsed.
    """


class NNTPTLSActiveError(NNTPError):
    """Raised when STARTTLS is requested on an already encrypted session."""


class NNTPCapabilityError(NNTPError):
    """Base class for local capability lookup failures."""


class NNTPCapabilitiesNotPopulated(NNTPCapabilityError):
    """The capability list has not been fetched for this session."""


class NNTPCapabilityNotFound(NNTPCapabilityError):
    """The server did not advertise the requested capability."""


def reply_error(code: int, message: str, expected: int = -1) -> NNTPReplyError:
    """Build the reply error matching the family of a status code.

    Args:
        code: The response status code.
        message: The response message.
        expected: The expected status code (or code prefix).

    Returns:
        An NNTPTemporaryError for 4xx codes, an NNTPPermanentError for 5xx
        codes and a plain NNTPReplyError otherwise.
    """
    if 400 <= code <= 499:
        return NNTPTemporaryError(code, message, expected)
    if 500 <= code <= 599:
        return NNTPPermanentError(code, message, expected)
    return NNTPReplyError(code, message, expected)
