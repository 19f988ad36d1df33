"""
NNTP status line parsing and response code matching.
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

from .errors import NNTPProtocolError, reply_error

__all__ = ["ANY", "code_matches", "expect_code", "parse_status"]


ANY = -1
"""Expectation that accepts any response code."""


def parse_status(line: str) -> tuple[int, str]:
    """Parse a status line.

    Args:
        line: A status line with or without its CRLF terminator.

    Returns:
        A tuple of status code and status message. The message is an empty
        string when the server sent none.

    Raises:
        NNTPProtocolError: If the line doesn't start with a 3 digit code
            followed by a space.
    """
    line = line.rstrip("\r\n")
    code = line[:3]
    if len(code) != 3 or not (code.isascii() and code.isdigit()):
        raise NNTPProtocolError("Invalid status code", line)
    if line[3:4] != " ":
        raise NNTPProtocolError("Invalid status separator", line)
    return int(code), line[4:]


def code_matches(code: int, expect: int) -> bool:
    """Check a response code against an expected code or code prefix.

    Args:
        code: The response status code.
        expect: -1 to accept anything; a 1 digit prefix (0-9) to accept a
            whole code family (2 accepts 200-299); a 2 digit prefix (10-99)
            to accept a decade (22 accepts 220-229); or a 3 digit code
            (100-999) which must match exactly.

    Returns:
        True if the code is accepted.

    Raises:
        ValueError: If expect is not one of the forms above.
    """
    if expect == ANY:
        return True
    if 0 <= expect <= 9:
        return expect * 100 <= code < expect * 100 + 100
    if 10 <= expect <= 99:
        return expect * 10 <= code < expect * 10 + 10
    if 100 <= expect <= 999:
        return code == expect
    raise ValueError(f"Invalid expected code {expect}")


def expect_code(code: int, message: str, expect: int) -> tuple[int, str]:
    """Validate a parsed status against an expectation.

    Raises:
        NNTPReplyError: If the code isn't accepted. Codes from 400 to 499
            raise NNTPTemporaryError and codes from 500 to 599 raise
            NNTPPermanentError.
    """
    if not code_matches(code, expect):
        raise reply_error(code, message, expect)
    return code, message
