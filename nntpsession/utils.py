"""
Field grammars for NNTP responses.
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

from .errors import NNTPDataError
from .types import Group, PostingStatus, Range, Specifier


def unparse_range(obj: Range) -> str:
    """Unparse a range argument.

    Args:
        obj: An article range. There are a number of valid formats; an integer
            specifying a single article or a tuple specifying an article range.
            If the range doesn't specify a last article then all articles from
            the first specified article up to the current last article for the
            group are included.

    Returns:
        The range as a string that can be used by an NNTP command.

    Note: Sample valid formats.
        4678
        (4245,)
        (4245, 5234)
    """
    # bool is an int but never a valid article number
    if isinstance(obj, int) and not isinstance(obj, bool):
        return str(obj)

    if isinstance(obj, tuple):
        if len(obj) == 1:
            return f"{obj[0]}-"
        if len(obj) == 2:
            return f"{obj[0]}-{obj[1]}"
        raise ValueError("Invalid range format")

    raise ValueError("Must be an integer or tuple")


def unparse_specifier(obj: Specifier) -> str:
    """Unparse a message-id, article number or range argument.

    Args:
        obj: A message id as a string or a range as specified by
            unparse_range().

    Raises:
        ValueError: If obj is not a valid message id or range format. See
            unparse_range() for valid range formats.

    Returns:
        A specifier as a string that can be used by an NNTP command.
    """
    if isinstance(obj, str):
        return obj

    return unparse_range(obj)


def parse_list_line(line: str) -> Group:
    """Parse a LIST ACTIVE line.

    The format is "name high low posting", four fields separated by single
    spaces. Note that the water marks come in the opposite order to the GROUP
    status.

    Args:
        line: A line of the LIST response without its CRLF.

    Returns:
        The newsgroup. The count is estimated from the water marks.

    Raises:
        NNTPDataError: If there aren't exactly four fields or a water mark is
            not an integer.
    """
    parts = line.split(" ")
    if len(parts) != 4:
        raise NNTPDataError("Invalid LIST line", line)
    name, high, low, posting = parts
    try:
        high_n = int(high)
        low_n = int(low)
    except ValueError:
        raise NNTPDataError("Invalid LIST line", line)
    count = high_n - low_n + 1 if high_n >= low_n else 0
    return Group(name, low_n, high_n, count, PostingStatus.parse(posting))


def parse_group_status(message: str) -> Group:
    """Parse the status message of a GROUP response.

    The format is "count low high name", four fields separated by single
    spaces.

    Raises:
        NNTPDataError: If the message can't be parsed.
    """
    parts = message.split(" ")
    if len(parts) != 4:
        raise NNTPDataError(f'Invalid GROUP status "{message}"', message)
    try:
        count, low, high = int(parts[0]), int(parts[1]), int(parts[2])
    except ValueError:
        raise NNTPDataError(f'Invalid GROUP status "{message}"', message)
    return Group(parts[3], low, high, count)


def parse_article_status(message: str, verb: str = "ARTICLE") -> tuple[int, str]:
    """Parse the status message of an ARTICLE, HEAD or BODY response.

    Args:
        message: The status message, "number remainder".
        verb: The command the status belongs to, used for error reporting.

    Returns:
        A tuple of article number and the rest of the message (normally the
        message-id).

    Raises:
        NNTPDataError: If the article number is not an integer.
    """
    parts = message.split(" ", 1)
    try:
        number = int(parts[0])
    except ValueError:
        raise NNTPDataError(f'Invalid {verb} status "{message}"', message)
    return number, parts[1] if len(parts) > 1 else ""


def capability_tokens(line: str) -> list[str]:
    """Split a capability line into its label and arguments.

    "Each capability line consists of one or more tokens, which MUST be
    separated by one or more space or TAB characters."

    See <https://datatracker.ietf.org/doc/html/rfc3977#section-3.3.1>
    """
    return line.split()
