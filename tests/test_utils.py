from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from nntpsession.errors import NNTPDataError
from nntpsession.types import Group, PostingStatus
from nntpsession.utils import (
    capability_tokens,
    parse_article_status,
    parse_group_status,
    parse_list_line,
    unparse_range,
    unparse_specifier,
)

if TYPE_CHECKING:
    from nntpsession.types import Range, Specifier


@pytest.mark.parametrize(
    ("range", "expected"),
    [
        (4678, "4678"),
        ((1, 10), "1-10"),
        ((100,), "100-"),
        pytest.param(None, None, marks=pytest.mark.xfail(raises=ValueError)),
        pytest.param(True, None, marks=pytest.mark.xfail(raises=ValueError)),
        pytest.param((), None, marks=pytest.mark.xfail(raises=ValueError)),
        pytest.param((1, 10, 20), None, marks=pytest.mark.xfail(raises=ValueError)),
    ],
)
def test_unparse_range(range: Range, expected: str) -> None:  # noqa: A002
    assert unparse_range(range) == expected


@pytest.mark.parametrize(
    ("specifier", "expected"),
    [
        ("<msgid1@example.com>", "<msgid1@example.com>"),
        (3000234, "3000234"),
        ((1, 10), "1-10"),
        pytest.param(None, None, marks=pytest.mark.xfail(raises=ValueError)),
    ],
)
def test_unparse_specifier(specifier: Specifier, expected: str) -> None:
    assert unparse_specifier(specifier) == expected


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("y", PostingStatus.PERMITTED),
        ("m", PostingStatus.MODERATED),
        ("n", PostingStatus.NOT_PERMITTED),
        ("x", PostingStatus.NOT_PERMITTED),
        ("Y", PostingStatus.NOT_PERMITTED),
        ("=alt.other", PostingStatus.NOT_PERMITTED),
    ],
)
def test_posting_status(token: str, expected: PostingStatus) -> None:
    assert PostingStatus.parse(token) is expected


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("alt.test 100 1 y", Group("alt.test", 1, 100, 100, PostingStatus.PERMITTED)),
        ("local.test 0 1 m", Group("local.test", 1, 0, 0, PostingStatus.MODERATED)),
        ("junk 5 5 n", Group("junk", 5, 5, 1, PostingStatus.NOT_PERMITTED)),
        pytest.param(
            "bad.group notanumber 1 y",
            None,
            marks=pytest.mark.xfail(raises=NNTPDataError),
        ),
        pytest.param(
            "bad.group 1 notanumber y",
            None,
            marks=pytest.mark.xfail(raises=NNTPDataError),
        ),
        pytest.param("alt.test 10 20", None, marks=pytest.mark.xfail(raises=NNTPDataError)),
        pytest.param(
            "alt.test\t10\t20 y", None, marks=pytest.mark.xfail(raises=NNTPDataError)
        ),
    ],
)
def test_parse_list_line(line: str, expected: Group) -> None:
    assert parse_list_line(line) == expected


def test_parse_group_status() -> None:
    group = parse_group_status("50 1 50 alt.test")
    assert group.count == 50
    assert group.low == 1
    assert group.high == 50
    assert group.name == "alt.test"


@pytest.mark.parametrize(
    "message",
    ["1 2 3", "1 2 3 alt.test extra", "many 1 50 alt.test", "50 1 last alt.test", ""],
)
def test_parse_group_status_invalid(message: str) -> None:
    with pytest.raises(NNTPDataError, match="Invalid GROUP status"):
        parse_group_status(message)


@pytest.mark.parametrize(
    ("message", "expected"),
    [
        ("3000234 <45223423@example.com>", (3000234, "<45223423@example.com>")),
        ("1 <id@example.com> article", (1, "<id@example.com> article")),
        ("0", (0, "")),
    ],
)
def test_parse_article_status(message: str, expected: tuple[int, str]) -> None:
    assert parse_article_status(message) == expected


def test_parse_article_status_invalid() -> None:
    with pytest.raises(NNTPDataError, match="Invalid HEAD status"):
        parse_article_status("<id@example.com>", "HEAD")


def test_capability_tokens() -> None:
    assert capability_tokens("LIST ACTIVE\tNEWSGROUPS  OVERVIEW.FMT") == [
        "LIST",
        "ACTIVE",
        "NEWSGROUPS",
        "OVERVIEW.FMT",
    ]
    assert capability_tokens("READER") == ["READER"]
