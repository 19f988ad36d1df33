import os

import pytest

import nntpsession

NNTP_HOST = os.environ.get("NNTP_TEST_HOST", "")

pytestmark = pytest.mark.skipif(
    not NNTP_HOST, reason="set NNTP_TEST_HOST to run against a local INN2 server"
)

DEFAULT_GROUPS = {
    "control",
    "control.cancel",
    "control.checkgroups",
    "control.newgroup",
    "control.rmgroup",
    "junk",
    "local.general",
    "local.test",
}


def test_session() -> None:
    session = nntpsession.dial(NNTP_HOST)
    groups = {group.name for group in session.list()}
    assert groups == DEFAULT_GROUPS
    session.quit()


def test_context_manager() -> None:
    """
    https://docs.python.org/3/reference/datamodel.html#context-managers
    """
    with nntpsession.dial(NNTP_HOST) as session:
        groups = {group.name for group in session.list()}
        assert groups == DEFAULT_GROUPS


def test_capabilities() -> None:
    with nntpsession.dial(NNTP_HOST) as session:
        caps = session.capabilities()
        assert caps[0].startswith("VERSION")
        assert session.has_capability_argument("LIST", "ACTIVE")


@pytest.mark.xfail(
    reason="INN2 in not configured to support SSL",
    raises=nntpsession.NNTPTransportError,
    strict=True,
)
def test_session_with_ssl() -> None:
    with nntpsession.dial(NNTP_HOST, ssl_mode=nntpsession.SSLMode.IMPLICIT) as session:
        session.list()


@pytest.mark.parametrize(
    "newsgroup",
    [
        "local.general",
        "local.test",
        pytest.param(
            "junk",
            marks=pytest.mark.xfail(raises=nntpsession.NNTPTemporaryError, strict=True),
        ),
    ],
)
def test_post(newsgroup: str) -> None:
    article = (
        f"Subject: Test post to {newsgroup}\r\n"
        "From: GitHub Actions <actions@github.com>\r\n"
        f"Newsgroups: {newsgroup}\r\n"
        "\r\n"
        f"This is a test post to {newsgroup}\r\n"
    ).encode("utf-8")
    with nntpsession.dial(NNTP_HOST) as session:
        session.mode_reader()
        assert session.post(article)


@pytest.mark.parametrize("newsgroup", ["local.general", "local.test"])
def test_article(newsgroup: str) -> None:
    with nntpsession.dial(NNTP_HOST) as session:
        session.mode_reader()
        group = session.group(newsgroup)
        assert group.name == newsgroup
        article = session.article(group.low)
        assert article.number == group.low
        assert f"Newsgroups: {newsgroup}".encode("utf-8") in article.read()
        body = session.body(group.low).read()
        assert f"This is a test post to {newsgroup}".encode("utf-8") in body
