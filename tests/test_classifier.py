from bs4 import BeautifulSoup

from prharvest.classifier import (
    DEFAULT_PREDICATES,
    author_href_names_reviewer,
    body_mentions_reviewer,
    bot_badge_with_reviewer_author,
    is_primary_author,
)
from prharvest.config import ReviewerConfig


def _comment(markup: str):
    return BeautifulSoup(f"<div class='js-comment'>{markup}</div>", "html.parser").select_one(".js-comment")


def test_author_link_text_identifies_reviewer() -> None:
    comment = _comment("<a class='author' href='/apps/copilot-pull-request-reviewer'>Copilot</a>")
    assert is_primary_author(comment)


def test_author_href_identifies_reviewer() -> None:
    comment = _comment("<a class='author' href='/apps/github-copilot'>review-bot</a>")
    assert author_href_names_reviewer(comment, ReviewerConfig())
    assert is_primary_author(comment)


def test_bot_badge_requires_reviewer_author() -> None:
    reviewer = ReviewerConfig()
    with_author = _comment("<a class='author'>copilot</a><span class='Label--success'>bot</span>")
    other_bot = _comment("<a class='author'>dependabot</a><span class='Label--success'>bot</span>")
    assert bot_badge_with_reviewer_author(with_author, reviewer)
    assert not bot_badge_with_reviewer_author(other_bot, reviewer)


def test_body_mention_classifies_human_comment_as_reviewer() -> None:
    comment = _comment(
        "<a class='author' href='/octocat'>octocat</a>"
        "<div class='comment-body'>I agree with Copilot here.</div>"
    )
    assert body_mentions_reviewer(comment, ReviewerConfig())
    assert is_primary_author(comment)


def test_body_ai_review_phrase_matches() -> None:
    comment = _comment("<div class='comment-body'>Flagged during AI  review of this file.</div>")
    assert is_primary_author(comment)


def test_human_comment_is_not_reviewer() -> None:
    comment = _comment(
        "<a class='author' href='/octocat'>octocat</a>"
        "<div class='comment-body'>Please rename this variable.</div>"
    )
    assert not is_primary_author(comment)
    assert not is_primary_author(_comment(""))


def test_reviewer_and_predicates_are_configurable() -> None:
    comment = _comment("<a class='author' href='/apps/coderabbitai'>coderabbitai</a>")
    assert not is_primary_author(comment)
    reviewer = ReviewerConfig(name="coderabbitai", author_href_pattern=r"coderabbit")
    assert is_primary_author(comment, reviewer)
    assert not is_primary_author(comment, reviewer, predicates=DEFAULT_PREDICATES[2:])
