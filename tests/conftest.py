import pytest

PAGE_URL = "https://github.com/acme/app/pull/7/files"

COPILOT_THREAD = """
<turbo-frame id="review-thread-or-comment-id-101">
  <details-collapsible>
    <details open>
      <summary><a href="/acme/app/pull/7/files#diff-abc">src/app/parser.py</a></summary>
      <div><div>Comment on lines +67 to +87</div></div>
    </details>
  </details-collapsible>
  <div class="js-comment" id="discussion_r1">
    <a class="author" href="/apps/copilot-pull-request-reviewer">Copilot</a>
    <a class="Link--secondary" href="#discussion_r1"><relative-time datetime="2026-10-16T10:00:00Z">3 days ago</relative-time></a>
    <div class="comment-body js-comment-body">
      <p>The loop recomputes the length on every iteration.</p>
      <ul>
        <li>Cache the length before the loop</li>
        <li>Use enumerate instead of range(len())</li>
      </ul>
    </div>
  </div>
</turbo-frame>
"""

HUMAN_THREAD = """
<turbo-frame id="review-thread-or-comment-id-102">
  <div data-path="src/app/cli.py"></div>
  <table>
    <tr><td class="blob-num">+12</td><td class="blob-code">x = 1</td></tr>
    <tr><td data-line-number="15"></td><td class="blob-code">y = 2</td></tr>
  </table>
  <article>
    <a class="author" href="/octocat">octocat</a>
    <div class="comment-body"><p>Please rename this variable, it is confusing.</p></div>
  </article>
</turbo-frame>
"""


def wrap_page(*threads: str) -> str:
    return "<html><body><main>" + "".join(threads) + "</main></body></html>"


@pytest.fixture
def page_url() -> str:
    return PAGE_URL


@pytest.fixture
def mixed_page_html() -> str:
    return wrap_page(COPILOT_THREAD, HUMAN_THREAD)


@pytest.fixture
def human_page_html() -> str:
    return wrap_page(HUMAN_THREAD)
