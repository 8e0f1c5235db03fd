import copy
import warnings

import pytest
import requests

warnings.filterwarnings(
    "ignore",
    message=r"on_event is deprecated, use lifespan event handlers instead\.",
    category=DeprecationWarning,
    module=r"fastapi\..*",
)

BASE_PAYLOAD = {
    "action": "opened",
    "number": 42,
    "pull_request": {"number": 42, "user": {"login": "dependabot[bot]", "type": "Bot", "id": 49699333}},
    "repository": {"name": "demo-repo", "full_name": "octo/demo-repo", "owner": {"login": "octo"}},
    "sender": {"login": "dependabot[bot]", "type": "Bot", "id": 49699333},
}


class _Resp:
    def __init__(self, status_code=200, json_obj=None, text="", headers=None, reason=None):
        self.status_code = status_code
        self._json = json_obj
        self.text = text
        self.reason = reason or ("OK" if status_code < 400 else "Error")
        self.headers = headers or {}

    def json(self):
        if self._json is None:
            raise ValueError("No JSON")
        return self._json


@pytest.fixture
def pr_payload():
    """Fresh, valid pull_request.opened payload sent by a bot."""
    return copy.deepcopy(BASE_PAYLOAD)


@pytest.fixture
def fake_github(monkeypatch):
    """Replace requests.post with a recorder; set `.response` or `.error` to steer it."""

    class FakeGitHub:
        def __init__(self):
            self.calls = []
            self.response = _Resp(201, {"id": 1, "html_url": "https://example/comment/1"})
            self.error = None

        def post(self, url, **kwargs):
            self.calls.append({"url": url, **kwargs})
            if self.error is not None:
                raise self.error
            return self.response

    fake = FakeGitHub()
    monkeypatch.setattr(requests, "post", fake.post)
    return fake


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    # app.py loads .env on import; keep developer settings out of the tests
    for name in ("GITHUB_TOKEN", "GITHUB_API", "HTTP_TIMEOUT_S", "PR_TRIGGER_USER_AGENT", "LOG_PAYLOADS"):
        monkeypatch.delenv(name, raising=False)
