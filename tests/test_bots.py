import pytest

from bots import is_automated
from payload import Actor


@pytest.mark.parametrize(
    "login, account_type, expected",
    [
        ("dependabot[bot]", "Bot", True),   # both signals
        ("renovate", "Bot", True),          # type only
        ("github-actions[bot]", "User", True),  # suffix only
        ("octocat", "User", False),
        ("octocat", "Organization", False),
        ("[bot]extra", "User", False),      # contains, does not end with
        ("robot", "User", False),
        ("dependabot[BOT]", "User", False), # suffix is case-sensitive
        ("octocat", "bot", False),          # type is case-sensitive
        ("octocat", "BOT", False),
    ],
)
def test_is_automated(login, account_type, expected):
    assert is_automated(Actor(login=login, type=account_type, id=1)) is expected
