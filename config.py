import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_GITHUB_API = "https://api.github.com"
DEFAULT_USER_AGENT = "PR-Bot-Reviewer/1.0"


def bool_env(name: str, default: bool = False) -> bool:
    v = os.environ.get(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "on"}


def github_token() -> Optional[str]:
    return (os.getenv("GITHUB_TOKEN") or "").strip() or None


def log_payloads_enabled() -> bool:
    return bool_env("LOG_PAYLOADS", True)


@dataclass(frozen=True)
class Settings:
    github_token: Optional[str]
    github_api: str = DEFAULT_GITHUB_API
    http_timeout_s: float = 25
    user_agent: str = DEFAULT_USER_AGENT
    log_payloads: bool = True


def load_settings() -> Settings:
    """Snapshot the environment. Called per request; never raises on a missing token."""
    return Settings(
        github_token=github_token(),
        github_api=(os.getenv("GITHUB_API") or DEFAULT_GITHUB_API).rstrip("/"),
        http_timeout_s=float(os.getenv("HTTP_TIMEOUT_S", "25")),
        user_agent=(os.getenv("PR_TRIGGER_USER_AGENT") or DEFAULT_USER_AGENT).strip(),
        log_payloads=log_payloads_enabled(),
    )
