import os
import logging
from typing import Dict, Optional, Union

import requests
import certifi

from config import DEFAULT_GITHUB_API, DEFAULT_USER_AGENT, Settings
from outcome import Failure, FailureKind

log = logging.getLogger("webhook.github")


def _bearer(token: str, user_agent: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
        "Content-Type": "application/json",
        "User-Agent": user_agent,
    }


def _ca_bundle() -> str:
    return (
        os.getenv("REQUESTS_CA_BUNDLE")
        or os.getenv("SSL_CERT_FILE")
        or certifi.where()
    )


def _upstream(code: str, message: str, status: int) -> Failure:
    return Failure(FailureKind.UPSTREAM, code, message, status)


def map_error_response(resp: requests.Response, repo: str, issue_number: int) -> Failure:
    """Translate a non-2xx GitHub response into the caller-facing failure."""
    status = resp.status_code
    if status == 401:
        return _upstream(
            "GITHUB_AUTH_FAILED",
            "GitHub API authentication failed. Please check your GITHUB_TOKEN.",
            401,
        )
    if status == 403:
        # primary and secondary limits both say "rate limit" in the body
        if "rate limit" in (resp.text or "").lower():
            return _upstream(
                "GITHUB_RATE_LIMIT",
                "GitHub API rate limit exceeded. Please try again later.",
                429,
            )
        return _upstream(
            "GITHUB_FORBIDDEN",
            "GitHub API access forbidden. Please check repository permissions.",
            403,
        )
    if status == 404:
        return _upstream(
            "GITHUB_NOT_FOUND",
            f"Repository or pull request not found: {repo}#{issue_number}",
            404,
        )
    if status >= 500:
        return _upstream(
            "GITHUB_SERVER_ERROR",
            "GitHub API server error. Please try again later.",
            503,
        )
    return _upstream(
        "GITHUB_API_REQUEST_FAILED",
        f"GitHub API request failed: {status} {resp.reason or ''}".rstrip(),
        status,
    )


class GitHubClient:
    def __init__(self, token: str, base_url: str = DEFAULT_GITHUB_API, timeout_s: float = 25,
                 user_agent: str = DEFAULT_USER_AGENT):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.user_agent = user_agent

    @classmethod
    def create(cls, settings: Settings) -> Union["GitHubClient", Failure]:
        """Build a client from explicit settings, or fail before any network call."""
        if not settings.github_token:
            return Failure(
                FailureKind.CONFIGURATION,
                "MISSING_GITHUB_TOKEN",
                "GitHub token not found in environment variables",
                500,
            )
        return cls(
            settings.github_token,
            base_url=settings.github_api,
            timeout_s=settings.http_timeout_s,
            user_agent=settings.user_agent,
        )

    def post_comment(self, repo: str, issue_number: int, body: str) -> Optional[Failure]:
        """POST one issue comment. Returns None on success; no retries."""
        url = f"{self.base_url}/repos/{repo}/issues/{issue_number}/comments"
        try:
            r = requests.post(
                url,
                headers=_bearer(self.token, self.user_agent),
                json={"body": body},
                timeout=self.timeout_s,
                verify=_ca_bundle(),
            )
        except requests.Timeout as e:
            log.error("POST %s timed out after %ss: %s", url, self.timeout_s, e)
            return _upstream(
                "GITHUB_TIMEOUT",
                "GitHub API request timed out. Please try again later.",
                503,
            )
        except requests.RequestException as e:
            log.error("POST %s network error: %s", url, e)
            return _upstream(
                "GITHUB_NETWORK_ERROR",
                "Network error while contacting GitHub API. Please try again later.",
                503,
            )

        if not 200 <= r.status_code < 300:
            log.error("POST %s -> %s %s headers=%s resp=%s",
                      url, r.status_code, r.reason, dict(r.headers), (r.text or "")[:800])
            return map_error_response(r, repo, issue_number)

        try:
            created = r.json()
        except ValueError:
            created = None
        loc = created.get("html_url") if isinstance(created, dict) else None
        log.info("POST %s -> %s %s", url, r.status_code, f"Created: {loc}" if loc else "OK")
        return None
