from typing import Optional

from github_client import GitHubClient
from outcome import Failure

# One line per AI review integration; order matters to the integrations' users.
REVIEW_TRIGGERS = (
    "@coderabbitai review",
    "/gemini review",
    "@cubic-dev-ai review",
    "@greptile review",
)


def compose_review_comment() -> str:
    return "\n".join(REVIEW_TRIGGERS)


class ReviewCommentService:
    """Posts the review-trigger comment on a pull request."""

    def __init__(self, client: GitHubClient):
        self.client = client

    def post_review_comment(self, repo: str, pr_number: int) -> Optional[Failure]:
        return self.client.post_comment(repo, pr_number, compose_review_comment())
