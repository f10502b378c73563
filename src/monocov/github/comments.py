"""Pull-request comment service.

The orchestrator only needs four operations on a PR discussion thread,
captured by the CommentService protocol. GitHubCommentService implements
them over the GitHub REST API.

Report comments are recognised by their ``## <title>`` heading and by being
authored by a bot account, so a human quoting the report is never touched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import httpx
import structlog

from monocov.core.errors import CommentError

logger = structlog.get_logger()


class CommentService(Protocol):
    """Operations against one pull request's comment thread."""

    def post(self, body: str) -> int:
        """Create a comment and return its id."""
        ...

    def update(self, comment_id: int, body: str) -> None: ...

    def find(self, title: str) -> int | None:
        """Id of the first report comment carrying title, if any."""
        ...

    def delete_all(self, title: str) -> int:
        """Delete every report comment carrying title; return how many went."""
        ...


@dataclass(frozen=True, slots=True)
class PullRequestRef:
    """owner/repo#number."""

    owner: str
    repo: str
    number: int

    @classmethod
    def parse(cls, repository: str, number: int) -> PullRequestRef:
        owner, _, repo = repository.partition("/")
        return cls(owner=owner, repo=repo, number=number)


def is_report_comment(comment: dict[str, Any], title: str) -> bool:
    body = comment.get("body") or ""
    user = comment.get("user") or {}
    return f"## {title}" in body and user.get("type") == "Bot"


class GitHubCommentService:
    """CommentService over the GitHub REST API."""

    def __init__(
        self,
        pr: PullRequestRef,
        token: str,
        *,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._pr = pr
        self._client = client or httpx.Client(
            base_url=api_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=timeout,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> GitHubCommentService:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def _issue_comments_url(self) -> str:
        return f"/repos/{self._pr.owner}/{self._pr.repo}/issues/{self._pr.number}/comments"

    def _comment_url(self, comment_id: int) -> str:
        return f"/repos/{self._pr.owner}/{self._pr.repo}/issues/comments/{comment_id}"

    def _request(self, action: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise CommentError.api_failure(
                action, e.response.status_code, e.response.text[:200] or str(e)
            ) from e
        except httpx.RequestError as e:
            raise CommentError.api_failure(action, None, str(e)) from e
        return response

    def _list(self) -> list[dict[str, Any]]:
        comments: list[dict[str, Any]] = []
        page = 1
        while True:
            response = self._request(
                "list",
                "GET",
                self._issue_comments_url,
                params={"per_page": 100, "page": page},
            )
            batch = response.json()
            comments.extend(batch)
            if len(batch) < 100:
                return comments
            page += 1

    def post(self, body: str) -> int:
        response = self._request("create", "POST", self._issue_comments_url, json={"body": body})
        data = response.json()
        logger.info("comment_posted", comment_id=data.get("id"), url=data.get("html_url"))
        comment_id: int = data["id"]
        return comment_id

    def update(self, comment_id: int, body: str) -> None:
        response = self._request(
            "update", "PATCH", self._comment_url(comment_id), json={"body": body}
        )
        logger.info("comment_updated", comment_id=comment_id, url=response.json().get("html_url"))

    def find(self, title: str) -> int | None:
        for comment in self._list():
            if is_report_comment(comment, title):
                logger.info("comment_found", comment_id=comment["id"])
                found: int = comment["id"]
                return found
        return None

    def delete_all(self, title: str) -> int:
        deleted = 0
        for comment in self._list():
            if not is_report_comment(comment, title):
                continue
            try:
                self._request("delete", "DELETE", self._comment_url(comment["id"]))
            except CommentError as e:
                logger.warning("comment_delete_failed", comment_id=comment["id"], reason=e.message)
                continue
            deleted += 1
            logger.info("comment_deleted", comment_id=comment["id"])
        return deleted
