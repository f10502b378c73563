"""GitHub pull-request integration."""

from monocov.github.comments import (
    CommentService,
    GitHubCommentService,
    PullRequestRef,
    is_report_comment,
)

__all__ = [
    "CommentService",
    "GitHubCommentService",
    "PullRequestRef",
    "is_report_comment",
]
