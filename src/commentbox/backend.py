"""Contract for the external collaborators a comment box calls."""

from __future__ import annotations

from typing import Any, Awaitable, Iterable, Optional, Protocol

from commentbox.models import Comment, CommentId


class CommentBackend(Protocol):
    """
    Persistence, voting and flagging operations supplied by the host.

    Mutating operations are awaited for their side effect only; the comment
    box reloads the whole collection afterwards.
    """

    async def get_comments(self) -> Iterable[Any]:
        """Fetch the flat list of raw comment records."""
        ...

    def normalize_comment(self, raw: Any) -> Comment:
        """Map a raw record to a canonical Comment. Must be pure."""
        ...

    async def comment(self, body: str) -> Any:
        """Persist a new top-level comment."""
        ...

    async def reply(self, body: str, parent_id: CommentId) -> Any:
        """Persist a reply to ``parent_id``."""
        ...

    def up_vote(self, comment_id: CommentId) -> Optional[Awaitable[Any]]:
        ...

    def down_vote(self, comment_id: CommentId) -> Optional[Awaitable[Any]]:
        ...

    async def flag(self, comment_id: CommentId) -> Any:
        """Flag a comment for moderation."""
        ...
