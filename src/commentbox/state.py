"""Interaction state: collapsed subtrees, reply targeting and drafts.

All transitions are pure functions returning a new CommentBoxState; the host
owns the single current state and re-renders after each transition.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Iterator, Optional

from commentbox.models import CommentId, comment_key


@dataclass(frozen=True)
class CollapseTracker:
    """Set of comment ids whose subtrees are collapsed."""

    ids: frozenset = field(default_factory=frozenset)
    """Canonical keys (see comment_key) of collapsed comments."""

    def toggle(self, comment_id: CommentId) -> CollapseTracker:
        """Flip the collapsed flag for a comment (default: expanded)."""
        key = comment_key(comment_id)
        if key in self.ids:
            return CollapseTracker(self.ids - {key})
        return CollapseTracker(self.ids | {key})

    def is_collapsed(self, comment_id: CommentId) -> bool:
        return comment_key(comment_id) in self.ids

    def __contains__(self, comment_id: object) -> bool:
        return comment_key(comment_id) in self.ids

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids)

    def __len__(self) -> int:
        return len(self.ids)


@dataclass(frozen=True)
class Replying:
    """An open reply box for a single comment."""

    target_id: CommentId
    """Comment receiving the reply."""

    draft: str = ""
    """Reply text typed so far."""


@dataclass(frozen=True)
class CommentBoxState:
    """Complete interaction state of a comment box."""

    comments: Optional[tuple[Any, ...]] = None
    """Raw comment snapshot from the last load; None until loaded."""

    comment_draft: str = ""
    """Text of the new top-level comment."""

    reply: Optional[Replying] = None
    """Open reply box, or None when idle."""

    collapsed: CollapseTracker = field(default_factory=CollapseTracker)
    """Collapsed comment ids; kept across reloads."""

    @property
    def loaded(self) -> bool:
        return self.comments is not None

    @property
    def reply_target(self) -> Optional[CommentId]:
        return self.reply.target_id if self.reply is not None else None

    @property
    def reply_draft(self) -> str:
        return self.reply.draft if self.reply is not None else ""

    def is_replying_to(self, comment_id: CommentId) -> bool:
        return self.reply is not None and comment_key(
            self.reply.target_id
        ) == comment_key(comment_id)


def with_comments(state: CommentBoxState, comments: Iterable[Any]) -> CommentBoxState:
    """Replace the comment snapshot; drafts and collapse flags are kept."""
    return replace(state, comments=tuple(comments))


def toggle_collapse(state: CommentBoxState, comment_id: CommentId) -> CommentBoxState:
    return replace(state, collapsed=state.collapsed.toggle(comment_id))


def show_reply(state: CommentBoxState, comment_id: CommentId) -> CommentBoxState:
    """
    Open the reply box for a comment.

    Re-opening the current target keeps its draft. Switching to another
    comment starts an empty draft so text is never posted to the wrong
    comment.
    """
    if state.is_replying_to(comment_id):
        return state
    return replace(state, reply=Replying(target_id=comment_id))


def hide_reply(state: CommentBoxState) -> CommentBoxState:
    """Close the reply box and discard its draft."""
    if state.reply is None:
        return state
    return replace(state, reply=None)


def change_reply(state: CommentBoxState, text: str) -> CommentBoxState:
    """
    Update the reply draft.

    Raises:
        ValueError: If no reply box is open.
    """
    if state.reply is None:
        raise ValueError("no reply box is open")
    return replace(state, reply=replace(state.reply, draft=text))


def clear_reply(state: CommentBoxState, target_id: CommentId) -> CommentBoxState:
    """Close the reply box after a reply to ``target_id`` was accepted."""
    if not state.is_replying_to(target_id):
        return state
    return replace(state, reply=None)


def change_comment(state: CommentBoxState, text: str) -> CommentBoxState:
    return replace(state, comment_draft=text)


def clear_comment(state: CommentBoxState, submitted_draft: str) -> CommentBoxState:
    """Clear the new-comment draft after a submission made from ``submitted_draft``."""
    # Text typed while the submission was in flight is kept.
    if state.comment_draft != submitted_draft:
        return state
    return replace(state, comment_draft="")
