"""Data models for comments, thread nodes and comment box configuration."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Hashable, Mapping, Optional

CommentId = Hashable


def comment_key(comment_id: CommentId) -> str:
    """
    Canonical form of a comment id used for matching.

    Ids round-trip through rendered markup and host records as text, so
    ``1`` and ``"1"`` name the same comment.
    """
    return str(comment_id)


@dataclass(frozen=True)
class Comment:
    """Canonical comment record consumed by the thread assembler."""

    id: CommentId
    """Unique, stable comment identifier (opaque)."""

    parent_id: Optional[CommentId] = None
    """Identifier of the comment this one replies to; None for top-level comments."""

    body_display: str = ""
    """Rendered comment body."""

    author_display: str = ""
    """Display name of the comment author."""

    timestamp_display: str = ""
    """Display form of the comment timestamp."""

    belongs_to_author: bool = False
    """Whether the comment was written by the current user."""

    flagged: bool = False
    """Whether the comment has been flagged."""

    avatar_url: Optional[str] = None
    """Author avatar URL, shown only when avatars are enabled."""

    @property
    def is_reply(self) -> bool:
        """Check if this comment references a parent comment."""
        return self.parent_id is not None


@dataclass(eq=False)
class ThreadNode:
    """A comment placed in the reply tree."""

    comment: Comment
    """The canonical comment this node wraps."""

    parent_id: Optional[CommentId] = None
    """Resolved parent id; None when the comment is rendered as a root."""

    children: list[ThreadNode] = field(default_factory=list)
    """Direct replies in the order they appear in the flat list."""

    depth: int = 0
    """Number of ancestors between this node and its root."""

    @property
    def id(self) -> CommentId:
        return self.comment.id

    @property
    def body_display(self) -> str:
        return self.comment.body_display

    @property
    def author_display(self) -> str:
        return self.comment.author_display

    @property
    def timestamp_display(self) -> str:
        return self.comment.timestamp_display

    @property
    def belongs_to_author(self) -> bool:
        return self.comment.belongs_to_author

    @property
    def flagged(self) -> bool:
        return self.comment.flagged

    @property
    def avatar_url(self) -> Optional[str]:
        return self.comment.avatar_url

    @property
    def is_root(self) -> bool:
        """Check if this node is rendered at the top level."""
        return self.parent_id is None

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def __repr__(self) -> str:
        return (
            f"ThreadNode(id={self.id!r}, parent_id={self.parent_id!r}, "
            f"depth={self.depth}, children={len(self.children)})"
        )


@dataclass(frozen=True)
class ThreadEntry:
    """One position in the flattened render sequence."""

    node: ThreadNode
    """The node to render."""

    visible: bool = True
    """False when an ancestor is collapsed (only emitted when hidden entries are requested)."""

    collapsed: bool = False
    """Whether this node's own subtree is collapsed."""

    def __iter__(self):
        # Unpacks as (node, is_visible).
        yield self.node
        yield self.visible


def _default_disabled_view(config: CommentBoxConfig) -> str:
    return "Replace with a component that logs in your user or gets their name."


_ALIASES = {
    "disabledComponent": "disabled_view",
    "disabled_component": "disabled_view",
}


def _snake_case(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


@dataclass(frozen=True)
class CommentBoxConfig:
    """Static comment box configuration supplied at construction."""

    class_prefix: str = "cb-"
    """Prefix applied to every generated class name."""

    class_name: str = "commentbox"
    """Class name of the outer container (not prefixed)."""

    disabled: bool = True
    """Replace compose affordances with the disabled view (e.g. a login prompt)."""

    users_have_avatars: bool = False
    """Render author avatars next to names."""

    level_padding: int = 25
    """Indentation per nesting level, in pixels."""

    loading_content: str = "Loading..."
    expand_button_content: str = "[+]"
    contract_button_content: str = "[-]"
    show_reply_button_content: str = "reply"
    hide_reply_button_content: str = "cancel"
    post_reply_button_content: str = "Post Reply"
    post_comment_button_content: str = "Post Comment"
    flag_button_content: str = "flag"
    flagged_content: str = "(flagged)"

    disabled_view: Callable[[CommentBoxConfig], Any] = _default_disabled_view
    """Produces the content shown instead of compose forms when disabled."""

    def prefix(self, class_name: str) -> str:
        """Apply the configured class prefix."""
        return f"{self.class_prefix}{class_name}"

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> CommentBoxConfig:
        """
        Build a configuration from a mapping of options.

        Accepts snake_case field names as well as camelCase option names
        (``levelPadding``, ``disabledComponent``).

        Raises:
            TypeError: If an option name is not recognised.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            name = _ALIASES.get(key) or _snake_case(key)
            if name not in known:
                raise TypeError(f"unknown comment box option '{key}'")
            kwargs[name] = value
        return cls(**kwargs)
