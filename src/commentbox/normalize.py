"""Mapping of raw comment records into canonical Comment objects."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from commentbox.models import Comment

# Canonical field -> accepted record keys, in lookup order.
_FIELD_KEYS: dict[str, tuple[str, ...]] = {
    "id": ("id", "comment_id", "commentId"),
    "parent_id": (
        "parent_id",
        "parentId",
        "parent_comment_id",
        "parentCommentId",
    ),
    "body_display": ("body_display", "bodyDisplay", "body"),
    "author_display": (
        "author_display",
        "authorDisplay",
        "user_name_display",
        "userNameDisplay",
        "author",
    ),
    "timestamp_display": ("timestamp_display", "timestampDisplay", "timestamp"),
    "belongs_to_author": ("belongs_to_author", "belongsToAuthor"),
    "flagged": ("flagged",),
    "avatar_url": ("avatar_url", "avatarUrl", "user_avatar_url", "userAvatarUrl"),
}


def _lookup(record: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in record:
            return record[key]
    return None


def _display(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _parent(value: Any) -> Optional[Any]:
    # Empty references mark top-level comments.
    if value is None or value == "":
        return None
    return value


def normalize_comment(raw: Any) -> Comment:
    """
    Map a raw comment record into the canonical Comment shape.

    Args:
        raw: A Comment (returned unchanged) or a mapping using snake_case or
            camelCase field names (``parentCommentId``, ``userNameDisplay``...).

    Returns:
        The canonical Comment.

    Raises:
        TypeError: If the record is neither a Comment nor a mapping.
        ValueError: If the record has no id.
    """
    if isinstance(raw, Comment):
        return raw
    if not isinstance(raw, Mapping):
        raise TypeError("comment record must be a Comment or a mapping")

    values = {name: _lookup(raw, keys) for name, keys in _FIELD_KEYS.items()}
    if values["id"] is None or values["id"] == "":
        raise ValueError("comment record has no id")

    return Comment(
        id=values["id"],
        parent_id=_parent(values["parent_id"]),
        body_display=_display(values["body_display"]),
        author_display=_display(values["author_display"]),
        timestamp_display=_display(values["timestamp_display"]),
        belongs_to_author=bool(values["belongs_to_author"]),
        flagged=bool(values["flagged"]),
        avatar_url=values["avatar_url"] or None,
    )
