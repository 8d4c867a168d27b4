"""Tests for raw comment normalization."""

import pytest

from commentbox import Comment, normalize_comment


class TestNormalizeComment:
    """Tests for normalize_comment."""

    def test_comment_passes_through(self):
        """Canonical comments are returned unchanged."""
        comment = Comment(id="1", body_display="Hi")
        assert normalize_comment(comment) is comment

    def test_camel_case_record(self):
        """Records using the browser component field names are mapped."""
        comment = normalize_comment(
            {
                "id": "2",
                "parentCommentId": "1",
                "bodyDisplay": "Reply",
                "userNameDisplay": "Grace",
                "timestampDisplay": "2 hours ago",
                "belongsToAuthor": True,
                "flagged": False,
                "userAvatarUrl": "https://example.com/g.png",
            }
        )

        assert comment.id == "2"
        assert comment.parent_id == "1"
        assert comment.body_display == "Reply"
        assert comment.author_display == "Grace"
        assert comment.timestamp_display == "2 hours ago"
        assert comment.belongs_to_author is True
        assert comment.flagged is False
        assert comment.avatar_url == "https://example.com/g.png"

    def test_snake_case_record(self):
        """Records using canonical field names are mapped."""
        comment = normalize_comment(
            {"id": 5, "parent_id": 4, "body_display": "x", "author_display": "y"}
        )
        assert comment.id == 5
        assert comment.parent_id == 4
        assert comment.author_display == "y"

    def test_empty_parent_is_root(self):
        """An empty parent reference marks a top-level comment."""
        comment = normalize_comment({"id": "1", "parentCommentId": ""})
        assert comment.parent_id is None
        assert not comment.is_reply

    def test_missing_fields_default(self):
        """Missing display fields default to empty values."""
        comment = normalize_comment({"id": "1"})
        assert comment.body_display == ""
        assert comment.author_display == ""
        assert comment.flagged is False
        assert comment.avatar_url is None

    def test_missing_id_rejected(self):
        """A record without an id cannot be normalized."""
        with pytest.raises(ValueError):
            normalize_comment({"bodyDisplay": "orphan"})

    def test_unsupported_type_rejected(self):
        """Only Comment objects and mappings are accepted."""
        with pytest.raises(TypeError):
            normalize_comment(["1", None])
