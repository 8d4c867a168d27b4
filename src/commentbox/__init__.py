"""
commentbox: Threaded comment rendering and interaction state.

This module provides:
- Assembly of flat comment lists into ordered, indented reply threads
- Per-comment collapsing of reply subtrees
- Single reply box targeting with separate comment and reply drafts
- Dispatch of comment, reply, vote and flag actions to a host backend
"""

from importlib.metadata import PackageNotFoundError, version

from commentbox.assembler import ThreadIndex, assemble, build_index, flatten
from commentbox.box import CommentBox
from commentbox.html import render_html
from commentbox.models import Comment, CommentBoxConfig, ThreadEntry, ThreadNode
from commentbox.normalize import normalize_comment
from commentbox.state import CollapseTracker, CommentBoxState, Replying
from commentbox.view import BoxView, build_view

try:
    __version__ = version("commentbox")
except PackageNotFoundError:  # pragma: no cover - local checkout without metadata
    __version__ = "0.0.0"
__all__ = [
    "CommentBox",
    "CommentBoxConfig",
    "CommentBoxState",
    "CollapseTracker",
    "Replying",
    "Comment",
    "ThreadNode",
    "ThreadEntry",
    "ThreadIndex",
    "BoxView",
    "assemble",
    "build_index",
    "flatten",
    "build_view",
    "normalize_comment",
    "render_html",
]
