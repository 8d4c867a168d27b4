"""Assembly of flat comment lists into ordered, indented render sequences."""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping, Optional

from commentbox.models import Comment, CommentId, ThreadEntry, ThreadNode, comment_key


@dataclass
class ThreadIndex:
    """Reply tree built from a flat comment list."""

    nodes: dict[str, ThreadNode] = field(default_factory=dict)
    """Nodes keyed by canonical comment id, in flat-list order."""

    roots: list[ThreadNode] = field(default_factory=list)
    """Top-level nodes in flat-list order."""

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, comment_id: object) -> bool:
        return comment_key(comment_id) in self.nodes

    def get(self, comment_id: CommentId) -> Optional[ThreadNode]:
        return self.nodes.get(comment_key(comment_id))

    def descendants(self, comment_id: CommentId) -> list[CommentId]:
        """
        Ids of all strict descendants of a comment, in render order.

        Raises:
            KeyError: If the comment is not in the index.
        """
        node = self.nodes[comment_key(comment_id)]
        result: list[CommentId] = []
        stack = list(reversed(node.children))
        while stack:
            current = stack.pop()
            result.append(current.id)
            stack.extend(reversed(current.children))
        return result


def _resolve_parents(nodes: dict[str, ThreadNode]) -> dict[str, Optional[str]]:
    parents: dict[str, Optional[str]] = {}
    for key, node in nodes.items():
        parent_id = node.comment.parent_id
        parent_key = None if parent_id is None else comment_key(parent_id)
        if parent_key == key or parent_key not in nodes:
            parents[key] = None
        else:
            parents[key] = parent_key
    return parents


def _break_cycles(
    nodes: dict[str, ThreadNode],
    parents: dict[str, Optional[str]],
    stacklevel: int,
) -> None:
    position = {key: index for index, key in enumerate(nodes)}
    resolved: set[str] = set()
    for key in nodes:
        path: list[str] = []
        on_path: dict[str, int] = {}
        current = key
        while current is not None and current not in resolved:
            if current in on_path:
                cycle = path[on_path[current]:]
                latest = max(cycle, key=position.__getitem__)
                warnings.warn(
                    "comment parent cycle detected; rendering "
                    f"{nodes[latest].id!r} as a root",
                    UserWarning,
                    stacklevel=stacklevel + 1,
                )
                parents[latest] = None
                break
            on_path[current] = len(path)
            path.append(current)
            current = parents[current]
        resolved.update(path)


def _assign_depths(roots: list[ThreadNode]) -> None:
    stack = [(root, 0) for root in roots]
    while stack:
        node, depth = stack.pop()
        node.depth = depth
        stack.extend((child, depth + 1) for child in node.children)


def _build_index(comments: Iterable[Comment], stacklevel: int) -> ThreadIndex:
    nodes: dict[str, ThreadNode] = {}
    for comment in comments:
        key = comment_key(comment.id)
        if key not in nodes:
            nodes[key] = ThreadNode(comment=comment)

    parents = _resolve_parents(nodes)
    _break_cycles(nodes, parents, stacklevel + 1)

    roots: list[ThreadNode] = []
    for key, node in nodes.items():
        parent_key = parents[key]
        if parent_key is None:
            node.parent_id = None
            roots.append(node)
        else:
            parent = nodes[parent_key]
            node.parent_id = parent.id
            parent.children.append(node)

    _assign_depths(roots)
    return ThreadIndex(nodes=nodes, roots=roots)


def build_index(comments: Iterable[Comment]) -> ThreadIndex:
    """
    Build the reply tree for a flat list of comments.

    Ids are matched by their canonical text form. The first occurrence of an
    id wins; later duplicates are ignored. Parent references are resolved
    after every comment is indexed, so replies may precede their parents in
    the list. References to unknown comments, and to the comment itself,
    make the comment a root. A parent cycle is broken by promoting the cycle
    member that appears last in the list.

    Args:
        comments: Canonical comments in source order.

    Returns:
        ThreadIndex with children and roots in source order and depths set.
    """
    return _build_index(comments, stacklevel=2)


def _collapsed_keys(collapsed: Optional[Iterable[CommentId]]) -> set[str]:
    if collapsed is None:
        return set()
    if isinstance(collapsed, Mapping):
        return {comment_key(key) for key, value in collapsed.items() if value}
    return {comment_key(comment_id) for comment_id in collapsed}


def iter_entries(
    index: ThreadIndex,
    collapsed: Optional[Iterable[CommentId]] = None,
    include_hidden: bool = False,
) -> Iterator[ThreadEntry]:
    """
    Walk the reply tree depth-first in pre-order.

    Descendants of a collapsed node are skipped, or yielded with
    ``visible=False`` when ``include_hidden`` is set.
    """
    collapsed_keys = _collapsed_keys(collapsed)
    stack = [(root, True) for root in reversed(index.roots)]
    while stack:
        node, visible = stack.pop()
        is_collapsed = comment_key(node.id) in collapsed_keys
        yield ThreadEntry(node=node, visible=visible, collapsed=is_collapsed)
        if is_collapsed and not include_hidden:
            continue
        child_visible = visible and not is_collapsed
        stack.extend((child, child_visible) for child in reversed(node.children))


def flatten(
    index: ThreadIndex,
    collapsed: Optional[Iterable[CommentId]] = None,
    include_hidden: bool = False,
) -> list[ThreadEntry]:
    """Flatten a reply tree into its render sequence."""
    return list(iter_entries(index, collapsed, include_hidden))


def assemble(
    comments: Iterable[Comment],
    collapsed: Optional[Iterable[CommentId]] = None,
    include_hidden: bool = False,
) -> list[ThreadEntry]:
    """
    Convert a flat comment list into an ordered render sequence.

    Args:
        comments: Canonical comments in source order.
        collapsed: Ids whose descendants are hidden. A mapping of id to
            collapsed flag is also accepted.
        include_hidden: Also emit hidden descendants, marked not visible.

    Returns:
        ThreadEntry items; each unpacks as ``(node, is_visible)``.
    """
    index = _build_index(comments, stacklevel=2)
    return flatten(index, collapsed, include_hidden)
