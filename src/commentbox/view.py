"""View model: what to draw for a given state, independent of any toolkit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from commentbox.assembler import assemble
from commentbox.models import Comment, CommentBoxConfig, ThreadEntry, ThreadNode
from commentbox.normalize import normalize_comment
from commentbox.state import CommentBoxState


@dataclass(frozen=True)
class ComposeForm:
    """Editable form for a comment or reply."""

    draft: str
    """Current text of the form."""

    submit_label: str
    """Label of the submit button."""


@dataclass(frozen=True)
class DisabledNotice:
    """Replacement for compose forms when composing is disabled."""

    content: Any
    """Whatever the configured disabled view produced."""


Compose = Union[ComposeForm, DisabledNotice]


@dataclass(frozen=True)
class CommentRow:
    """A single rendered comment."""

    node: ThreadNode
    class_names: tuple[str, ...]
    level_class: str
    padding_left: int

    toggle_label: Optional[str]
    """Expand/contract label; None when the comment has no replies."""

    flag_label: Optional[str]
    """Flag button label; None once the comment is flagged."""

    flagged_label: Optional[str]
    """Flagged badge; None while the comment is not flagged."""

    is_reply_target: bool
    reply_button_label: str

    reply_form: Optional[Compose] = None
    """Reply form (or disabled notice) for the current reply target."""

    show_avatar: bool = False

    @property
    def id(self) -> Any:
        return self.node.id


@dataclass(frozen=True)
class BoxView:
    """Everything needed to draw a comment box."""

    class_name: str
    compose: Compose
    rows: tuple[CommentRow, ...] = ()
    loading: Optional[str] = None
    """Loading label while no comments have been loaded yet."""


def _compose(config: CommentBoxConfig, draft: str, submit_label: str) -> Compose:
    if config.disabled:
        return DisabledNotice(content=config.disabled_view(config))
    return ComposeForm(draft=draft, submit_label=submit_label)


def build_row(
    entry: ThreadEntry, state: CommentBoxState, config: CommentBoxConfig
) -> CommentRow:
    """Describe one entry of the render sequence."""
    node = entry.node
    is_target = state.is_replying_to(node.id)

    names = ["comment"]
    if is_target:
        names.append("replying-to")
    if node.belongs_to_author:
        names.append("belongs-to-author")
    if node.flagged:
        names.append("flagged")

    toggle_label = None
    if node.has_children:
        toggle_label = (
            config.expand_button_content
            if entry.collapsed
            else config.contract_button_content
        )

    reply_form = None
    if is_target:
        reply_form = _compose(
            config, state.reply_draft, config.post_reply_button_content
        )

    return CommentRow(
        node=node,
        class_names=tuple(config.prefix(name) for name in names),
        level_class=config.prefix(f"level-{node.depth}"),
        padding_left=config.level_padding * node.depth,
        toggle_label=toggle_label,
        flag_label=None if node.flagged else config.flag_button_content,
        flagged_label=config.flagged_content if node.flagged else None,
        is_reply_target=is_target,
        reply_button_label=(
            config.hide_reply_button_content
            if is_target
            else config.show_reply_button_content
        ),
        reply_form=reply_form,
        show_avatar=config.users_have_avatars,
    )


def build_view(
    state: CommentBoxState,
    config: CommentBoxConfig,
    normalize: Callable[[Any], Comment] = normalize_comment,
) -> BoxView:
    """
    Build the view model for a state.

    Args:
        state: Current interaction state.
        config: Labels and presentation options.
        normalize: Maps raw records from the snapshot to canonical comments.

    Returns:
        BoxView with one row per visible comment, or a loading label when no
        snapshot has been loaded.
    """
    compose = _compose(
        config, state.comment_draft, config.post_comment_button_content
    )
    if not state.loaded:
        return BoxView(
            class_name=config.class_name,
            compose=compose,
            loading=config.loading_content,
        )

    entries = assemble(
        [normalize(raw) for raw in state.comments], state.collapsed
    )
    return BoxView(
        class_name=config.class_name,
        compose=compose,
        rows=tuple(build_row(entry, state, config) for entry in entries),
    )
