"""CommentBox: owns the interaction state and dispatches user actions."""

from __future__ import annotations

import inspect
from typing import Any, Callable, Optional

from commentbox import state as transitions
from commentbox.assembler import assemble
from commentbox.backend import CommentBackend
from commentbox.models import Comment, CommentBoxConfig, CommentId, ThreadEntry
from commentbox.normalize import normalize_comment
from commentbox.state import CommentBoxState
from commentbox.view import BoxView, build_view

Listener = Callable[[CommentBoxState], None]


class CommentBox:
    """
    Controller for a threaded comment box.

    Local intents (opening a reply box, editing drafts, collapsing a subtree)
    are applied synchronously. Mutating actions are forwarded to the backend,
    awaited, and followed by a full reload. Local drafts are cleared only once
    the backend call has succeeded; a failing call propagates its exception
    and leaves the state untouched.

    Example:
        >>> box = CommentBox(backend, CommentBoxConfig(disabled=False))
        >>> await box.load()
        >>> box.show_reply("c1")
        >>> box.change_reply("Thanks!")
        >>> await box.submit_reply()
        >>> [entry.node.id for entry in box.entries()]
        ['c1', 'c2', ...]
    """

    def __init__(
        self,
        backend: CommentBackend,
        config: Optional[CommentBoxConfig] = None,
        state: Optional[CommentBoxState] = None,
    ) -> None:
        """
        Initialize a CommentBox.

        Args:
            backend: External collaborators for fetching and persisting comments.
            config: Static labels and presentation options.
            state: Initial state (defaults to not loaded, no drafts).
        """
        self._backend = backend
        self._config = config or CommentBoxConfig()
        self._state = state or CommentBoxState()
        self._listeners: list[Listener] = []

    @property
    def config(self) -> CommentBoxConfig:
        return self._config

    @property
    def state(self) -> CommentBoxState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callback invoked with the new state after every change.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, new_state: CommentBoxState) -> None:
        if new_state is self._state:
            return
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)

    # Local intents

    def show_reply(self, comment_id: CommentId) -> None:
        self._set_state(transitions.show_reply(self._state, comment_id))

    def hide_reply(self) -> None:
        self._set_state(transitions.hide_reply(self._state))

    def change_reply(self, text: str) -> None:
        self._set_state(transitions.change_reply(self._state, text))

    def change_comment(self, text: str) -> None:
        self._set_state(transitions.change_comment(self._state, text))

    def toggle_collapse(self, comment_id: CommentId) -> None:
        self._set_state(transitions.toggle_collapse(self._state, comment_id))

    def is_collapsed(self, comment_id: CommentId) -> bool:
        return self._state.collapsed.is_collapsed(comment_id)

    # Backend actions

    async def load(self) -> tuple[Any, ...]:
        """
        Fetch the comment collection and replace the current snapshot.

        Returns:
            The raw comment records as loaded.
        """
        comments = await self._backend.get_comments()
        self._set_state(transitions.with_comments(self._state, comments))
        return self._state.comments

    async def submit_comment(self, body: Optional[str] = None) -> None:
        """
        Post a new top-level comment, then reload.

        Args:
            body: Comment text (defaults to the current draft).
        """
        draft = self._state.comment_draft
        if body is None:
            body = draft
        await self._backend.comment(body)
        self._set_state(transitions.clear_comment(self._state, draft))
        await self.load()

    async def submit_reply(
        self, body: Optional[str] = None, target_id: Optional[CommentId] = None
    ) -> None:
        """
        Post a reply, then reload.

        Args:
            body: Reply text (defaults to the open reply draft).
            target_id: Comment to reply to (defaults to the open reply target).

        Raises:
            ValueError: If no target is given and no reply box is open.
        """
        reply = self._state.reply
        if target_id is None:
            if reply is None:
                raise ValueError("no reply target to submit to")
            target_id = reply.target_id
        if body is None:
            body = self._state.reply_draft if self._state.is_replying_to(target_id) else ""
        await self._backend.reply(body, target_id)
        self._set_state(transitions.clear_reply(self._state, target_id))
        await self.load()

    async def up_vote(self, comment_id: CommentId) -> None:
        await self._forward_vote(self._backend.up_vote, comment_id)

    async def down_vote(self, comment_id: CommentId) -> None:
        await self._forward_vote(self._backend.down_vote, comment_id)

    @staticmethod
    async def _forward_vote(
        vote: Callable[[CommentId], Any], comment_id: CommentId
    ) -> None:
        # Counts are not updated locally; the next reload reflects them.
        result = vote(comment_id)
        if inspect.isawaitable(result):
            await result

    async def flag(self, comment_id: CommentId) -> None:
        """Flag a comment, then reload so the badge reflects stored state."""
        await self._backend.flag(comment_id)
        await self.load()

    # Rendering

    def _normalizer(self) -> Callable[[Any], Comment]:
        return getattr(self._backend, "normalize_comment", None) or normalize_comment

    def comments(self) -> list[Comment]:
        """Canonical comments for the current snapshot (empty until loaded)."""
        normalize = self._normalizer()
        return [normalize(raw) for raw in self._state.comments or ()]

    def entries(self, include_hidden: bool = False) -> list[ThreadEntry]:
        """Render sequence for the current snapshot and collapse flags."""
        return assemble(self.comments(), self._state.collapsed, include_hidden)

    def view(self) -> BoxView:
        """View model for the current state."""
        return build_view(self._state, self._config, self._normalizer())
