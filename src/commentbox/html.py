"""HTML rendering of the comment box view model."""

from __future__ import annotations

import copy
import re
from typing import Any, Optional

from lxml import etree

from commentbox.models import CommentBoxConfig, comment_key
from commentbox.view import BoxView, CommentRow, Compose, ComposeForm

TEXTAREA_ROWS = 7

# Characters lxml refuses in text and attribute values.
_XML_INVALID = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def _xml_text(value: str) -> str:
    return _XML_INVALID.sub("", value)


def _element(
    parent: Optional[etree._Element],
    tag: str,
    class_name: Optional[str] = None,
    text: Optional[str] = None,
    **attrs: str,
) -> etree._Element:
    if parent is None:
        elem = etree.Element(tag)
    else:
        elem = etree.SubElement(parent, tag)
    if class_name:
        elem.set("class", class_name)
    for name, value in attrs.items():
        elem.set(name.replace("_", "-"), _xml_text(value))
    if text:
        elem.text = _xml_text(text)
    return elem


def _append_content(parent: etree._Element, content: Any) -> None:
    """Append caller-supplied content: an element, or anything printable."""
    if isinstance(content, etree._Element):
        parent.append(copy.deepcopy(content))
    elif content is not None:
        parent.text = (parent.text or "") + _xml_text(str(content))


def _render_compose(
    parent: etree._Element, compose: Compose, field_name: str, config: CommentBoxConfig
) -> None:
    if not isinstance(compose, ComposeForm):
        notice = _element(parent, "div", config.prefix("disabled"))
        _append_content(notice, compose.content)
        return

    form = _element(parent, "form", data_action=field_name)
    wrapper = _element(form, "div", config.prefix("form-element"))
    textarea = _element(
        wrapper, "textarea", name=field_name, rows=str(TEXTAREA_ROWS)
    )
    textarea.text = _xml_text(compose.draft)
    actions = _element(form, "div")
    _element(actions, "button", text=compose.submit_label, type="submit")


def _render_row(parent: etree._Element, row: CommentRow, config: CommentBoxConfig) -> None:
    node = row.node
    value = comment_key(node.id)
    item = _element(parent, "li", " ".join(row.class_names))
    level = _element(
        item, "div", row.level_class, style=f"padding-left: {row.padding_left}px"
    )

    content = _element(level, "div", config.prefix("comment-content"))
    _element(content, "div", config.prefix("comment-body"), node.body_display)

    footer = _element(content, "div", config.prefix("comment-footer"))
    if row.show_avatar:
        _element(footer, "img", config.prefix("user-avatar"), src=node.avatar_url or "")
    _element(footer, "span", config.prefix("user-name"), node.author_display)
    _element(footer, "span", config.prefix("timestamp"), node.timestamp_display)
    if row.toggle_label is not None:
        _element(
            footer, "button", config.prefix("toggle"), row.toggle_label,
            name="toggle", value=value,
        )
    if row.flag_label is not None:
        _element(
            footer, "button", config.prefix("flag"), row.flag_label,
            name="flag", value=value,
        )
    else:
        _element(footer, "span", config.prefix("flagged"), row.flagged_label)
    action = "hide-reply" if row.is_reply_target else "show-reply"
    _element(
        footer, "button", config.prefix(action), row.reply_button_label,
        name=action, value=value,
    )

    reply = _element(level, "div", config.prefix("reply"))
    if row.reply_form is not None:
        wrapper = _element(reply, "div", config.prefix("form-wrapper"))
        _render_compose(wrapper, row.reply_form, "reply", config)


def render_tree(view: BoxView, config: CommentBoxConfig) -> etree._Element:
    """Build the HTML element tree for a view model."""
    root = _element(None, "div", view.class_name)
    header = _element(root, "div", config.prefix("header"))
    _render_compose(header, view.compose, "comment", config)

    body = _element(root, "div", config.prefix("body"))
    comments = _element(body, "ul", config.prefix("comments"))
    if view.loading is not None:
        _element(comments, "li", config.prefix("loading"), view.loading)
    for row in view.rows:
        _render_row(comments, row, config)
    return root


def render_html(view: BoxView, config: CommentBoxConfig) -> str:
    """
    Serialize a view model to an HTML fragment.

    Args:
        view: View model from build_view() or CommentBox.view().
        config: Configuration used to build the view (class prefix).

    Returns:
        HTML markup for the whole comment box.
    """
    return etree.tostring(render_tree(view, config), method="html", encoding="unicode")
