"""HTML rendering tests."""

import lxml.html
from lxml import etree

from commentbox import CommentBoxConfig, CommentBoxState, build_view, render_html
from commentbox import state as transitions


RECORDS = [
    {"id": "1", "bodyDisplay": "Root <b>", "userNameDisplay": "Ada"},
    {"id": "2", "parentCommentId": "1", "bodyDisplay": "Child"},
    {"id": "3", "bodyDisplay": "Other", "flagged": True},
]


def render(state, config):
    return lxml.html.fromstring(render_html(build_view(state, config), config))


class TestRenderHtml:
    """Tests for render_html."""

    def test_loading(self):
        """An unloaded box renders the loading item."""
        config = CommentBoxConfig()
        doc = render(CommentBoxState(), config)

        items = doc.xpath("//ul[@class='cb-comments']/li")
        assert len(items) == 1
        assert items[0].get("class") == "cb-loading"
        assert items[0].text_content() == "Loading..."

    def test_one_item_per_row(self):
        """Each visible comment renders as one list item."""
        config = CommentBoxConfig(disabled=False)
        state = transitions.with_comments(CommentBoxState(), RECORDS)
        doc = render(state, config)

        assert doc.get("class") == "commentbox"
        items = doc.xpath("//ul[@class='cb-comments']/li")
        assert [li.get("class") for li in items] == [
            "cb-comment",
            "cb-comment",
            "cb-comment cb-flagged",
        ]
        bodies = doc.xpath("//div[@class='cb-comment-body']")
        assert bodies[0].text_content() == "Root <b>"
        level = items[1].xpath("./div")[0]
        assert level.get("class") == "cb-level-1"
        assert level.get("style") == "padding-left: 25px"

    def test_buttons_carry_comment_ids(self):
        """Action buttons carry the comment id as their value."""
        config = CommentBoxConfig(disabled=False)
        state = transitions.with_comments(CommentBoxState(), RECORDS)
        doc = render(state, config)

        toggles = doc.xpath("//button[@name='toggle']")
        assert [b.get("value") for b in toggles] == ["1"]
        flags = doc.xpath("//button[@name='flag']")
        assert [b.get("value") for b in flags] == ["1", "2"]
        assert doc.xpath("//span[@class='cb-flagged']")[0].text == "(flagged)"
        replies = doc.xpath("//button[@name='show-reply']")
        assert [b.get("value") for b in replies] == ["1", "2", "3"]

    def test_compose_and_reply_forms(self):
        """Enabled boxes render textareas holding the drafts."""
        config = CommentBoxConfig(disabled=False)
        state = transitions.with_comments(CommentBoxState(), RECORDS)
        state = transitions.change_comment(state, "top draft")
        state = transitions.show_reply(state, "2")
        state = transitions.change_reply(state, "reply draft")
        doc = render(state, config)

        assert doc.xpath("//textarea[@name='comment']")[0].text == "top draft"
        assert doc.xpath("//textarea[@name='reply']")[0].text == "reply draft"
        assert doc.xpath("//button[@name='hide-reply']")[0].get("value") == "2"
        assert [b.text for b in doc.xpath("//button[@type='submit']")] == [
            "Post Comment",
            "Post Reply",
        ]

    def test_disabled_notice(self):
        """Disabled boxes render the disabled view instead of forms."""
        notice = etree.Element("a", href="/login")
        notice.text = "Log in"
        config = CommentBoxConfig(disabled=True, disabled_view=lambda config: notice)
        state = transitions.with_comments(CommentBoxState(), RECORDS)
        doc = render(state, config)

        assert doc.xpath("//textarea") == []
        links = doc.xpath("//div[@class='cb-disabled']/a")
        assert len(links) == 1
        assert links[0].get("href") == "/login"

    def test_avatars(self):
        """Avatar images are rendered when enabled."""
        config = CommentBoxConfig(users_have_avatars=True)
        records = [{"id": "1", "userAvatarUrl": "https://example.com/a.png"}]
        state = transitions.with_comments(CommentBoxState(), records)
        doc = render(state, config)

        images = doc.xpath("//img[@class='cb-user-avatar']")
        assert [img.get("src") for img in images] == ["https://example.com/a.png"]

    def test_control_characters_are_dropped(self):
        """Bodies and drafts with XML-incompatible characters still render."""
        config = CommentBoxConfig(disabled=False)
        records = [{"id": 1, "bodyDisplay": "hi\x0cthere", "userNameDisplay": "a\x00b"}]
        state = transitions.with_comments(CommentBoxState(), records)
        state = transitions.change_comment(state, "top\x0bdraft")
        state = transitions.show_reply(state, 1)
        state = transitions.change_reply(state, "reply\x0cdraft")
        doc = render(state, config)

        assert doc.xpath("//div[@class='cb-comment-body']")[0].text == "hithere"
        assert doc.xpath("//span[@class='cb-user-name']")[0].text == "ab"
        assert doc.xpath("//textarea[@name='comment']")[0].text == "topdraft"
        assert doc.xpath("//textarea[@name='reply']")[0].text == "replydraft"

    def test_button_values_drive_actions(self):
        """Ids read back from rendered buttons address the same comments."""
        config = CommentBoxConfig(disabled=False)
        records = [{"id": 1}, {"id": 2, "parentCommentId": 1}]
        state = transitions.with_comments(CommentBoxState(), records)

        toggle = render(state, config).xpath("//button[@name='toggle']")[0]
        state = transitions.toggle_collapse(state, toggle.get("value"))
        assert [row.id for row in build_view(state, config).rows] == [1]

        show = render(state, config).xpath("//button[@name='show-reply']")[0]
        state = transitions.show_reply(state, show.get("value"))
        rows = build_view(state, config).rows
        assert rows[0].is_reply_target
        assert rows[0].toggle_label == "[+]"
