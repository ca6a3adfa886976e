import pytest

from docrelay.errors import InputError, UnsupportedFormatting
from docrelay.schemas.edit_schema import ActionKind
from docrelay.services.dispatcher import (
    classify,
    execute,
    parse_action_hint,
    parse_list_items,
    split_find_replace,
    strip_triggers,
)
from docrelay.services.platform_detector import GOOGLE_DOCS, GOOGLE_SLIDES, NOTION


class RecordingAdapter:
    platform_name = "Recorder"

    def __init__(self):
        self.calls = []

    async def add_text(self, text):
        self.calls.append(("add_text", text))

    async def replace_all_content(self, text):
        self.calls.append(("replace_all_content", text))

    async def set_title_or_heading(self, text, level=1):
        self.calls.append(("set_title_or_heading", text, level))

    async def add_list(self, items, ordered=False):
        self.calls.append(("add_list", items, ordered))

    async def apply_formatting(self, kind):
        self.calls.append(("apply_formatting", kind))

    async def find_and_replace(self, find, replace):
        self.calls.append(("find_and_replace", find, replace))


class TestAutoDetect:
    def test_title_rule_wins_over_list_rule(self):
        plan = classify("Add a title and a list: A, B", "auto")
        assert plan.kind is ActionKind.SET_TITLE_OR_HEADING
        assert plan.text == "Add a and a list: A, B"

    def test_heading_keyword(self):
        plan = classify("Add a heading: Welcome to Automated Document Editing")
        assert plan.kind is ActionKind.SET_TITLE_OR_HEADING
        assert plan.text == "Add a : Welcome to Automated Document Editing"

    def test_plain_lines_become_list_items(self):
        plan = classify("Item 1\nItem 2\nItem 3", "auto")
        assert plan.kind is ActionKind.ADD_LIST
        assert plan.items == ["Item 1", "Item 2", "Item 3"]

    def test_list_keyword_with_lines_skips_the_list_line(self):
        instruction = "Create a list with these items:\n• Feature 1\n\n• Feature 2\n"
        plan = classify(instruction, "auto")
        assert plan.kind is ActionKind.ADD_LIST
        assert plan.items == ["• Feature 1", "• Feature 2"]

    def test_single_line_list_is_one_stripped_item(self):
        plan = classify("Add a bullet for groceries")
        assert plan.kind is ActionKind.ADD_LIST
        assert plan.items == ["Add a for groceries"]

    def test_list_rule_wins_over_formatting(self):
        plan = classify("bold list of things")
        assert plan.kind is ActionKind.ADD_LIST

    def test_bold_formatting(self):
        plan = classify("Make all text bold and italic")
        assert plan.kind is ActionKind.APPLY_FORMATTING
        assert plan.formatting == "bold"

    def test_italic_formatting(self):
        plan = classify("Make it Italic please")
        assert plan.kind is ActionKind.APPLY_FORMATTING
        assert plan.formatting == "italic"

    def test_find_and_replace_preserves_quotes(self):
        plan = classify("Replace 'old version' with 'new version'", "auto")
        assert plan.kind is ActionKind.FIND_AND_REPLACE
        assert plan.find == "'old version'"
        assert plan.replace == "'new version'"

    def test_replace_without_with_is_plain_text(self):
        plan = classify("Replace the intro paragraph")
        assert plan.kind is ActionKind.ADD_TEXT
        assert plan.text == "Replace the intro paragraph"

    def test_default_is_add_text_with_original_instruction(self):
        instruction = "Add a new paragraph: This is a test from the relay!"
        plan = classify(instruction)
        assert plan.kind is ActionKind.ADD_TEXT
        assert plan.text == instruction

    def test_heading_level_from_options(self):
        plan = classify("heading Intro", options={"level": 2})
        assert plan.level == 2

    def test_plain_lines_on_platform_without_lists_are_text(self):
        instruction = "Quarterly results\nRevenue up 10%"
        plan = classify(instruction, "auto", platform=GOOGLE_SLIDES)
        assert plan.kind is ActionKind.ADD_TEXT
        assert plan.text == instruction

    @pytest.mark.parametrize("platform", [GOOGLE_DOCS, NOTION])
    def test_plain_lines_on_platforms_with_lists(self, platform):
        plan = classify("Quarterly results\nRevenue up 10%", "auto", platform=platform)
        assert plan.kind is ActionKind.ADD_LIST
        assert plan.items == ["Quarterly results", "Revenue up 10%"]


class TestExplicitHint:
    def test_add_text_strips_trigger_words(self):
        plan = classify("Type hello world", "addText")
        assert plan.kind is ActionKind.ADD_TEXT
        assert plan.text == "hello world"

    def test_legacy_type_text_alias(self):
        plan = classify("write Quarterly summary", "typeText")
        assert plan.kind is ActionKind.ADD_TEXT
        assert plan.text == "Quarterly summary"

    def test_explicit_hint_is_honoured_over_keywords(self):
        plan = classify("title of the list", "addText")
        assert plan.kind is ActionKind.ADD_TEXT
        assert plan.text == "title of the list"

    def test_title_hint(self):
        plan = classify("title Project Plan", "setTitleOrHeading")
        assert plan.kind is ActionKind.SET_TITLE_OR_HEADING
        assert plan.text == "Project Plan"

    def test_format_hint_uses_options(self):
        plan = classify("Make all text pretty", "format", {"formatting": "Underline"})
        assert plan.kind is ActionKind.APPLY_FORMATTING
        assert plan.formatting == "underline"

    def test_unknown_formatting_option_is_rejected(self):
        with pytest.raises(UnsupportedFormatting) as exc_info:
            classify("Make it fancy", "applyFormatting", {"formatting": "strikethrough"}, platform=GOOGLE_DOCS)
        assert exc_info.value.platform == "Google Docs"
        assert exc_info.value.formatting == "strikethrough"

    def test_find_replace_hint_uses_options(self):
        plan = classify("anything", "findAndReplace", {"find": "a", "replace": "b"})
        assert (plan.find, plan.replace) == ("a", "b")

    def test_find_replace_hint_without_pair_is_input_error(self):
        with pytest.raises(InputError):
            classify("swap the words", "findAndReplace")

    def test_list_hint_with_items_option(self):
        plan = classify("groceries", "addList", {"items": ["eggs", "milk"], "ordered": True})
        assert plan.items == ["eggs", "milk"]
        assert plan.ordered is True

    def test_unknown_hint(self):
        with pytest.raises(InputError) as exc_info:
            classify("hello", "dance")
        assert "Unknown actionHint" in exc_info.value.message


class TestHelpers:
    def test_parse_action_hint_defaults_to_auto(self):
        assert parse_action_hint(None) is ActionKind.AUTO_DETECT
        assert parse_action_hint("") is ActionKind.AUTO_DETECT
        assert parse_action_hint("replace_all") is ActionKind.REPLACE_ALL

    def test_strip_triggers_is_case_insensitive(self):
        assert strip_triggers("TITLE My Doc", ("title",)) == "My Doc"

    def test_parse_list_items_single_line(self):
        assert parse_list_items("single item list") == ["single item"]

    def test_split_find_replace_is_literal(self):
        # the split also happens inside the replacement text
        assert split_find_replace("replace a with b with c") == ("a", "b")


class TestExecute:
    @pytest.mark.asyncio
    async def test_add_text(self):
        adapter = RecordingAdapter()
        message = await execute(adapter, classify("hello there"))
        assert adapter.calls == [("add_text", "hello there")]
        assert "Recorder" in message

    @pytest.mark.asyncio
    async def test_add_list(self):
        adapter = RecordingAdapter()
        message = await execute(adapter, classify("Item 1\nItem 2\nItem 3"))
        assert adapter.calls == [("add_list", ["Item 1", "Item 2", "Item 3"], False)]
        assert "3-item list" in message

    @pytest.mark.asyncio
    async def test_find_and_replace(self):
        adapter = RecordingAdapter()
        await execute(adapter, classify("Replace 'old' with 'new'"))
        assert adapter.calls == [("find_and_replace", "'old'", "'new'")]

    @pytest.mark.asyncio
    async def test_formatting(self):
        adapter = RecordingAdapter()
        await execute(adapter, classify("make it bold"))
        assert adapter.calls == [("apply_formatting", "bold")]
