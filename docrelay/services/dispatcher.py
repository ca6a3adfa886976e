"""
Instruction dispatch: free-text instruction -> one ActionKind + parameters.

Auto-detection applies ordered keyword rules and the first match wins:
  1. "title" / "heading"          -> SetTitleOrHeading
  2. "list" / "bullet"            -> AddList
  3. "bold" / "italic"            -> ApplyFormatting
  4. "replace" ... "with"         -> FindAndReplace (needs >= 3 segments)
  5. several non-empty lines      -> AddList, one item per line, when the
                                     target platform has lists
  6. anything else                -> AddText with the original instruction
Matching is case-insensitive substring containment.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from docrelay.adapters.base import PlatformAdapter
from docrelay.errors import InputError, UnsupportedFormatting
from docrelay.schemas.edit_schema import ActionKind
from docrelay.services.platform_detector import PlatformDescriptor

logger = logging.getLogger(__name__)

TEXT_TRIGGERS = ("type", "write")
TITLE_TRIGGERS = ("title", "heading")
LIST_TRIGGERS = ("list", "bullet")
FORMAT_TRIGGERS = ("bold", "italic")
SUPPORTED_FORMATTING = ("bold", "italic", "underline")

HINT_ALIASES: dict[str, ActionKind] = {
    "auto": ActionKind.AUTO_DETECT,
    "addtext": ActionKind.ADD_TEXT,
    "typetext": ActionKind.ADD_TEXT,
    "type": ActionKind.ADD_TEXT,
    "write": ActionKind.ADD_TEXT,
    "text": ActionKind.ADD_TEXT,
    "replaceall": ActionKind.REPLACE_ALL,
    "replace": ActionKind.REPLACE_ALL,
    "settitleorheading": ActionKind.SET_TITLE_OR_HEADING,
    "title": ActionKind.SET_TITLE_OR_HEADING,
    "heading": ActionKind.SET_TITLE_OR_HEADING,
    "addlist": ActionKind.ADD_LIST,
    "list": ActionKind.ADD_LIST,
    "bullet": ActionKind.ADD_LIST,
    "applyformatting": ActionKind.APPLY_FORMATTING,
    "format": ActionKind.APPLY_FORMATTING,
    "findandreplace": ActionKind.FIND_AND_REPLACE,
    "findreplace": ActionKind.FIND_AND_REPLACE,
}

_REPLACE_SPLIT = re.compile(r"replace|with", re.IGNORECASE)


@dataclass
class ActionPlan:
    kind: ActionKind
    text: str = ""
    items: list[str] = field(default_factory=list)
    level: int = 1
    ordered: bool = False
    formatting: str | None = None
    find: str | None = None
    replace: str | None = None


def parse_action_hint(hint: str | None) -> ActionKind:
    """Normalise an actionHint (canonical value or historical alias)."""
    if hint is None or not hint.strip():
        return ActionKind.AUTO_DETECT
    key = re.sub(r"[\s_-]", "", hint).lower()
    kind = HINT_ALIASES.get(key)
    if kind is None:
        raise InputError(
            f"Unknown actionHint '{hint}'. Allowed: {sorted(k.value for k in ActionKind)}"
        )
    return kind


def strip_triggers(text: str, triggers: tuple[str, ...]) -> str:
    """Remove trigger words (case-insensitive) and trim what is left."""
    pattern = "|".join(re.escape(t) for t in triggers)
    stripped = re.sub(pattern, "", text, flags=re.IGNORECASE)
    stripped = re.sub(r"[ \t]{2,}", " ", stripped)
    return stripped.strip()


def _contains(text_lower: str, words: tuple[str, ...]) -> bool:
    return any(w in text_lower for w in words)


def _item_lines(instruction: str) -> list[str]:
    return [
        line.strip()
        for line in instruction.split("\n")
        if line.strip() and "list" not in line.lower()
    ]


def parse_list_items(instruction: str) -> list[str]:
    """One item per trimmed non-empty line, else a single stripped item."""
    if "\n" in instruction:
        lines = _item_lines(instruction)
        if lines:
            return lines
    return [strip_triggers(instruction, LIST_TRIGGERS)]


def split_find_replace(instruction: str) -> tuple[str, str] | None:
    """Split on the bare words replace/with. None when under three segments."""
    segments = _REPLACE_SPLIT.split(instruction)
    if len(segments) < 3:
        return None
    return segments[1].strip(), segments[2].strip()


def _heading_level(options: dict) -> int:
    try:
        level = int(options.get("level", 1))
    except (TypeError, ValueError):
        raise InputError(f"Invalid heading level {options.get('level')!r}")
    return max(1, min(3, level))


def _formatting_from(text_lower: str, options: dict, platform_name: str) -> str:
    requested = options.get("formatting")
    if requested:
        formatting = str(requested).lower()
        if formatting not in SUPPORTED_FORMATTING:
            raise UnsupportedFormatting(platform_name, formatting)
        return formatting
    for kind in SUPPORTED_FORMATTING:
        if kind in text_lower:
            return kind
    return "bold"


def classify(
    instruction: str,
    action_hint: str | None = "auto",
    options: dict | None = None,
    platform: PlatformDescriptor | None = None,
) -> ActionPlan:
    """Resolve an instruction into exactly one concrete action plan.

    ``platform`` narrows auto-detection: the multi-line list rule only
    applies where the platform can build lists.
    """
    options = options or {}
    kind = parse_action_hint(action_hint)
    if kind is ActionKind.AUTO_DETECT:
        lists_allowed = platform is None or platform.supports(ActionKind.ADD_LIST)
        return _auto_detect(instruction, options, lists_allowed)
    platform_name = platform.name if platform is not None else "any platform"
    return _explicit(kind, instruction, options, platform_name)


def _explicit(kind: ActionKind, instruction: str, options: dict, platform_name: str) -> ActionPlan:
    lower = instruction.lower()

    if kind in (ActionKind.ADD_TEXT, ActionKind.REPLACE_ALL):
        return ActionPlan(kind=kind, text=strip_triggers(instruction, TEXT_TRIGGERS) or instruction)

    if kind is ActionKind.SET_TITLE_OR_HEADING:
        return ActionPlan(
            kind=kind,
            text=strip_triggers(instruction, TITLE_TRIGGERS) or instruction,
            level=_heading_level(options),
        )

    if kind is ActionKind.ADD_LIST:
        items = options.get("items")
        if not isinstance(items, list) or not items:
            items = parse_list_items(instruction)
        return ActionPlan(kind=kind, items=[str(i) for i in items], ordered=bool(options.get("ordered")))

    if kind is ActionKind.APPLY_FORMATTING:
        return ActionPlan(kind=kind, formatting=_formatting_from(lower, options, platform_name))

    # FIND_AND_REPLACE
    if options.get("find") and options.get("replace") is not None:
        return ActionPlan(kind=kind, find=str(options["find"]), replace=str(options["replace"]))
    pair = split_find_replace(instruction)
    if pair is None:
        raise InputError("Find and replace needs an instruction of the form 'replace X with Y'")
    return ActionPlan(kind=kind, find=pair[0], replace=pair[1])


def _auto_detect(instruction: str, options: dict, lists_allowed: bool = True) -> ActionPlan:
    lower = instruction.lower()

    if _contains(lower, TITLE_TRIGGERS):
        return ActionPlan(
            kind=ActionKind.SET_TITLE_OR_HEADING,
            text=strip_triggers(instruction, TITLE_TRIGGERS),
            level=_heading_level(options),
        )

    if _contains(lower, LIST_TRIGGERS):
        return ActionPlan(
            kind=ActionKind.ADD_LIST,
            items=parse_list_items(instruction),
            ordered=bool(options.get("ordered")),
        )

    if _contains(lower, FORMAT_TRIGGERS):
        return ActionPlan(
            kind=ActionKind.APPLY_FORMATTING,
            formatting="bold" if "bold" in lower else "italic",
        )

    if "replace" in lower and "with" in lower:
        pair = split_find_replace(instruction)
        if pair is not None:
            return ActionPlan(kind=ActionKind.FIND_AND_REPLACE, find=pair[0], replace=pair[1])

    if lists_allowed and "\n" in instruction.strip():
        lines = _item_lines(instruction)
        if len(lines) > 1:
            return ActionPlan(kind=ActionKind.ADD_LIST, items=lines, ordered=bool(options.get("ordered")))

    return ActionPlan(kind=ActionKind.ADD_TEXT, text=instruction)


async def execute(adapter: PlatformAdapter, plan: ActionPlan) -> str:
    """Invoke the adapter operation for ``plan`` and return a short message."""
    logger.info("dispatch platform=%s action=%s", adapter.platform_name, plan.kind.value)

    if plan.kind is ActionKind.ADD_TEXT:
        await adapter.add_text(plan.text)
        return f"Added text to {adapter.platform_name}."
    if plan.kind is ActionKind.REPLACE_ALL:
        await adapter.replace_all_content(plan.text)
        return f"Replaced all content on {adapter.platform_name}."
    if plan.kind is ActionKind.SET_TITLE_OR_HEADING:
        await adapter.set_title_or_heading(plan.text, plan.level)
        return f"Set title/heading on {adapter.platform_name}."
    if plan.kind is ActionKind.ADD_LIST:
        await adapter.add_list(plan.items, ordered=plan.ordered)
        return f"Added a {len(plan.items)}-item list to {adapter.platform_name}."
    if plan.kind is ActionKind.APPLY_FORMATTING:
        await adapter.apply_formatting(plan.formatting or "bold")
        return f"Applied {plan.formatting} formatting on {adapter.platform_name}."
    if plan.kind is ActionKind.FIND_AND_REPLACE:
        await adapter.find_and_replace(plan.find or "", plan.replace or "")
        return f"Replaced '{plan.find}' with '{plan.replace}' on {adapter.platform_name}."

    raise InputError(f"Action {plan.kind.value} must be resolved before execution")
