"""
Field mapping and document merge for monster stat blocks.

Projects a loosely typed monster record onto the fixed Foundry actor
template: scalar text slots, the numbered combat style groups, the
composed unique skills and loot table text, the display names and the
Bar Brawl resource bars.

Invariant:
Pure and deterministic. Nothing here performs I/O, logs, or mutates the
template that was passed in.
"""

import copy
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Tuple

from .errors import MissingRecordIdentity
from .normalize import (
    DEFAULT_DISPLAY_NAME,
    FALLBACK,
    decode_entities,
    strip_paragraph_tags,
    text_or,
    value_or,
)

PDF_PAGER = "pdf-pager"
MAX_COMBAT_STYLES = 3
LOOT_SLOT = "textarea_1pmwa"
SKILLS_SLOT = "Pg1 UniqueSkills"
REP_WEAK_SLOT = "Pg1 Rep/Weak"

# Template label -> record key
FIELD_MAP: List[Tuple[str, str]] = [
    ("Pg1 Name", "monstername"),
    ("Pg1 Level", "level"),
    ("Pg1 Type", "monstertype"),
    ("Pg1 Intelligence", "intelligence"),
    ("Pg1 Perception", "perception"),
    ("Pg1 Soulscars", "soulscars"),
    ("Pg1 Disposition", "disposition"),
    ("Pg1 Language", "language"),
    ("Pg1 Weak Point", "weakpoint"),
    ("Pg1 Habitat", "habitat"),
    ("Pg1 Movement", "movementspeed"),
    ("Pg1 Initiative", "initiative"),
    ("Pg1 Fortitude", "fortitude"),
    ("Pg1 Willpower", "willpower"),
    ("Pg1 Sections", "sections"),
    ("Pg1 Main Section", "mainsection"),
]

# Template label -> combat style key, in sub-field order
COMBAT_STYLE_MAP: List[Tuple[str, str]] = [
    ("Pg1 FStyle", "style"),
    ("Pg1 Accuracy", "accuracy"),
    ("Pg1 Damage", "damage"),
    ("Pg1 Evasion", "evasion"),
    ("Pg1 Defense", "defense"),
    ("Pg1 HP", "hp"),
    ("Pg1 MP", "mp"),
]

# Resource bar -> (combat style index, key). bar3/bar4 carry the hp of
# styles 1 and 2, bar5/bar6 their mp.
RESOURCE_BAR_MAP: List[Tuple[str, int, str]] = [
    ("bar1", 0, "hp"),
    ("bar2", 0, "mp"),
    ("bar3", 1, "hp"),
    ("bar4", 2, "hp"),
    ("bar5", 1, "mp"),
    ("bar6", 2, "mp"),
]

# (minimum section count, bar zeroed below it), checked in this order
SECTION_SHORTFALLS: List[Tuple[int, str]] = [
    (3, "bar4"),
    (2, "bar3"),
]


def _list_field(record: Mapping, key: str) -> list:
    value = record.get(key)
    return list(value) if value else []


def project_fields(record: Mapping) -> Dict[str, str]:
    """
    Map every scalar record field onto its template label.

    Missing or null fields become "N/A". Reputation and weakness share
    one slot and fall back independently, e.g. "7/N/A".
    """
    projected = {label: text_or(record.get(key)) for label, key in FIELD_MAP}
    projected[REP_WEAK_SLOT] = (
        f"{text_or(record.get('reputation'))}/{text_or(record.get('weakness'))}"
    )
    return projected


def project_combat_styles(record: Mapping) -> Dict[Tuple[str, int], str]:
    """Map the first three combat styles onto (label, index) slots."""
    styles = _list_field(record, "combatstyles")[:MAX_COMBAT_STYLES]
    projected: Dict[Tuple[str, int], str] = {}
    for index, style in enumerate(styles):
        style = style or {}
        for label, key in COMBAT_STYLE_MAP:
            projected[(label, index)] = text_or(style.get(key))
    return projected


def _compose_skill_section(section: Mapping) -> str:
    text = f"{decode_entities(section.get('section'))}\n"
    for ability in section.get("abilities") or []:
        text += (
            f"{decode_entities(ability.get('title'))}\n"
            f"{decode_entities(ability.get('description'))}\n\n"
        )
    # Decoding first lets encoded paragraph tags be stripped as well
    return strip_paragraph_tags(text)


def compose_unique_skills(record: Mapping) -> str:
    sections = _list_field(record, "uniqueskills")
    if not sections:
        return FALLBACK
    return "\n".join(_compose_skill_section(section or {}) for section in sections)


def compose_loot_table(record: Mapping) -> str:
    rows = _list_field(record, "loottable")
    if not rows:
        return FALLBACK
    return "\n".join(
        f"{text_or((row or {}).get('roll'))}\t{text_or((row or {}).get('loot'))}"
        for row in rows
    )


def display_name(record: Mapping) -> str:
    return text_or(record.get("monstername"), DEFAULT_DISPLAY_NAME)


def section_count(record: Mapping) -> int:
    sections = record.get("sections")
    return len(sections) if sections else 0


def derive_resource_bars(record: Mapping) -> Dict[str, Any]:
    """
    Compute the snapshot value for each resource bar.

    Value and max are written from the same number. A missing style or
    field yields 0. Bars that fall under a section shortfall are zeroed.
    """
    styles = _list_field(record, "combatstyles")
    bars: Dict[str, Any] = {}
    for bar, index, key in RESOURCE_BAR_MAP:
        style = (styles[index] if index < len(styles) else None) or {}
        bars[bar] = value_or(style.get(key), 0)

    count = section_count(record)
    for minimum, bar in SECTION_SHORTFALLS:
        if count < minimum:
            bars[bar] = 0
    return bars


def has_section_shortfall(record: Mapping) -> bool:
    count = section_count(record)
    return any(count < minimum for minimum, _ in SECTION_SHORTFALLS)


def _field_text(document: dict) -> dict:
    flags = document.setdefault("flags", {})
    return flags.setdefault(PDF_PAGER, {}).setdefault("fieldText", {})


def _barbrawl(document: dict) -> Optional[dict]:
    token = document.get("prototypeToken") or {}
    token_flags = token.get("flags") or {}
    return token_flags.get("barbrawl")


def apply_resource_bars(document: dict, record: Mapping) -> None:
    """Write the derived resource bars; no-op without a Bar Brawl widget."""
    barbrawl = _barbrawl(document)
    if barbrawl is None:
        return

    resource_bars = barbrawl.setdefault("resourceBars", {})
    for bar, amount in derive_resource_bars(record).items():
        slot = resource_bars.setdefault(bar, {})
        slot["value"] = amount
        slot["max"] = amount

    if has_section_shortfall(record):
        barbrawl["otherVisibility"] = 0
        barbrawl["ownerVisibility"] = 0


def merge_stat_block(template: Mapping, record: Optional[Mapping]) -> dict:
    """
    Merge a monster record into a copy of the stat block template.

    Args:
        template: Foundry actor document with pdf-pager field slots
        record: Monster record as returned by the API

    Returns:
        New document with every mapped slot populated

    Raises:
        MissingRecordIdentity: If no record mapping was supplied
    """
    if not isinstance(record, Mapping):
        raise MissingRecordIdentity(
            "Could not find any entries under that link. Maybe that monster doesn't exist?"
        )

    document = copy.deepcopy(dict(template))
    field_text = _field_text(document)

    for label, text in project_fields(record).items():
        field_text.setdefault(label, {})["0"] = text

    for (label, index), text in project_combat_styles(record).items():
        group = field_text.setdefault(label, {})
        group.setdefault(str(index), {})["0"] = text

    field_text.setdefault(SKILLS_SLOT, {})["0"] = compose_unique_skills(record)
    field_text[LOOT_SLOT] = compose_loot_table(record)

    name = display_name(record)
    document["name"] = name
    document.setdefault("prototypeToken", {})["name"] = name

    # Must follow every step that could touch the bar numbers
    apply_resource_bars(document, record)
    return document
