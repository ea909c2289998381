"""
Pytest configuration and shared fixtures.
"""

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from statblock.logger import get_logger, reset_logger
from statblock.mapping import COMBAT_STYLE_MAP, FIELD_MAP, LOOT_SLOT, REP_WEAK_SLOT, SKILLS_SLOT


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path):
    """Keep log files out of the working tree and console output quiet."""
    reset_logger()
    logger = get_logger(log_dir=tmp_path / "logs", enable_console=False)
    yield logger
    reset_logger()


@pytest.fixture
def stat_block_template() -> Dict[str, Any]:
    """Minimal Foundry actor with pdf-pager slots and a Bar Brawl widget."""
    field_text: Dict[str, Any] = {label: {"0": "template"} for label, _ in FIELD_MAP}
    field_text[REP_WEAK_SLOT] = {"0": "template"}
    field_text[SKILLS_SLOT] = {"0": "template"}
    field_text[LOOT_SLOT] = "template"
    for label, _ in COMBAT_STYLE_MAP:
        field_text[label] = {str(i): {"0": "template"} for i in range(3)}

    return {
        "name": "Template Monster",
        "type": "character",
        "flags": {"pdf-pager": {"fieldText": field_text, "pdfFile": "statblock.pdf"}},
        "prototypeToken": {
            "name": "Template Token",
            "flags": {
                "barbrawl": {
                    "resourceBars": {
                        f"bar{i}": {"id": f"bar{i}", "value": 99, "max": 99} for i in range(1, 7)
                    },
                    "ownerVisibility": 50,
                    "otherVisibility": 50,
                }
            },
        },
    }


@pytest.fixture
def hydra_record() -> Dict[str, Any]:
    """Monster record with three sections and three combat styles."""
    return {
        "monster_id": 42,
        "monstername": "Hydra",
        "level": 9,
        "monstertype": "Beast",
        "intelligence": "Animal",
        "perception": "Five Senses",
        "reputation": 14,
        "weakness": 18,
        "soulscars": 0,
        "disposition": "Hostile",
        "language": "None",
        "weakpoint": "Physical damage +2",
        "habitat": "Swamps",
        "movementspeed": "15/-",
        "initiative": 13,
        "fortitude": 12,
        "willpower": 11,
        "sections": ["Head A", "Head B", "Body"],
        "mainsection": "Body",
        "combatstyles": [
            {"style": "Bite (Head A)", "accuracy": 12, "damage": "2d+9", "evasion": 11,
             "defense": 8, "hp": 60, "mp": 20},
            {"style": "Bite (Head B)", "accuracy": 12, "damage": "2d+9", "evasion": 11,
             "defense": 8, "hp": 55, "mp": 18},
            {"style": "Body", "accuracy": None, "damage": None, "evasion": 10,
             "defense": 10, "hp": 80, "mp": 25},
        ],
        "uniqueskills": [
            {
                "section": "Head A &amp; Head B",
                "abilities": [
                    {"title": "Fire Breath", "description": "&lt;p&gt;Deals fire damage.&lt;/p&gt;"},
                ],
            },
            {
                "section": "Body",
                "abilities": [
                    {"title": "Regenerate", "description": "<p>Recovers 5 HP</p>"},
                    {"title": "Tough Hide", "description": "Takes less damage"},
                ],
            },
        ],
        "loottable": [
            {"roll": "2-7", "loot": "Scales (100G)"},
            {"roll": "8-12", "loot": "Hydra Fang (300G)"},
        ],
    }


@pytest.fixture
def template_file(tmp_path, stat_block_template) -> Path:
    path = tmp_path / "monster_stat_block.json"
    path.write_text(json.dumps(stat_block_template, indent=2))
    return path


@pytest.fixture
def record_file(tmp_path, hydra_record) -> Path:
    """Saved record in the API envelope form."""
    path = tmp_path / "hydra.json"
    path.write_text(json.dumps({"monster": hydra_record}))
    return path
