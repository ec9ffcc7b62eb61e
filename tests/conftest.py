import json
from pathlib import Path
from typing import Any

import pytest

from arenalookup.models.card import Dataset
from arenalookup.models.session import SharedSessionScope
from arenalookup.parsers.mtgjson import parse_dataset
from arenalookup.services.command_interpreter import CommandInterpreter
from arenalookup.services.dataset_store import DatasetStore


@pytest.fixture
def raw_sets() -> dict[str, Any]:
    """Three small sets in MTGJSON shape, oldest first."""
    return {
        "JMP": {
            "name": "Jumpstart",
            "cards": [
                {
                    "name": "Lightning Bolt",
                    "mtgArenaId": 100,
                    "manaCost": "{R}",
                    "type": "Instant",
                    "text": "Lightning Bolt deals 3 damage to any target.",
                },
                {
                    "name": "Goblin Guide",
                    "mtgArenaId": 101,
                    "manaCost": "{R}",
                    "type": "Creature — Goblin Scout",
                    "text": "Haste",
                    "power": "2",
                    "toughness": "2",
                },
                {
                    "name": "Lightning Strike",
                    "mtgArenaId": 102,
                    "manaCost": "{1}{R}",
                    "type": "Instant",
                    "text": "Lightning Strike deals 3 damage to any target.",
                },
            ],
        },
        "M20": {
            "name": "Core Set 2020",
            "cards": [
                {
                    "name": "Bolas's Citadel",
                    "mtgArenaId": 200,
                    "manaCost": "{3}{B}{B}{B}",
                    "type": "Legendary Artifact",
                    "text": "You may look at the top card of your library any time.",
                },
                {
                    "name": "Nicol Bolas, Dragon-God",
                    "mtgArenaId": 300,
                    "manaCost": "{U}{B}{B}{B}{R}",
                    "type": "Legendary Planeswalker — Bolas",
                    "text": "Nicol Bolas, Dragon-God has all loyalty abilities.",
                },
            ],
        },
        "M21": {
            "name": "Core Set 2021",
            "cards": [
                {
                    "name": "Goblin Guide Apprentice",
                    "mtgArenaId": 300,
                    "manaCost": "{R}",
                    "type": "Creature — Goblin",
                    "text": "",
                    "power": "1",
                    "toughness": "1",
                },
                {
                    "name": "Ugin, the Spirit Dragon",
                    "mtgArenaId": 301,
                    "manaCost": "{8}",
                    "type": "Legendary Planeswalker — Ugin",
                    "text": "+2: Ugin deals 3 damage to any target.",
                },
            ],
        },
    }


@pytest.fixture
def dataset(raw_sets: dict[str, Any]) -> Dataset:
    return parse_dataset(raw_sets)


@pytest.fixture
def dataset_file(raw_sets: dict[str, Any], tmp_path: Path) -> Path:
    """Write the sample sets to a temporary data file."""
    path = tmp_path / "data.json"
    with open(path, "w", encoding="utf-8") as f:
        json.dump(raw_sets, f)
    return path


@pytest.fixture
def store(dataset: Dataset, dataset_file: Path) -> DatasetStore:
    return DatasetStore(dataset_file, dataset)


@pytest.fixture
def interpreter(store: DatasetStore) -> CommandInterpreter:
    return CommandInterpreter(store=store, sessions=SharedSessionScope("JMP"))
