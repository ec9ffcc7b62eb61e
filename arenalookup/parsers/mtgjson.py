"""
MTGJSON set data parser.

Turns the decoded AllPrintings document into a Dataset. Accepts both the
bare mapping of set code -> set and the v5 envelope with "meta" and "data".

Data format: https://mtgjson.com/data-models/
"""

from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from arenalookup.models.card import Card, Dataset, SetEntry


class RawCard(BaseModel):
    """The card fields we need from MTGJSON."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    mtg_arena_id: int | None = Field(default=None, alias="mtgArenaId")
    mana_cost: str = Field(default="", alias="manaCost")
    text: str = ""
    type: str = ""
    power: str | None = None
    toughness: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _lift_arena_id(cls, data: Any) -> Any:
        # v5 moved the arena id under "identifiers" and made it a string
        if isinstance(data, dict) and "mtgArenaId" not in data:
            identifiers = data.get("identifiers") or {}
            if "mtgArenaId" in identifiers:
                return {**data, "mtgArenaId": identifiers["mtgArenaId"]}
        return data

    @field_validator("mana_cost", "text", "type", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_card(self) -> Card:
        return Card(
            name=self.name,
            mtg_arena_id=self.mtg_arena_id,
            mana_cost=self.mana_cost,
            text=self.text,
            type=self.type,
            power=self.power,
            toughness=self.toughness,
        )


class RawSet(BaseModel):
    """The set fields we need from MTGJSON."""

    model_config = ConfigDict(extra="ignore")

    name: str
    cards: list[RawCard] = Field(default_factory=list)


_RAW_DATASET = TypeAdapter(dict[str, RawSet])


def unwrap_envelope(raw: Any) -> Any:
    """Return the set mapping, stripping the v5 {"meta", "data"} envelope if present."""
    if isinstance(raw, dict) and "meta" in raw and isinstance(raw.get("data"), dict):
        return raw["data"]
    return raw


def parse_dataset(raw: Any) -> Dataset:
    """
    Build a Dataset from decoded MTGJSON data.

    Args:
        raw: Decoded JSON document

    Returns:
        Read-only mapping of set code -> SetEntry, in document order.

    Raises:
        ValueError: If the document is not a mapping of sets
        pydantic.ValidationError: If a set or card is malformed
    """
    raw = unwrap_envelope(raw)
    if not isinstance(raw, dict):
        raise ValueError(f"expected a mapping of set code to set data, got {type(raw).__name__}")

    raw_sets = _RAW_DATASET.validate_python(raw)

    sets: dict[str, SetEntry] = {}
    for code, raw_set in raw_sets.items():
        sets[code] = SetEntry(
            code=code,
            name=raw_set.name,
            cards=tuple(raw_card.to_card() for raw_card in raw_set.cards),
        )

    return MappingProxyType(sets)
