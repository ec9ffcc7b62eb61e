from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Card:
    """
    A single printing of a card within a set.

    Attributes:
        name: Card name as printed
        mtg_arena_id: Arena's internal card ID; unique within a set only
        mana_cost: Mana cost string (e.g., "{2}{B}{B}"), empty for lands
        text: Rules text
        type: Full type line (e.g., "Legendary Creature — Phyrexian Praetor")
        power: Power for creatures, may be non-numeric (e.g., "*")
        toughness: Toughness for creatures, may be non-numeric
    """

    name: str
    mtg_arena_id: int | None = None
    mana_cost: str = ""
    text: str = ""
    type: str = ""
    power: str | None = None
    toughness: str | None = None

    @property
    def is_creature(self) -> bool:
        return "Creature" in self.type


@dataclass(frozen=True, slots=True)
class SetEntry:
    """A named set of cards. Card order is the source order."""

    code: str
    name: str
    cards: tuple[Card, ...] = ()


# Set code -> SetEntry, in source order. Never mutated once built.
Dataset = Mapping[str, SetEntry]
