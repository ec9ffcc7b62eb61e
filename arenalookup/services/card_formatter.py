"""
Reply formatting.

THIS MODULE HANDLES OUTPUT RENDERING ONLY. It never looks anything up; it
renders cards and sets it is handed. Lines are joined with CRLF and replies
carry no trailing terminator (the server adds it).
"""

from collections.abc import Sequence

from arenalookup.config import LINE_TERMINATOR
from arenalookup.models.card import Card, SetEntry

CARD_DELIMITER = "====="

CLEAR_LINE_COUNT = 20


def format_card(card: Card) -> str:
    """Render one card: `name manaCost [power/toughness] text`."""
    parts = [card.name, card.mana_cost]
    if card.is_creature and card.power is not None and card.toughness is not None:
        parts.append(f"{card.power}/{card.toughness}")
    parts.append(card.text)
    return " ".join(part for part in parts if part)


def format_card_block(card: Card) -> str:
    """Render one card between delimiter lines."""
    return LINE_TERMINATOR.join([CARD_DELIMITER, format_card(card), CARD_DELIMITER])


def format_match_list(cards: Sequence[Card]) -> str:
    """Render several matches as `<arena id> <name>` lines."""
    lines = [CARD_DELIMITER, f"[{len(cards)}] matches:"]
    lines.extend(f"{card.mtg_arena_id} {card.name}" for card in cards)
    lines.append(CARD_DELIMITER)
    return LINE_TERMINATOR.join(lines)


def format_set_listing(entry: SetEntry, long: bool = False) -> str:
    """
    Render every card of a set in stored order, indexed from 0.

    Args:
        entry: Set to list
        long: Include Arena ID, mana cost and rules text for each card
    """
    if not long:
        return LINE_TERMINATOR.join(
            f"{index}) {card.name}" for index, card in enumerate(entry.cards)
        )

    blocks = [
        f"#{index} {card.name} [{card.mtg_arena_id}] {card.mana_cost}:"
        f"{LINE_TERMINATOR}{LINE_TERMINATOR}{card.text}{LINE_TERMINATOR}"
        for index, card in enumerate(entry.cards)
    ]
    return LINE_TERMINATOR.join(blocks)


def format_set_index(sets: Sequence[SetEntry]) -> str:
    """Render `i) CODE | Set Name` for each set."""
    return LINE_TERMINATOR.join(
        f"{index}) {entry.code} | {entry.name}" for index, entry in enumerate(sets)
    )


def format_clear() -> str:
    """Blank lines that push previous output off screen."""
    return LINE_TERMINATOR * CLEAR_LINE_COUNT
