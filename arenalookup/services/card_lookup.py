"""
Card lookup service.

Pure lookups over a Dataset snapshot. When the target set has no answer,
every set is scanned in reverse document order, so newer sets win.

Name matching is case-insensitive for both the exact and the substring check.
"""

from collections.abc import Iterator

from arenalookup.models.card import Card, Dataset, SetEntry


def _fallback_sets(dataset: Dataset) -> Iterator[SetEntry]:
    """All sets, newest (last in document order) first."""
    return reversed(list(dataset.values()))


def lookup_by_id(dataset: Dataset, set_code: str, arena_id: int) -> Card | None:
    """
    Find a card by Arena ID.

    Args:
        dataset: Dataset snapshot
        set_code: Target set searched first
        arena_id: Arena card ID

    Returns:
        The first matching card, or None if no set has it.
    """
    target = dataset.get(set_code)
    if target is not None:
        for card in target.cards:
            if card.mtg_arena_id == arena_id:
                return card

    for entry in _fallback_sets(dataset):
        for card in entry.cards:
            if card.mtg_arena_id == arena_id:
                return card

    return None


def _scan_by_name(entry: SetEntry, needle: str, similar: list[Card]) -> Card | None:
    """Return an exact match, collecting substring matches into `similar`."""
    for card in entry.cards:
        card_name = card.name.lower()
        if card_name == needle:
            return card
        if needle in card_name:
            similar.append(card)
    return None


def lookup_by_name(dataset: Dataset, set_code: str, name: str) -> Card | list[Card]:
    """
    Find cards by name.

    An exact (case-insensitive) match in the target set wins immediately.
    Substring matches in the target set are returned without looking further.
    Otherwise every set is scanned newest first with the same rules.

    Args:
        dataset: Dataset snapshot
        set_code: Target set searched first
        name: Full or partial card name

    Returns:
        A single Card for an exact match, else the list of partial matches
        (empty when nothing matched or the name is blank).
    """
    needle = name.strip().lower()
    if not needle:
        return []

    similar: list[Card] = []

    target = dataset.get(set_code)
    if target is not None:
        exact = _scan_by_name(target, needle, similar)
        if exact is not None:
            return exact
        if similar:
            return similar

    for entry in _fallback_sets(dataset):
        exact = _scan_by_name(entry, needle, similar)
        if exact is not None:
            return exact

    return similar


def get_setname_partial_matches(dataset: Dataset, query: str) -> list[str]:
    """
    List sets whose full name contains `query` (case-insensitive).

    Returns:
        "CODE | Set Name" strings in document order.
    """
    needle = query.lower()
    return [
        f"{code} | {entry.name}"
        for code, entry in dataset.items()
        if needle in entry.name.lower()
    ]
