from arenalookup.models.card import Card, SetEntry
from arenalookup.services.card_formatter import (
    format_card,
    format_card_block,
    format_clear,
    format_match_list,
    format_set_index,
    format_set_listing,
)

SHOCK = Card(
    name="Shock",
    mtg_arena_id=70000,
    mana_cost="{R}",
    text="Shock deals 2 damage to any target.",
    type="Instant",
)

BEAR = Card(
    name="Grizzly Bears",
    mtg_arena_id=70001,
    mana_cost="{1}{G}",
    type="Creature — Bear",
    power="2",
    toughness="2",
)


class TestFormatCard:
    def test_non_creature_has_no_stats(self) -> None:
        assert format_card(SHOCK) == "Shock {R} Shock deals 2 damage to any target."

    def test_creature_includes_power_toughness(self) -> None:
        assert format_card(BEAR) == "Grizzly Bears {1}{G} 2/2"

    def test_variable_stats_kept_verbatim(self) -> None:
        card = Card(
            name="Tarmogoyf",
            mana_cost="{1}{G}",
            type="Creature — Lhurgoyf",
            power="*",
            toughness="1+*",
        )

        assert format_card(card) == "Tarmogoyf {1}{G} */1+*"

    def test_creature_without_stats(self) -> None:
        """Missing stats are left out rather than printed as None."""
        card = Card(name="Odd Creature", type="Creature — Horror")

        assert format_card(card) == "Odd Creature"

    def test_block_wrapped_in_delimiters(self) -> None:
        assert format_card_block(SHOCK) == (
            "=====\r\nShock {R} Shock deals 2 damage to any target.\r\n====="
        )


class TestFormatMatchList:
    def test_lists_id_and_name(self) -> None:
        assert format_match_list([SHOCK, BEAR]) == (
            "=====\r\n[2] matches:\r\n70000 Shock\r\n70001 Grizzly Bears\r\n====="
        )


class TestFormatSetListing:
    def test_short_listing(self) -> None:
        entry = SetEntry(code="TST", name="Test Set", cards=(SHOCK, BEAR))

        assert format_set_listing(entry) == "0) Shock\r\n1) Grizzly Bears"

    def test_long_listing(self) -> None:
        entry = SetEntry(code="TST", name="Test Set", cards=(SHOCK,))

        assert format_set_listing(entry, long=True) == (
            "#0 Shock [70000] {R}:\r\n\r\nShock deals 2 damage to any target.\r\n"
        )

    def test_empty_set(self) -> None:
        assert format_set_listing(SetEntry(code="TST", name="Test Set")) == ""


class TestFormatSetIndex:
    def test_numbered_codes_and_names(self) -> None:
        sets = [
            SetEntry(code="AAA", name="First"),
            SetEntry(code="BBB", name="Second"),
        ]

        assert format_set_index(sets) == "0) AAA | First\r\n1) BBB | Second"


class TestFormatClear:
    def test_twenty_line_breaks(self) -> None:
        assert format_clear().count("\r\n") == 20
        assert format_clear().strip() == ""
