from arenalookup.parsers.mtgjson import RawCard, RawSet, parse_dataset, unwrap_envelope

__all__ = [
    "RawCard",
    "RawSet",
    "parse_dataset",
    "unwrap_envelope",
]
