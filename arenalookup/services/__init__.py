from arenalookup.services.card_lookup import (
    get_setname_partial_matches,
    lookup_by_id,
    lookup_by_name,
)
from arenalookup.services.command_interpreter import Command, CommandInterpreter, parse_command
from arenalookup.services.data_refresh import DatasetRefresher, refresh_and_reload
from arenalookup.services.dataset_store import DatasetStore, load_dataset

__all__ = [
    "Command",
    "CommandInterpreter",
    "DatasetRefresher",
    "DatasetStore",
    "get_setname_partial_matches",
    "load_dataset",
    "lookup_by_id",
    "lookup_by_name",
    "parse_command",
    "refresh_and_reload",
]
