from arenalookup.models.card import Card, Dataset, SetEntry
from arenalookup.models.failure import (
    DatasetLoadError,
    DatasetRefreshError,
    FailureKind,
    KnownError,
)
from arenalookup.models.session import (
    PerConnectionSessionScope,
    Session,
    SessionScope,
    SharedSessionScope,
    create_session_scope,
)

__all__ = [
    "Card",
    "Dataset",
    "DatasetLoadError",
    "DatasetRefreshError",
    "FailureKind",
    "KnownError",
    "PerConnectionSessionScope",
    "Session",
    "SessionScope",
    "SetEntry",
    "SharedSessionScope",
    "create_session_scope",
]
