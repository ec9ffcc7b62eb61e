"""
Session state: the currently selected target set.

The interpreter never owns a session directly. It asks a SessionScope for the
session belonging to a connection, so whether clients share one target set or
each get their own is decided by whichever scope is injected.
"""

from collections.abc import Hashable
from dataclasses import dataclass
from typing import Protocol


@dataclass
class Session:
    """Mutable per-scope state used by terse queries."""

    target_set: str


class SessionScope(Protocol):
    def session_for(self, connection: Hashable) -> Session: ...

    def release(self, connection: Hashable) -> None: ...


class SharedSessionScope:
    """
    One session for every connection.

    A `set` issued by any client changes what every other client sees.
    """

    def __init__(self, default_target_set: str):
        self._session = Session(target_set=default_target_set)

    def session_for(self, connection: Hashable) -> Session:  # noqa: ARG002
        return self._session

    def release(self, connection: Hashable) -> None:  # noqa: ARG002
        pass


class PerConnectionSessionScope:
    """A separate session per connection, created on first use."""

    def __init__(self, default_target_set: str):
        self._default_target_set = default_target_set
        self._sessions: dict[Hashable, Session] = {}

    def session_for(self, connection: Hashable) -> Session:
        session = self._sessions.get(connection)
        if session is None:
            session = Session(target_set=self._default_target_set)
            self._sessions[connection] = session
        return session

    def release(self, connection: Hashable) -> None:
        self._sessions.pop(connection, None)


def create_session_scope(scope: str, default_target_set: str) -> SessionScope:
    """
    Build the session scope named in configuration.

    Raises:
        ValueError: If the scope name is unknown
    """
    if scope == "shared":
        return SharedSessionScope(default_target_set)
    if scope == "connection":
        return PerConnectionSessionScope(default_target_set)
    raise ValueError(f"Unknown session scope: {scope}. Must be 'shared' or 'connection'")
