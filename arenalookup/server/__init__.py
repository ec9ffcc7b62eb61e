from arenalookup.server.console import run_console
from arenalookup.server.protocol import dispatch_line
from arenalookup.server.tcp import LookupServer

__all__ = [
    "LookupServer",
    "dispatch_line",
    "run_console",
]
