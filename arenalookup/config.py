from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path(__file__).parent.parent / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    debug: bool = False

    host: str = "0.0.0.0"
    port: int = 4000

    data_path: Path = DATA_DIR / "data.json"
    data_url: str = "https://mtgjson.com/api/v5/AllPrintings.json"
    download_timeout: float = 300.0

    default_target_set: str = "JMP"
    command_prefix: str = "!"

    # "shared": one target set for every client (legacy behavior)
    # "connection": each client selects its own target set
    session_scope: Literal["shared", "connection"] = "shared"

    read_stdin: bool = True


settings = Settings()


# =============================================================================
# PROTOCOL
# =============================================================================

GREETING = "connected to mtg card server"

LINE_TERMINATOR = "\r\n"

# Lines longer than this are dropped instead of buffered
MAX_LINE_BYTES = 64 * 1024
