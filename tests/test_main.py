import asyncio
import logging
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from pydantic import ValidationError

from arenalookup.config import Settings
from arenalookup.main import bootstrap, build_interpreter, main, parse_args, stop_console
from arenalookup.models.failure import DatasetLoadError, DatasetRefreshError
from arenalookup.models.session import PerConnectionSessionScope, SharedSessionScope
from arenalookup.services.data_refresh import DatasetRefresher
from arenalookup.services.dataset_store import DatasetStore

DATA_URL = "https://mtgjson.example.com/AllPrintings.json"


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PORT", raising=False)
        config = Settings(_env_file=None)

        assert config.port == 4000
        assert config.default_target_set == "JMP"
        assert config.command_prefix == "!"
        assert config.session_scope == "shared"
        assert "port" not in config.model_fields_set

    def test_port_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "5000")

        config = Settings(_env_file=None)

        assert config.port == 5000
        assert "port" in config.model_fields_set

    def test_invalid_session_scope_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SESSION_SCOPE", "global")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestBootstrap:
    @pytest.mark.asyncio
    async def test_existing_file_loaded(self, dataset_file: Path) -> None:
        store = DatasetStore(dataset_file)
        with patch("arenalookup.main.refresh_and_reload", new_callable=AsyncMock) as refresh:
            await bootstrap(store, DatasetRefresher(DATA_URL), force_update=False)

        refresh.assert_not_awaited()
        assert "JMP" in store.current()

    @pytest.mark.asyncio
    async def test_missing_file_downloaded(self, tmp_path: Path) -> None:
        store = DatasetStore(tmp_path / "data.json")
        with patch("arenalookup.main.refresh_and_reload", new_callable=AsyncMock) as refresh:
            await bootstrap(store, DatasetRefresher(DATA_URL), force_update=False)

        refresh.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_file_download_failure_is_fatal(self, tmp_path: Path) -> None:
        store = DatasetStore(tmp_path / "data.json")
        with (
            patch(
                "arenalookup.main.refresh_and_reload",
                new_callable=AsyncMock,
                side_effect=DatasetRefreshError(DATA_URL, "HTTP 500"),
            ),
            pytest.raises(DatasetRefreshError),
        ):
            await bootstrap(store, DatasetRefresher(DATA_URL), force_update=False)

        assert not store.loaded

    @pytest.mark.asyncio
    async def test_forced_update_failure_falls_back(self, dataset_file: Path) -> None:
        """A failed --update still starts from the existing file."""
        store = DatasetStore(dataset_file)
        with patch(
            "arenalookup.main.refresh_and_reload",
            new_callable=AsyncMock,
            side_effect=DatasetRefreshError(DATA_URL, "HTTP 500"),
        ) as refresh:
            await bootstrap(store, DatasetRefresher(DATA_URL), force_update=True)

        refresh.assert_awaited_once()
        assert "JMP" in store.current()

    @pytest.mark.asyncio
    async def test_corrupt_file_is_fatal(self, tmp_path: Path) -> None:
        path = tmp_path / "data.json"
        path.write_text("{ nope", encoding="utf-8")

        with pytest.raises(DatasetLoadError):
            await bootstrap(DatasetStore(path), DatasetRefresher(DATA_URL), force_update=False)


class TestBuildInterpreter:
    def test_session_scope_from_settings(self, store: DatasetStore) -> None:
        refresher = DatasetRefresher(DATA_URL)

        shared = build_interpreter(Settings(_env_file=None), store, refresher)
        isolated = build_interpreter(
            Settings(_env_file=None, session_scope="connection"), store, refresher
        )

        assert isinstance(shared.sessions, SharedSessionScope)
        assert isinstance(isolated.sessions, PerConnectionSessionScope)
        assert shared.updater is not None


class TestMain:
    def test_parse_args(self) -> None:
        args = parse_args(["--update", "--port", "4100", "--no-stdin"])

        assert args.update
        assert args.port == 4100
        assert args.no_stdin

    def test_parse_args_defaults(self) -> None:
        args = parse_args([])

        assert not args.update
        assert args.port is None
        assert not args.no_stdin

    def test_startup_failure_exits_nonzero(self) -> None:
        error = DatasetLoadError(Path("data.json"), "file not found")
        with patch("arenalookup.main.serve", new=AsyncMock(side_effect=error)):
            assert main(["--no-stdin"]) == 1

    def test_overrides_passed_to_serve(self) -> None:
        serve = AsyncMock()
        with patch("arenalookup.main.serve", new=serve):
            assert main(["--port", "4100", "--no-stdin", "--update"]) == 0

        config = serve.await_args.args[0]
        assert config.port == 4100
        assert config.read_stdin is False
        assert serve.await_args.kwargs == {"force_update": True}


class TestStopConsole:
    @pytest.mark.asyncio
    async def test_running_console_cancelled(self) -> None:
        console = asyncio.create_task(asyncio.sleep(3600))
        await asyncio.sleep(0)

        await stop_console(console)

        assert console.cancelled()

    @pytest.mark.asyncio
    async def test_console_failure_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """A reader that already died has its exception logged, not dropped."""

        async def broken_reader() -> None:
            raise RuntimeError("stdin went away")

        console = asyncio.create_task(broken_reader())
        await asyncio.sleep(0)

        with caplog.at_level(logging.ERROR, logger="arenalookup.main"):
            await stop_console(console)

        assert "Console reader failed" in caplog.text
        assert "stdin went away" in caplog.text
