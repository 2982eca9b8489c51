"""Tests for the csl-sync command line interface.

The remote engine is replaced with a ``MagicMock`` client; definition
files are written to ``tmp_path``.
"""

import textwrap
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from csl_sync import cli
from csl_sync.schema.models import (
    ColumnDefinition,
    FunctionDefinition,
    ObjectKind,
    TableDefinition,
)
from csl_sync.schema.store import write_definition


# ------------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------------


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "sync.toml"
    path.write_text(textwrap.dedent("""\
        [profiles.dev]
        url = "sqlite://"
        description = "Dev engine"
    """))
    return path


@pytest.fixture
def root(tmp_path: Path) -> Path:
    return tmp_path / "schema"


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    fake = MagicMock()
    fake.list_tables.return_value = []
    fake.list_functions.return_value = []
    monkeypatch.setattr(cli, "create_client", lambda *args, **kwargs: fake)
    return fake


def _orders() -> TableDefinition:
    return TableDefinition(
        name="Orders",
        folder="Sales",
        columns=[ColumnDefinition(name="OrderId", data_type="long")],
    )


def _run(config_file: Path, *args: str) -> int:
    return cli.main(["--config", str(config_file), *args])


# ------------------------------------------------------------------
# profiles
# ------------------------------------------------------------------


class TestProfiles:
    def test_lists_profiles(self, config_file: Path, capsys: pytest.CaptureFixture) -> None:
        assert _run(config_file, "profiles") == 0
        assert "dev" in capsys.readouterr().out

    def test_missing_config(self, tmp_path: Path) -> None:
        assert _run(tmp_path / "missing.toml", "profiles") == 1


# ------------------------------------------------------------------
# diff
# ------------------------------------------------------------------


class TestDiff:
    def test_no_drift(self, config_file: Path, root: Path, client: MagicMock) -> None:
        assert _run(config_file, "diff", "--profile", "dev", "--root", str(root)) == 0
        client.close.assert_called_once()

    def test_drift_exit_code(
        self, config_file: Path, root: Path, client: MagicMock, capsys: pytest.CaptureFixture
    ) -> None:
        client.list_tables.return_value = [_orders()]

        assert _run(config_file, "diff", "--profile", "dev", "--root", str(root)) == 1
        assert "Only in remote" in capsys.readouterr().out

    def test_unknown_profile(self, config_file: Path, root: Path, client: MagicMock) -> None:
        assert _run(config_file, "diff", "--profile", "nope", "--root", str(root)) == 1

    def test_profile_from_env(
        self, config_file: Path, root: Path, client: MagicMock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SYNC_PROFILE", "dev")
        assert _run(config_file, "diff", "--root", str(root)) == 0


# ------------------------------------------------------------------
# pull / push
# ------------------------------------------------------------------


class TestPull:
    def test_dry_run_writes_nothing(self, config_file: Path, root: Path, client: MagicMock) -> None:
        client.list_tables.return_value = [_orders()]

        assert _run(config_file, "pull", "--profile", "dev", "--root", str(root)) == 0
        assert not root.exists()

    def test_confirm_writes_files(self, config_file: Path, root: Path, client: MagicMock) -> None:
        client.list_tables.return_value = [_orders()]

        assert _run(config_file, "pull", "--profile", "dev", "--root", str(root), "--confirm") == 0
        assert (root / "Tables" / "Sales" / "Orders.csl").is_file()

    def test_pull_moves_file_to_remote_folder(self, config_file: Path, root: Path, client: MagicMock) -> None:
        write_definition(_orders().model_copy(update={"folder": "Old"}), root)
        client.list_tables.return_value = [_orders()]

        assert _run(config_file, "pull", "--profile", "dev", "--root", str(root), "--confirm") == 0
        assert not (root / "Tables" / "Old" / "Orders.csl").exists()
        assert (root / "Tables" / "Sales" / "Orders.csl").is_file()

    def test_delete_removes_local_only(self, config_file: Path, root: Path, client: MagicMock) -> None:
        write_definition(FunctionDefinition(name="Foo", folder="X", body="{ 1 }"), root)

        assert _run(config_file, "pull", "--profile", "dev", "--root", str(root), "--delete", "--confirm") == 0
        assert not (root / "Functions" / "X" / "Foo.csl").exists()


class TestPush:
    def test_confirm_executes_commands(self, config_file: Path, root: Path, client: MagicMock) -> None:
        write_definition(FunctionDefinition(name="Foo", body="{ 1 }"), root)

        assert _run(config_file, "push", "--profile", "dev", "--root", str(root), "--confirm") == 0
        client.execute.assert_called_once()
        assert client.execute.call_args.args[1] == "Foo"

    def test_nothing_to_sync(self, config_file: Path, root: Path, client: MagicMock) -> None:
        assert _run(config_file, "push", "--profile", "dev", "--root", str(root), "--confirm") == 0
        client.execute.assert_not_called()

    def test_delete_drops_remote_only(self, config_file: Path, root: Path, client: MagicMock) -> None:
        client.list_tables.return_value = [_orders()]

        assert _run(config_file, "push", "--profile", "dev", "--root", str(root), "--delete", "--confirm") == 0
        client.drop.assert_called_once_with(ObjectKind.TABLE, "Orders")

    def test_without_delete_keeps_remote_only(self, config_file: Path, root: Path, client: MagicMock) -> None:
        client.list_tables.return_value = [_orders()]

        assert _run(config_file, "push", "--profile", "dev", "--root", str(root), "--confirm") == 0
        client.drop.assert_not_called()

    def test_remote_failure_exit_code(self, config_file: Path, root: Path, client: MagicMock) -> None:
        write_definition(_orders(), root)
        client.execute.side_effect = RuntimeError("rejected")

        assert _run(config_file, "push", "--profile", "dev", "--root", str(root), "--confirm") == 1


# ------------------------------------------------------------------
# Connection failures
# ------------------------------------------------------------------


class TestConnectionFailure:
    @pytest.fixture
    def bad_dialect_config(self, tmp_path: Path) -> Path:
        path = tmp_path / "bad.toml"
        path.write_text(textwrap.dedent("""\
            [profiles.dev]
            url = "nosuchdialect+https://dev.example.net/MyDatabase"
        """))
        return path

    @pytest.mark.parametrize("command", ["diff", "push", "pull"])
    def test_unknown_dialect_returns_error(
        self, bad_dialect_config: Path, root: Path, command: str, capsys: pytest.CaptureFixture
    ) -> None:
        assert _run(bad_dialect_config, command, "--profile", "dev", "--root", str(root)) == 1
        assert "Connection failed" in capsys.readouterr().out

    def test_listing_failure_closes_client(
        self, config_file: Path, root: Path, client: MagicMock, capsys: pytest.CaptureFixture
    ) -> None:
        client.list_tables.side_effect = ConnectionError("authentication rejected")

        assert _run(config_file, "diff", "--profile", "dev", "--root", str(root)) == 1
        assert "authentication rejected" in capsys.readouterr().out
        client.close.assert_called_once()

    def test_push_listing_failure_executes_nothing(
        self, config_file: Path, root: Path, client: MagicMock
    ) -> None:
        write_definition(_orders(), root)
        client.list_functions.side_effect = ConnectionError("timed out")

        assert _run(config_file, "push", "--profile", "dev", "--root", str(root), "--confirm") == 1
        client.execute.assert_not_called()

    def test_unreadable_definition_file(self, config_file: Path, root: Path, client: MagicMock) -> None:
        path = root / "Tables" / "Orders.csl"
        path.parent.mkdir(parents=True)
        path.write_bytes(b"\xe9")

        assert _run(config_file, "diff", "--profile", "dev", "--root", str(root)) == 1
