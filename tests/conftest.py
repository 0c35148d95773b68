from __future__ import annotations

import io
from pathlib import Path

import pytest

from trustkit.cli.main import main
from trustkit.context import StoreContext


class CLIRunner:
    def __init__(self, root: Path) -> None:
        self.store_dir = root / "store"
        self.keys_dir = root / "keys"
        self.config_path = root / "config.toml"

    def __call__(self, *argv: str, stdin: str = "") -> tuple[int, str, str]:
        out = io.StringIO()
        err = io.StringIO()
        rc = main(
            [
                "--config",
                str(self.config_path),
                "--store-dir",
                str(self.store_dir),
                "--keys-dir",
                str(self.keys_dir),
                *argv,
            ],
            stdin=io.StringIO(stdin),
            stdout=out,
            stderr=err,
        )
        return rc, out.getvalue(), err.getvalue()

    def context(self, **kwargs) -> StoreContext:
        return StoreContext(store_dir=self.store_dir, keys_dir=self.keys_dir, **kwargs)

    def setup(self, *accounts: str, operator: str = "O") -> None:
        rc, _, err = self("add", "operator", "--name", operator)
        assert rc == 0, err
        for account in accounts:
            rc, _, err = self("add", "account", "--name", account)
            assert rc == 0, err


@pytest.fixture
def cli(tmp_path, monkeypatch) -> CLIRunner:
    monkeypatch.delenv("TRUSTKIT_STORE_DIR", raising=False)
    monkeypatch.delenv("TRUSTKIT_KEYS_DIR", raising=False)
    return CLIRunner(tmp_path)
