from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

ROOT = Path(__file__).resolve().parent.parent


def test_source_roots_are_not_installed() -> None:
    config = tomllib.loads((ROOT / "pyproject.toml").read_text())
    setuptools = config["tool"]["setuptools"]

    assert setuptools["packages"] == []
    assert setuptools["py-modules"] == []
    assert config["tool"]["pytest"]["ini_options"]["pythonpath"] == ["backend", "frontend"]
