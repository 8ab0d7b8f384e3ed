from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from scaffoldr.config import Settings  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the user's real configuration file out of every test."""

    monkeypatch.setenv("SCAFFOLDR_CONFIG", str(tmp_path / "missing-config.toml"))


@pytest.fixture()
def template_root(tmp_path: Path) -> Path:
    root = tmp_path / "templates"
    root.mkdir()
    return root


@pytest.fixture()
def settings(tmp_path: Path, template_root: Path) -> Settings:
    return Settings(
        template_root=template_root,
        license_root=tmp_path / "licenses",
        project_root=tmp_path / "projects",
        user_name="Ada Lovelace",
        user_email="ada@example.com",
        organisation="Analytical Engines",
    )
