from __future__ import annotations

import os
import stat
import sys
import tomllib
from pathlib import Path

import pytest

from scaffoldr.config import Settings
from scaffoldr.project_types import find_python
from scaffoldr.prompts import DefaultsPrompter
from scaffoldr.registry import registry
from scaffoldr.scaffold import ProjectScaffolder
from tests.fixtures import RecordingRunner, ScriptedPrompter


def _fake_interpreter(directory: Path, name: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text("#!/bin/sh\n", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.mark.skipif(os.name == "nt", reason="relies on executable bits")
def test_find_python_prefers_search_paths(tmp_path: Path):
    interpreter = _fake_interpreter(tmp_path / "custom-bin", "python3")
    assert find_python([tmp_path / "custom-bin"]) == interpreter


@pytest.mark.skipif(os.name == "nt", reason="relies on executable bits")
def test_find_python_tries_names_in_order(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PATH", "")
    interpreter = _fake_interpreter(tmp_path / "bin", "python")
    assert find_python([tmp_path / "bin"]) == interpreter
    assert find_python([tmp_path / "bin"], names=("pypy3",)) is None


def test_find_python_without_candidates(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PATH", str(tmp_path / "empty"))
    assert find_python([tmp_path / "nothing-here"]) is None


@pytest.fixture()
def scaffolder(settings: Settings) -> ProjectScaffolder:
    return ProjectScaffolder(
        settings,
        registry=registry,
        prompter=ScriptedPrompter(["mit", "Tools for widgets"]),
        runner=RecordingRunner(),
    )


def test_python_package_project(scaffolder: ProjectScaffolder):
    report = scaffolder.create("python-package", "Widget Tools")
    root = report.path
    values = dict(report.replacements)

    init = root / "src" / "widget_tools" / "__init__.py"
    assert init.read_text(encoding="utf-8").startswith('"""Widget Tools: Tools for widgets"""')
    assert '__version__ = "0.1.0"' in init.read_text(encoding="utf-8")

    pyproject = (root / "pyproject.toml").read_text(encoding="utf-8")
    assert 'name = "widget-tools"' in pyproject
    assert 'packages = ["widget_tools"]' in pyproject
    assert f'requires-python = ">={sys.version_info.major}.{sys.version_info.minor}"' in pyproject
    assert 'authors = [{ name = "Ada Lovelace", email = "ada@example.com" }]' in pyproject

    assert 'import_module("widget_tools")' in (root / "tests" / "test_smoke.py").read_text(encoding="utf-8")
    assert (root / ".gitignore").exists()
    assert (root / "COPYING").read_text(encoding="utf-8").startswith("MIT License")
    assert "__" not in (root / "README.md").read_text(encoding="utf-8")

    runner = scaffolder.runner
    assert [args for args, _ in runner.spawned] == [(values["__PYTHON-BIN__"], "-m", "venv", ".venv")]


def test_python_package_without_input_uses_defaults(settings: Settings):
    scaffolder = ProjectScaffolder(
        settings, registry=registry, prompter=DefaultsPrompter(), runner=RecordingRunner()
    )

    report = scaffolder.create("python-package", "quiet")

    assert dict(report.replacements)["__DESCRIPTION__"] == ""
    assert report.license_path is not None and report.license_path.name == "COPYING"
    assert (report.path / "COPYING").read_text(encoding="utf-8").startswith("MIT License")


def test_generic_project(settings: Settings):
    scaffolder = ProjectScaffolder(settings, registry=registry, runner=RecordingRunner())

    report = scaffolder.create("generic", "Notes")

    readme = (report.path / "README.md").read_text(encoding="utf-8")
    assert readme.startswith("# Notes\n")
    assert "Ada Lovelace <ada@example.com>" in readme
    assert (report.path / "CHANGELOG.md").read_text(encoding="utf-8").endswith("- Created Notes.\n")
    assert report.handles == []


def test_python_package_description_stays_valid_toml(settings: Settings):
    prompter = ScriptedPrompter(['Parses "quoted"\\ input\n  safely'])
    scaffolder = ProjectScaffolder(settings, registry=registry, prompter=prompter, runner=RecordingRunner())

    report = scaffolder.create("python-package", "Quoted", license_pattern="mit")

    with (report.path / "pyproject.toml").open("rb") as handle:
        project = tomllib.load(handle)["project"]
    assert project["description"] == "Parses 'quoted' input safely"
    assert "license" not in project
    init = (report.path / "src" / "quoted" / "__init__.py").read_text(encoding="utf-8")
    assert init.startswith('"""Quoted: Parses \'quoted\' input safely"""')


def test_python_package_without_license_builds_valid_metadata(settings: Settings):
    scaffolder = ProjectScaffolder(
        settings, registry=registry, prompter=DefaultsPrompter(), runner=RecordingRunner()
    )

    report = scaffolder.create("python-package", "Bare", with_license=False)

    assert not (report.path / "COPYING").exists()
    with (report.path / "pyproject.toml").open("rb") as handle:
        assert tomllib.load(handle)["project"]["name"] == "bare"
