from __future__ import annotations

import argparse
from pathlib import Path

import pytest

from scaffoldr.cli import _parse_key_value_pairs, main
from tests.fixtures import write_tree


@pytest.fixture()
def config_file(tmp_path: Path, template_root: Path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(
        f"""
template_root = "{template_root.as_posix()}"
license_root = "{(tmp_path / 'licenses').as_posix()}"
project_root = "{(tmp_path / 'projects').as_posix()}"
user_name = "Ada Lovelace"
user_email = "ada@example.com"
init_git = false
""",
        encoding="utf-8",
    )
    return path


def test_parse_key_value_pairs():
    assert _parse_key_value_pairs(["__A__=1", "__B__=x=y"]) == [("__A__", "1"), ("__B__", "x=y")]

    with pytest.raises(argparse.ArgumentTypeError):
        _parse_key_value_pairs(["invalid"])
    with pytest.raises(argparse.ArgumentTypeError):
        _parse_key_value_pairs(["=value"])


def test_cli_list_prints_sorted_types(capsys: pytest.CaptureFixture[str], config_file: Path):
    assert main(["--config", str(config_file), "list"]) == 0
    lines = capsys.readouterr().out.splitlines()
    names = [line.split()[0] for line in lines]
    assert names == sorted(names)
    assert {"generic", "python-package"} <= set(names)


def test_cli_licenses(capsys: pytest.CaptureFixture[str], config_file: Path):
    assert main(["--config", str(config_file), "licenses"]) == 0
    names = [line.split()[0] for line in capsys.readouterr().out.splitlines()]
    assert names == ["bsd-3-clause", "isc", "mit"]


def test_cli_instantiate(tmp_path: Path, template_root: Path, config_file: Path):
    write_tree(template_root / "basic", {"__NAME__.txt": "Hello, __NAME__!"})
    destination = tmp_path / "out"

    exit_code = main(
        ["--config", str(config_file), "instantiate", "basic", str(destination), "-r", "__NAME__=Widget"]
    )

    assert exit_code == 0
    assert (destination / "Widget.txt").read_text(encoding="utf-8") == "Hello, Widget!"


def test_cli_create_without_input(
    tmp_path: Path, config_file: Path, capsys: pytest.CaptureFixture[str]
):
    exit_code = main(["--config", str(config_file), "create", "generic", "Notes", "--no-input"])

    project = tmp_path / "projects" / "Notes"
    assert exit_code == 0
    assert (project / "README.md").read_text(encoding="utf-8").startswith("# Notes")
    assert (project / "COPYING").read_text(encoding="utf-8").startswith("MIT License")
    assert not (project / ".git").exists()
    assert str(project) in capsys.readouterr().out


def test_cli_create_with_license_and_directory(tmp_path: Path, config_file: Path):
    exit_code = main(
        [
            "--config",
            str(config_file),
            "create",
            "generic",
            "Other",
            "-d",
            str(tmp_path / "elsewhere"),
            "--license",
            "isc",
            "--no-input",
        ]
    )

    assert exit_code == 0
    assert (tmp_path / "elsewhere" / "Other" / "COPYING").read_text(encoding="utf-8").startswith("ISC License")


def test_cli_create_without_license(tmp_path: Path, config_file: Path):
    assert main(["--config", str(config_file), "create", "generic", "Bare", "--no-license", "--no-input"]) == 0
    assert not (tmp_path / "projects" / "Bare" / "COPYING").exists()


def test_cli_reports_errors(tmp_path: Path, config_file: Path, capsys: pytest.CaptureFixture[str]):
    (tmp_path / "projects" / "Taken").mkdir(parents=True)

    exit_code = main(["--config", str(config_file), "create", "generic", "Taken", "--no-input"])

    assert exit_code == 1
    assert "already exists" in capsys.readouterr().err


def test_cli_unknown_type(config_file: Path, capsys: pytest.CaptureFixture[str]):
    assert main(["--config", str(config_file), "create", "nope", "X", "--no-input"]) == 1
    assert "unknown project type 'nope'" in capsys.readouterr().err


def test_cli_missing_config_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    assert main(["--config", str(tmp_path / "absent.toml"), "list"]) == 1
    assert "does not exist" in capsys.readouterr().err
