"""Command line interface for scaffoldr."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Sequence

from . import project_types  # noqa: F401  registers the built-in project types
from .config import Settings
from .errors import ScaffoldError
from .license import LicenseLibrary
from .prompts import ConsolePrompter, DefaultsPrompter
from .registry import registry
from .scaffold import ProjectScaffolder
from .template import TemplateInstantiator, TemplateLocator


def _parse_key_value_pairs(pairs: Iterable[str]) -> list[tuple[str, str]]:
    replacements: list[tuple[str, str]] = []
    for pair in pairs:
        if "=" not in pair:
            raise argparse.ArgumentTypeError(
                f"invalid replacement '{pair}'. Expected TOKEN=VALUE syntax."
            )
        token, value = pair.split("=", 1)
        if not token:
            raise argparse.ArgumentTypeError("tokens must not be empty")
        replacements.append((token, value))
    return replacements


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="scaffoldr", description="Create projects from skeleton templates")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress (repeat for debug output)",
    )
    parser.add_argument("--config", type=Path, help="Read settings from this TOML file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    create_parser = subparsers.add_parser("create", help="create a project of a registered type")
    create_parser.add_argument("type", help="Project type, see 'scaffoldr list'")
    create_parser.add_argument("name", help="Name of the new project directory")
    create_parser.add_argument(
        "-d",
        "--directory",
        type=Path,
        help="Parent directory of the project (defaults to the configured project root)",
    )
    license_group = create_parser.add_mutually_exclusive_group()
    license_group.add_argument("--license", metavar="PATTERN", help="Regular expression selecting the license")
    license_group.add_argument("--no-license", action="store_true", help="Do not add a license file")
    create_parser.add_argument(
        "--git",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Initialise a git repository (defaults to the configured behaviour)",
    )
    create_parser.add_argument(
        "-r",
        "--replace",
        metavar="TOKEN=VALUE",
        action="append",
        default=[],
        help="Extra replacement taking precedence over the project type's",
    )
    create_parser.add_argument(
        "--no-input",
        action="store_true",
        help="Use defaults instead of asking questions",
    )
    create_parser.add_argument(
        "--wait",
        action="store_true",
        help="Wait for post-creation commands to finish",
    )

    subparsers.add_parser("list", help="list the registered project types")
    subparsers.add_parser("licenses", help="list the available license templates")

    instantiate_parser = subparsers.add_parser(
        "instantiate", help="copy a template with literal token replacements"
    )
    instantiate_parser.add_argument("template", help="Template name")
    instantiate_parser.add_argument("destination", type=Path, help="Directory to create")
    instantiate_parser.add_argument(
        "-r",
        "--replace",
        metavar="TOKEN=VALUE",
        action="append",
        default=[],
        help="Token replacement, applied in the given order",
    )

    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _handle_create(args: argparse.Namespace, settings: Settings) -> int:
    prompter = DefaultsPrompter() if args.no_input else ConsolePrompter()
    scaffolder = ProjectScaffolder(settings, prompter=prompter)
    report = scaffolder.create(
        args.type,
        args.name,
        directory=args.directory,
        license_pattern=args.license,
        with_license=not args.no_license,
        init_git=args.git,
        extra_replacements=_parse_key_value_pairs(args.replace),
    )
    if args.wait:
        report.wait()
    for warning in report.warnings:
        print(f"warning: {warning}", file=sys.stderr)
    print(f"Project created at {report.path}")
    return 0


def _handle_list() -> int:
    for name in sorted(registry.names()):
        print(f"{name:<20} {registry.lookup(name).label}")
    return 0


def _handle_licenses(settings: Settings) -> int:
    for path in LicenseLibrary.with_user_root(settings.license_root).available():
        print(f"{path.name:<20} {path}")
    return 0


def _handle_instantiate(args: argparse.Namespace, settings: Settings) -> int:
    instantiator = TemplateInstantiator(TemplateLocator.with_user_root(settings.template_root))
    path = instantiator.instantiate(args.template, args.destination, _parse_key_value_pairs(args.replace))
    print(f"Template instantiated at {path}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    try:
        settings = Settings.load(args.config)
        if args.command == "create":
            return _handle_create(args, settings)
        if args.command == "list":
            return _handle_list()
        if args.command == "licenses":
            return _handle_licenses(settings)
        if args.command == "instantiate":
            return _handle_instantiate(args, settings)
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))
    except ScaffoldError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    parser.error("no command provided")
    return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
