"""Replacement producers and their resolution into literal strings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Iterable, Union

from .errors import ConfigurationError, ReplacementTypeError

if TYPE_CHECKING:
    from .config import Settings
    from .prompts import Prompter

__all__ = [
    "Computed",
    "LiteralValue",
    "Producer",
    "Prompted",
    "ReplacementContext",
    "ReplacementSpec",
    "SettingRef",
    "current_year",
    "default_replacements",
    "resolve",
    "validate_specs",
]


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReplacementContext:
    """Values available to computed and prompted producers."""

    project_name: str
    destination: Path
    settings: "Settings"


@dataclass(frozen=True, slots=True)
class LiteralValue:
    """A fixed replacement value."""

    value: str


@dataclass(frozen=True, slots=True)
class SettingRef:
    """A setting looked up when the replacement is resolved.

    ``key`` names an attribute of :class:`~scaffoldr.config.Settings`, or
    an entry of its ``variables`` table when no such attribute exists.
    """

    key: str


@dataclass(frozen=True, slots=True)
class Computed:
    """A value computed from the :class:`ReplacementContext`."""

    func: Callable[[ReplacementContext], Any]


@dataclass(frozen=True, slots=True)
class Prompted:
    """A value gathered interactively through a :class:`~scaffoldr.prompts.Prompter`."""

    func: Callable[["Prompter", ReplacementContext], Any]


Producer = Union[str, LiteralValue, SettingRef, Computed, Prompted]
ReplacementSpec = tuple[str, Producer]

_PRODUCER_TYPES = (str, LiteralValue, SettingRef, Computed, Prompted)


def validate_specs(specs: Iterable[Any]) -> list[ReplacementSpec]:
    """Check that ``specs`` is a sequence of ``(token, producer)`` pairs."""

    validated: list[ReplacementSpec] = []
    for spec in specs:
        try:
            token, producer = spec
        except (TypeError, ValueError):
            raise ReplacementTypeError(f"replacement specs must be (token, producer) pairs, got {spec!r}") from None
        if not isinstance(token, str) or not token:
            raise ReplacementTypeError(f"replacement tokens must be non-empty strings, got {token!r}")
        if not isinstance(producer, _PRODUCER_TYPES):
            raise ReplacementTypeError(
                f"unsupported producer for '{token}': {type(producer).__name__}"
            )
        validated.append((token, producer))
    return validated


def _lookup_setting(settings: "Settings", key: str) -> Any:
    if key in type(settings).model_fields:
        return getattr(settings, key)
    if key in settings.variables:
        return settings.variables[key]
    raise ConfigurationError(f"unknown setting '{key}'")


def _produce(producer: Producer, context: ReplacementContext, prompter: "Prompter | None") -> Any:
    if isinstance(producer, str):
        return producer
    if isinstance(producer, LiteralValue):
        return producer.value
    if isinstance(producer, SettingRef):
        return _lookup_setting(context.settings, producer.key)
    if isinstance(producer, Computed):
        return producer.func(context)
    if isinstance(producer, Prompted):
        if prompter is None:
            raise ConfigurationError("an interactive replacement needs a prompter")
        return producer.func(prompter, context)
    raise ReplacementTypeError(f"unsupported producer: {type(producer).__name__}")


def resolve(
    specs: Iterable[ReplacementSpec],
    context: ReplacementContext,
    prompter: "Prompter | None" = None,
) -> list[tuple[str, str]]:
    """Resolve every producer of ``specs`` exactly once, in order.

    Parameters
    ----------
    specs:
        ``(token, producer)`` pairs as declared by a project type.
    context:
        Project name, destination and settings handed to producers.
    prompter:
        Used by :class:`Prompted` producers. Prompts are issued in the order
        the specs are declared.
    """

    resolved: list[tuple[str, str]] = []
    for token, producer in validate_specs(specs):
        value = _produce(producer, context, prompter)
        if not isinstance(value, str):
            raise ReplacementTypeError(
                f"replacement for '{token}' resolved to {type(value).__name__}, expected str"
            )
        LOGGER.debug("resolved %s -> %r", token, value)
        resolved.append((token, value))
    return resolved


def current_year(context: ReplacementContext) -> str:
    return str(date.today().year)


def default_replacements() -> list[ReplacementSpec]:
    """Return the replacements appended after every project type's own."""

    return [
        ("__YEAR__", Computed(current_year)),
        ("__USER-NAME__", SettingRef("user_name")),
        ("__USER-MAIL-ADDRESS__", SettingRef("user_email")),
        ("__ORGANISATION__", SettingRef("organisation")),
    ]
