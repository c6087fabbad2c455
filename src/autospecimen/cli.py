from __future__ import annotations

import importlib
import json
import logging
from dataclasses import replace
from typing import Any

import typer
from pydantic import BaseModel
from rich.console import Console

from autospecimen.config import default_settings
from autospecimen.customizations.registry import default_registry
from autospecimen.errors import SpecimenError, UnsupportedMatchingMode
from autospecimen.factory import create_fixture, create_fixture_with_mocks
from autospecimen.matching import Matching, parse_matching, related_types
from autospecimen.requests import type_name
from autospecimen.runtime import initialize_runtime

app = typer.Typer(help="autospecimen CLI")
registry_app = typer.Typer(help="Customization registry commands")

app.add_typer(registry_app, name="registry")

console = Console()
logger = logging.getLogger(__name__)

TARGET_ARGUMENT = typer.Argument(..., help="Type as module:Qualname or a builtin name")
MATCHING_OPTION = typer.Option("exact_type", "--matching", "-m")
COUNT_OPTION = typer.Option(1, "--count", "-n", min=1)
SEED_OPTION = typer.Option(None, "--seed")
MOCKS_OPTION = typer.Option(False, "--mocks")
JSON_OPTION = typer.Option(False, "--json")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v")


def load_target(path: str) -> type:
    text = path.strip()
    if not text:
        raise typer.BadParameter("target must not be empty")
    if ":" in text:
        module_name, _, qualname = text.partition(":")
    elif "." in text:
        module_name, _, qualname = text.rpartition(".")
    else:
        module_name, qualname = "builtins", text
    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise typer.BadParameter(f"cannot import module {module_name!r}: {exc}") from exc
    for part in qualname.split("."):
        if not hasattr(target, part):
            raise typer.BadParameter(f"{part!r} not found in {module_name}")
        target = getattr(target, part)
    if not isinstance(target, type):
        raise typer.BadParameter(f"{text} is not a type")
    return target


def _render(value: Any) -> str:
    if isinstance(value, BaseModel):
        return value.model_dump_json(indent=2)
    return repr(value)


@app.command("relations")
def relations(
    target: str = TARGET_ARGUMENT,
    matching: str = MATCHING_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    initialize_runtime(verbose=verbose, logger=logger)
    cls = load_target(target)
    try:
        mode = parse_matching(matching)
    except UnsupportedMatchingMode as exc:
        valid = ", ".join(member.value for member in Matching)
        raise typer.BadParameter(f"{exc} (expected one of: {valid})") from exc
    logger.info("relations start target=%s matching=%s", type_name(cls), mode.value)
    related = sorted(type_name(item) for item in related_types(cls, mode))
    console.print(f"{type_name(cls)} [{mode.value}]", markup=False)
    if not related:
        console.print("No related types")
        return
    for name in related:
        console.print(f"  {name}", markup=False)


@app.command("sample")
def sample(
    target: str = TARGET_ARGUMENT,
    count: int = COUNT_OPTION,
    seed: int | None = SEED_OPTION,
    mocks: bool = MOCKS_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    initialize_runtime(verbose=verbose, logger=logger)
    cls = load_target(target)
    settings = default_settings()
    if seed is not None:
        settings = replace(settings, seed=seed)
    logger.info("sample start target=%s count=%s mocks=%s", type_name(cls), count, mocks)
    fixture = create_fixture_with_mocks(settings) if mocks else create_fixture(settings)
    try:
        values = fixture.create_many(cls, count)
    except SpecimenError as exc:
        console.print(f"Sample failed: {exc}", markup=False)
        raise typer.Exit(code=1) from exc
    for value in values:
        console.print(_render(value), markup=False)


@registry_app.command("list")
def registry_list(
    as_json: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    initialize_runtime(verbose=verbose, logger=logger)
    logger.info("registry list start")
    records = default_registry.records()
    if as_json:
        payload = [record.model_dump(mode="json") for record in records]
        console.print(json.dumps(payload, indent=2), markup=False)
        return
    if not records:
        console.print("No customizations registered")
        return
    for record in records:
        console.print(
            f"{record.module}.{record.name} ({record.kind}, {record.source})",
            markup=False,
        )


if __name__ == "__main__":
    app()
