"""
recordschema CLI -- Click commands with a Rich terminal UI.

Provides the ``recordschema`` console entry-point declared in pyproject.toml
as ``recordschema.cli:cli``:

- describe:  convert a dataclass / Pydantic model into a JSON Schema descriptor
- config:    show the active RecordSchemaConfig
"""

from __future__ import annotations

import importlib
import json
from pathlib import Path
from typing import Any, Optional

import click
import yaml
from rich.console import Console

from . import __version__
from . import cli_theme as theme
from .config import get_config
from .errors import SchemaConversionError
from .registry import DefinitionRegistry
from .utils.logging import get_logger, setup_logging
from .walker import convert_with

console = Console()
logger = get_logger(__name__)


def _print_version(
    ctx: click.Context,
    _param: click.Parameter,
    value: bool,
) -> None:
    if not value or ctx.resilient_parsing:
        return
    theme.print_version(__version__, console)
    ctx.exit()


def _import_target(target: str) -> Any:
    """Resolve ``package.module:Attr`` (or ``package.module.Attr``) to an object."""
    if ":" in target:
        module_name, _, attr_path = target.partition(":")
    else:
        module_name, _, attr_path = target.rpartition(".")
    if not module_name or not attr_path:
        raise click.BadParameter(
            f"Expected 'module:Class', got {target!r}.", param_hint="TARGET"
        )
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise click.ClickException(f"Cannot import {module_name!r}: {exc}") from exc
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise click.ClickException(f"{module_name!r} has no attribute {attr_path!r}.") from None
    return obj


# ---------------------------------------------------------------------------
# Main CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.option("--log", "write_log", is_flag=True, help="Write a session log at the configured log level.")
@click.option("--verbose", "-v", is_flag=True, help="Log at DEBUG level and echo the log to stderr.")
def cli(write_log: bool, verbose: bool) -> None:
    """recordschema -- JSON Schema descriptors from dataclasses and Pydantic models."""
    if write_log or verbose:
        log_file = setup_logging(
            level="DEBUG" if verbose else None,
            console_output=verbose,
        )
        logger.info("Session log: %s", log_file)


# ---------------------------------------------------------------------------
# describe
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("target")
@click.option("--prefix", default=None, help="Reference prefix (default: configured name_prefix).")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["json", "yaml", "tree"]),
    default="json",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--definitions/--no-definitions",
    default=True,
    show_default=True,
    help="Include definitions registered for nested records.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to a file instead of stdout (json/yaml only).",
)
def describe(
    target: str,
    prefix: Optional[str],
    fmt: str,
    definitions: bool,
    output: Optional[Path],
) -> None:
    """Describe TARGET, a record type given as 'module:Class'.

    \b
    Examples:
      recordschema describe shop.models:Order
      recordschema describe shop.models:Order --format yaml --no-definitions
    """
    record = _import_target(target)
    registry = DefinitionRegistry()
    try:
        root = convert_with(record, registry, name_prefix=prefix)
    except SchemaConversionError as exc:
        logger.error("Conversion of %s failed: %s", target, exc)
        raise click.ClickException(str(exc)) from exc

    if fmt == "tree":
        console.print(theme.schema_tree(target, root))
        if definitions:
            for name, prop in registry.definitions.items():
                console.print(theme.schema_tree(name, prop))
        return

    payload: dict[str, Any] = {"schema": root.to_schema()}
    if definitions:
        payload["definitions"] = {
            name: prop.to_schema() for name, prop in registry.definitions.items()
        }

    if fmt == "yaml":
        text = yaml.safe_dump(payload, default_flow_style=False, sort_keys=False, allow_unicode=True)
    else:
        text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"

    if output is not None:
        output.write_text(text, encoding="utf-8")
        console.print(f"Wrote {output}")
    else:
        click.echo(text, nl=False)


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


@cli.command("config")
def config_show() -> None:
    """Show the active configuration (RECORDSCHEMA_* env vars and .env)."""
    dump = get_config().model_dump(mode="json")

    theme.section("References & tags", console, "01")
    t = theme.make_kv_table()
    for key in ("name_prefix", "json_tag", "schema_tag", "description_tag", "unknown_directives"):
        t.add_row(key, str(dump[key]))
    console.print(t)

    theme.section("Logging", console, "02")
    t = theme.make_kv_table()
    t.add_row("log_level", dump["log_level"])
    t.add_row("home_dir", dump["home_dir"])
    console.print(t)
