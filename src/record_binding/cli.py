"""Command line interface entry point."""

from __future__ import annotations

import json
import logging
import sys

import click

from record_binding.binding_errors import BindingError
from record_binding.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    build_type_registry,
    load_configuration,
    write_placeholder_configuration,
)
from record_binding.form_loading import load_form
from record_binding.key_unflattening import form_from_query
from record_binding.schema_management import RegisteredType, TypeRegistry
from record_binding.value_extraction import create_empty_values, create_values

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="record-binding")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override the log level from the binding configuration",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Schema-driven form binding utility."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level.upper() if log_level else None


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML binding configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML binding configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="list-types")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON binding configuration file",
)
@click.pass_context
def list_types(ctx: click.Context, config_path: str) -> None:
    """List registered collections with their record types and columns."""
    registry = _load_registry(config_path, ctx.obj.get("log_level"))
    for database, collections in registry.collections_by_database().items():
        click.echo(database)
        for name in collections:
            registered = registry.get(f"{database}.{name}")
            click.echo(f"  {name}: {registered.schema.name} [{', '.join(registered.columns)}]")


@cli.command(name="bind")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON binding configuration file",
)
@click.option(
    "--collection",
    required=True,
    help="database.collection specifier of the record type to bind",
)
@click.option(
    "--form",
    "form_text",
    default="",
    help="urlencoded form body, for example 'title=Hello&author.name=Ann'",
)
@click.option(
    "--field",
    "field_pairs",
    multiple=True,
    help="Additional KEY=VALUE form entry; may be repeated",
)
@click.pass_context
def bind(
    ctx: click.Context,
    config_path: str,
    collection: str,
    form_text: str,
    field_pairs: tuple[str, ...],
) -> None:
    """Bind a form into a new record and print the outcome as JSON."""
    registered = _registered_type(config_path, collection, ctx.obj.get("log_level"))
    form = form_from_query(form_text)
    for pair in field_pairs:
        key, separator, value = pair.partition("=")
        if not separator:
            raise CliError(f"--field expects KEY=VALUE, got '{pair}'.")
        form.setdefault(key, []).append(value)

    target = registered.schema.new_instance()
    try:
        outcome = load_form(form, target, registered.schema)
        values = create_values(target, registered.schema)
    except BindingError as exc:
        raise CliError(str(exc)) from exc

    payload = {
        "collection": collection,
        "state": outcome.state.value,
        "errors": {path: str(error) for path, error in outcome.errors.items()},
        "values": values,
    }
    click.echo(json.dumps(payload, indent=2, sort_keys=True))


@cli.command(name="blank")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON binding configuration file",
)
@click.option(
    "--collection",
    required=True,
    help="database.collection specifier of the record type",
)
@click.pass_context
def blank(ctx: click.Context, config_path: str, collection: str) -> None:
    """Print the blank value map used for new-record forms as JSON."""
    registered = _registered_type(config_path, collection, ctx.obj.get("log_level"))
    try:
        values = create_empty_values(registered.schema)
    except BindingError as exc:
        raise CliError(str(exc)) from exc
    click.echo(json.dumps(values, indent=2, sort_keys=True))


def _load_registry(config_path: str, log_level: str | None) -> TypeRegistry:
    try:
        configuration = load_configuration(config_path)
        _configure_logging(log_level or configuration.logging.level)
        return build_type_registry(configuration)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc


def _registered_type(config_path: str, collection: str, log_level: str | None) -> RegisteredType:
    registry = _load_registry(config_path, log_level)
    try:
        return registry.get(collection)
    except BindingError as exc:
        raise CliError(str(exc)) from exc


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=_LOG_FORMAT, stream=sys.stderr)
    logging.getLogger("record_binding").setLevel(level)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
