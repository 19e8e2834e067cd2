"""CLI entrypoint for hesab."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import load_config


@click.group()
@click.version_option(__version__, prog_name="hesab")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to hesab.toml (defaults to the nearest hesab.toml or pyproject.toml [tool.hesab])",
)
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """hesab - request-field validation for the hesab accounting API.

    Check JSON records against rulesets and explain validation rules.
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config(config_path)
    except ValueError as e:
        raise click.ClickException(str(e)) from e


@cli.command()
@click.argument("record", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--rules",
    "rules_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="TOML ruleset file",
)
@click.option(
    "--preset",
    type=str,
    default=None,
    metavar="NAME",
    help="Built-in preset (register, login, customer, invoice, ...) or a ruleset in rulesets_dir",
)
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.option(
    "--locale",
    type=click.Choice(["en", "fa"]),
    default=None,
    help="Error message language (overrides config)",
)
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Reject malformed rule parameters instead of failing the rule",
)
@click.pass_context
def check(
    ctx: click.Context,
    record: Path,
    rules_path: Path | None,
    preset: str | None,
    output_json: bool,
    locale: str | None,
    strict: bool | None,
) -> None:
    """Validate a JSON record against a ruleset.

    Exits 0 when the record passes, 1 when it has validation errors and 2
    when the input or ruleset cannot be used.

    Examples:

        hesab check customer.json --preset customer

        hesab check invoice.json --rules rulesets/invoice.toml --json
    """
    from .commands.check import run_check

    exit_code = run_check(
        record,
        rules_path=rules_path,
        preset=preset,
        config=ctx.obj["config"],
        output_json=output_json,
        locale=locale,
        strict=strict,
    )
    sys.exit(exit_code)


@cli.command()
def rules() -> None:
    """List available validation rules."""
    from .commands.check import run_list_rules

    sys.exit(run_list_rules())


@cli.command()
@click.argument("rule")
def explain(rule: str) -> None:
    """Explain a validation rule (e.g. hesab explain sheba)."""
    from .commands.check import run_explain

    sys.exit(run_explain(rule))


@cli.command()
@click.argument("password")
@click.option("--json", "output_json", is_flag=True, help="Output the report as JSON")
def password(password: str, output_json: bool) -> None:
    """Score a password's strength."""
    from .commands.check import run_password

    sys.exit(run_password(password, output_json))


@cli.command()
@click.argument("bban")
def sheba(bban: str) -> None:
    """Build a full Sheba number from a 22-digit BBAN."""
    from .commands.check import run_sheba

    sys.exit(run_sheba(bban))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
