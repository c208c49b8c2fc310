"""bizorm CLI - Main Entry Point.

The `bizorm` command inspects the model registry of an application.

Commands:
    inspect  - List registered models and sequences
    fields   - Show the effective fields of one model
    check    - Validate and bootstrap a registry
"""

import json
import sys

import click

from ..utils import configure_logging
from ..faults import Fault
from ..models import ModelOption
from . import __version__, __cli_name__
from .loader import RegistryLoadError, load_registry
from .utils.colors import (
    success, error, warning, info, dim, bold,
    section, kv, bullet, table,
    _CHECK, _CROSS,
)


class BizormGroup(click.Group):
    """Click group listing commands in aligned columns."""

    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        commands = []
        for subcommand in self.list_commands(ctx):
            cmd = self.get_command(ctx, subcommand)
            if cmd is None or cmd.hidden:
                continue
            commands.append((subcommand, cmd.get_short_help_str(limit=48)))

        if commands:
            with formatter.section(click.style("Commands", fg="cyan", bold=True)):
                max_len = max(len(c[0]) for c in commands) + 2
                for name, help_text in commands:
                    styled_name = click.style(name.ljust(max_len), fg="green")
                    formatter.write(f"  {styled_name} {help_text}\n")


def _load(target: str):
    try:
        return load_registry(target)
    except RegistryLoadError as exc:
        error(f"  {_CROSS} {exc}")
        sys.exit(1)
    except Fault as fault:
        error(f"  {_CROSS} {fault.code}: {fault.message}")
        sys.exit(1)


def _option_names(model) -> str:
    return ",".join(opt.name for opt in ModelOption if opt and opt in model.options)


@click.group(cls=BizormGroup)
@click.version_option(version=__version__, prog_name=__cli_name__)
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Minimal output')
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool):
    """Inspect and validate bizorm model registries.

    \b
    TARGET is a module exposing a ModelRegistry:
      bizorm inspect myapp.models
      bizorm inspect myapp.models:registry
      bizorm inspect path/to/models.py
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet
    if verbose:
        configure_logging("DEBUG")


@cli.command('inspect')
@click.argument('target')
@click.option('--json', 'as_json', is_flag=True, help='Output as JSON')
@click.pass_context
def inspect_cmd(ctx, target: str, as_json: bool):
    """
    List the models and sequences of a registry.

    Examples:
      bizorm inspect myapp.models
      bizorm inspect myapp.models --json
    """
    registry = _load(target)
    models = registry.models()

    if as_json:
        payload = {
            "models": [m.to_dict() for m in models],
            "sequences": [{"name": s.name, "json": s.json} for s in registry.sequences()],
            "bootstrapped": registry.is_bootstrapped,
        }
        click.echo(json.dumps(payload, indent=2))
        return

    if not ctx.obj['quiet']:
        section("Registry")
        kv("Models", str(len(models)))
        kv("Sequences", str(len(registry.sequences())))
        kv("Driver", registry.config.driver)
        kv("Bootstrapped", "yes" if registry.is_bootstrapped else "no")
        click.echo()

    table(
        ["Model", "Table", "Options", "Mixins"],
        [
            [m.name, m.table_name, _option_names(m), ", ".join(mx.name for mx in m.mixins)]
            for m in models
        ],
    )

    sequences = registry.sequences()
    if sequences and not ctx.obj['quiet']:
        click.echo()
        section("Sequences")
        for seq in sequences:
            bullet(f"{seq.name}  {click.style(seq.json, dim=True)}")


@cli.command('fields')
@click.argument('target')
@click.argument('model_name')
@click.option('--own', is_flag=True, help='Only fields declared on the model itself')
@click.pass_context
def fields_cmd(ctx, target: str, model_name: str, own: bool):
    """
    Show the effective fields of MODEL_NAME.

    Examples:
      bizorm fields myapp.models Partner
      bizorm fields myapp.models partner --own
    """
    registry = _load(target)
    model, ok = registry.get(model_name)
    if not ok:
        error(f"  {_CROSS} Unknown model '{model_name}'")
        sys.exit(1)

    field_list = model.fields.own() if own else model.fields.all()

    if not ctx.obj['quiet']:
        section(f"{model.name} ({model.table_name})")
        if model.mixins:
            dim(f"  inherits {', '.join(m.name for m in model.mixins)}")
        click.echo()

    table(
        ["Field", "Json", "Type", "Required", "Relation", "Declared in"],
        [
            [
                fi.name,
                fi.json,
                fi.field_type.value,
                "yes" if fi.required else "",
                fi.relation_model_name or "",
                fi.model.name if fi.model is not None else "",
            ]
            for fi in field_list
        ],
    )


@cli.command('check')
@click.argument('target')
@click.pass_context
def check_cmd(ctx, target: str):
    """
    Validate a registry, then bootstrap it.

    Exits with status 1 when problems are found.

    Examples:
      bizorm check myapp.models
    """
    registry = _load(target)

    issues = registry.check_constraints()
    if issues:
        error(f"  {_CROSS} {len(issues)} problem(s) found:")
        for issue in issues:
            bullet(issue, fg="red")
        sys.exit(1)

    if registry.is_bootstrapped:
        warning("  Registry is already bootstrapped")
    else:
        try:
            registry.bootstrap()
        except Fault as fault:
            error(f"  {_CROSS} {fault.code}: {fault.message}")
            sys.exit(1)

    if not ctx.obj['quiet']:
        info(f"  {bold(str(len(registry)))} models, {len(registry.sequences())} sequences")
    success(f"  {_CHECK} Registry is valid")


def main():
    """Entry point for the `bizorm` command."""
    cli(obj={})


if __name__ == '__main__':
    main()
