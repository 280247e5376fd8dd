"""uritpl CLI - Main Entry Point.

Commands:
    expand - Expand a template with variable bindings
    parse  - Show the parsed structure of a template
    vars   - List the variables a template references
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__, __cli_name__
from .utils.colors import error, kv, section, tree, _CROSS
from ..config import ConfigError, SettingsLoader, configure
from ..diagnostics.errors import TemplateExpansionError, TemplateSyntaxError
from ..template import URITemplate

logger = logging.getLogger("uritpl.cli")


class UriTplGroup(click.Group):
    """Click group with aligned command listing."""

    def format_commands(
        self, ctx: click.Context, formatter: click.HelpFormatter
    ) -> None:
        """Format command listing with aligned columns."""
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


def _parse_or_exit(template: str) -> URITemplate:
    try:
        return URITemplate(template)
    except TemplateSyntaxError as e:
        error(e.format())
        sys.exit(1)


@click.group(cls=UriTplGroup)
@click.version_option(version=__version__, prog_name=__cli_name__)
@click.option('--verbose', is_flag=True, help='Debug logging')
@click.option('--env-file', type=click.Path(dir_okay=False), help='Load URITPL_* settings from a .env file')
@click.pass_context
def cli(ctx, verbose: bool, env_file: Optional[str]):
    """RFC 6570 URI Template expansion.

    \b
    Quick start:
      uritpl expand '{/path*}{?q}' -v path=users -v path=42 -v q=x
      uritpl parse '{?x,y}'
    """
    ctx.ensure_object(dict)
    try:
        settings = configure(SettingsLoader.load(env_file=env_file))
    except ConfigError as e:
        error(f"  {_CROSS} Invalid settings: {e}")
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj['settings'] = settings


@cli.command('expand')
@click.argument('template')
@click.option('--var', '-v', 'assignments', multiple=True,
              help='Binding name=value (repeat a name to build a list)')
@click.option('--vars', 'vars_file', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='JSON or YAML file with bindings')
@click.option('--strict/--no-strict', default=None,
              help='Validate the result as a URI reference (default from settings)')
def expand_cmd(template: str, assignments: tuple, vars_file: Optional[Path], strict: Optional[bool]):
    """
    Expand TEMPLATE and print the result.

    Examples:
      uritpl expand '{+base}index' -v base=http://example.com/
      uritpl expand '{?keys*}' --vars bindings.yaml
    """
    from .commands.bindings import BindingsError, load_vars_file, parse_assignments

    parsed = _parse_or_exit(template)

    try:
        values = load_vars_file(vars_file) if vars_file else {}
        values.update(parse_assignments(assignments))
    except BindingsError as e:
        error(f"  {_CROSS} {e}")
        sys.exit(1)

    logger.debug(f"Expanding {template!r} with {len(values)} binding(s)")

    try:
        result = parsed.expand(values, strict=strict)
    except TemplateExpansionError as e:
        error(e.format())
        sys.exit(1)

    click.echo(result)


@cli.command('parse')
@click.argument('template')
@click.option('--json', 'as_json', is_flag=True, help='Print the structure as JSON')
def parse_cmd(template: str, as_json: bool):
    """Show operators, variables and spans of TEMPLATE."""
    parsed = _parse_or_exit(template)

    if as_json:
        click.echo(json.dumps(parsed.to_dict(), indent=2))
        return

    names = parsed.ast.get_variable_names()
    section("Template")
    kv("Template", template)
    kv("Canonical", parsed.canonical())
    kv("Variables", ", ".join(names) if names else "-")

    if parsed.expressions:
        section("Expressions")
        tree(
            f"{expr}  {expr.operator.name.lower()}  [{expr.start_index}, {expr.end_index})"
            for expr in parsed.expressions
        )


@cli.command('vars')
@click.argument('template')
def vars_cmd(template: str):
    """List the variable names TEMPLATE references, one per line."""
    parsed = _parse_or_exit(template)
    for name in parsed.ast.get_variable_names():
        click.echo(name)


def main():
    """Entry point for `uritpl` command."""
    cli(obj={})


if __name__ == '__main__':
    main()
