"""
Gnosis Mage CLI - Main entry point for the mage command

Loads a Python module as a namespace so its functions can be listed, or
instrumented and called from the command line.
"""

import json
import sys
from pathlib import Path
from typing import Any, Optional, Tuple

import click

from . import __version__
from .core.grimoire import Grimoire


def _parse_arg(value: str) -> Any:
    """Read an argument as JSON, falling back to the raw string."""
    try:
        return json.loads(value)
    except ValueError:
        return value


def _open(module: str, debug: bool = False) -> Grimoire:
    """Create a grimoire with ``module`` loaded as a namespace."""
    current_dir = Path.cwd()

    # Add current directory to Python path
    if str(current_dir) not in sys.path:
        sys.path.insert(0, str(current_dir))

    grimoire = Grimoire(debug=True if debug else None)
    try:
        grimoire.load_module(module)
    except ImportError as e:
        click.echo(f"❌ Could not load {module}: {e}", err=True)
        sys.exit(1)
    return grimoire


@click.group()
@click.version_option(version=__version__)
def cli():
    """Gnosis Mage - Function Interception for Python Namespaces"""
    pass


@cli.command(name="list")
@click.argument("module")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def list_functions(module: str, output_json: bool):
    """List the functions a module contributes to its namespace"""
    grimoire = _open(module)
    names = sorted(grimoire.sublist(module))

    if output_json:
        click.echo(json.dumps(names, indent=2))
        return

    click.echo(f"📦 {module}: {len(names)} functions")
    for name in names:
        click.echo(f"  📍 {name}")


@cli.command()
@click.argument("module")
@click.argument("function")
@click.argument("args", nargs=-1)
@click.option("--alert", is_flag=True, help="Alert on calls to every function of the module")
@click.option("--tag", "tag_message", default=None, help="Tag FUNCTION with a message")
@click.option("--debug", is_flag=True, help="Write the diagnostic stream")
@click.option("--json", "output_json", is_flag=True, help="Output the result as JSON")
def run(
    module: str,
    function: str,
    args: Tuple[str, ...],
    alert: bool,
    tag_message: Optional[str],
    debug: bool,
    output_json: bool,
):
    """Call FUNCTION from MODULE with ARGS (JSON values or plain strings)"""
    grimoire = _open(module, debug=debug)

    if not grimoire.registry.resolves(module, function):
        click.echo(f"❌ {module} has no function '{function}'", err=True)
        sys.exit(1)

    if alert:
        grimoire.sub_alert(module)
    if tag_message:
        grimoire.tag(module, function, tag_message)

    try:
        result = grimoire.call(module, function, *[_parse_arg(a) for a in args])
    except Exception as e:
        click.echo(f"❌ {module}.{function} raised {type(e).__name__}: {e}", err=True)
        sys.exit(1)

    if output_json:
        click.echo(json.dumps(result, default=str))
    else:
        click.echo(repr(result))


if __name__ == "__main__":
    cli()
