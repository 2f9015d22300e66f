"""
CLI interface for funcy_invoke.

Provides commands to initialize configuration, list registered functions and
invoke a function by name.

Functions come from registration modules: the ``modules`` list in
config.yaml plus any ``-m/--module`` options.
"""

import json
from pathlib import Path
from typing import Any, Optional

import click

from funcy_invoke import __version__


def _build_handler(ctx: click.Context, extra_modules: tuple[str, ...]):
    """Create registry, load modules and return (registry, handler)."""
    from funcy_invoke.engine import Invoker
    from funcy_invoke.handler import InvokeHandler
    from funcy_invoke.loader import load_modules
    from funcy_invoke.registry import Registry

    config = ctx.obj["config"]
    registry = Registry()
    try:
        load_modules(registry, [*config.modules, *extra_modules])
    except Exception as e:
        click.echo(f"✗ Failed to load modules: {e}", err=True)
        raise SystemExit(1)
    return registry, InvokeHandler(Invoker(registry))


def _parse_argument(raw: str) -> Any:
    """Parse a CLI argument as JSON, keeping it as a plain string otherwise."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


@click.group()
@click.version_option(version=__version__, prog_name="funcy")
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: $FUNCY_HOME/config.yaml)",
)
@click.pass_context
def main(ctx, config_path: Optional[Path]):
    """
    funcy - invoke registered Python functions by name.
    """
    from funcy_invoke.config import load_config
    from funcy_invoke.errors import ConfigError
    from funcy_invoke.logging_utils import setup_logging

    ctx.ensure_object(dict)
    try:
        config = load_config(config_path)
    except ConfigError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1)

    ctx.obj["config"] = config
    setup_logging(config.log_level, config.log_format, config.log_file)


@main.command("init")
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
def init(force: bool):
    """Initialize funcy configuration."""
    from funcy_invoke.config import FuncyConfig, get_funcy_home
    import yaml

    home = get_funcy_home()
    if not home.exists():
        home.mkdir(parents=True)

    cfg_path = home / "config.yaml"
    if cfg_path.exists() and not force:
        click.echo(f"Config already exists at {cfg_path}. Use --force to overwrite.", err=True)
        raise SystemExit(1)

    default_cfg = FuncyConfig(env_file=str(home / ".env")).to_dict()
    cfg_path.write_text(yaml.safe_dump(default_cfg, sort_keys=False))

    env_path = home / ".env"
    if not env_path.exists():
        env_path.write_text("# Environment for registration modules\n")

    click.echo(f"Initialized funcy config at {cfg_path}")


@main.command("list")
@click.option("-m", "--module", "modules", multiple=True, help="Registration module to load")
@click.option("--types", "show_types", is_flag=True, help="List record types instead")
@click.pass_context
def list_functions(ctx, modules: tuple[str, ...], show_types: bool):
    """List registered functions."""
    registry, _ = _build_handler(ctx, modules)

    names = registry.list_types() if show_types else registry.list_functions()
    if not names:
        click.echo("No types registered." if show_types else "No functions registered.")
        return

    for name in names:
        if show_types:
            descriptor = registry.get_type(name)
            click.echo(f"{name}  {{{', '.join(descriptor.field_names)}}}")
        else:
            descriptor = registry.get_function(name)
            params = ", ".join(f"{p.name}: {p.type.name}" for p in descriptor.params)
            returns = ", ".join(t.name for t in descriptor.returns)
            click.echo(f"{name}({params}) -> ({returns})")


@main.command("invoke")
@click.argument("name", required=False)
@click.argument("arguments", nargs=-1)
@click.option("-m", "--module", "modules", multiple=True, help="Registration module to load")
@click.option(
    "--request", "request_file",
    type=click.File("r"),
    help="Read a JSON request ({\"func\": ..., \"params\": [...]}) from a file or '-'",
)
@click.option("--indent", type=int, default=None, help="Indent the JSON response")
@click.pass_context
def invoke(ctx, name: Optional[str], arguments: tuple[str, ...], modules: tuple[str, ...],
           request_file, indent: Optional[int]):
    """
    Invoke a registered function.

    NAME is the registry name; each ARGUMENT is parsed as JSON and falls back
    to a plain string.

    Examples:

        funcy invoke -m myapp.functions myapp.Echo abc

        funcy invoke -m myapp.functions myapp.Describe '{"ID": 7, "Name": "x"}'

        echo '{"func": "myapp.Echo", "params": [""]}' | funcy invoke --request -
    """
    if request_file is not None and (name or arguments):
        raise click.UsageError("--request cannot be combined with NAME/ARGUMENTS")
    if request_file is None and not name:
        raise click.UsageError("NAME is required unless --request is given")

    _, handler = _build_handler(ctx, modules)

    if request_file is not None:
        body = json.loads(handler.handle_json(request_file.read()))
        click.echo(json.dumps(body, indent=indent))
        if "error" in body:
            raise SystemExit(1)
        return

    response = handler.handle({
        "func": name,
        "params": [_parse_argument(a) for a in arguments],
    })
    click.echo(response.to_json(indent=indent))
    if not response.ok:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
