# flake8: noqa: T201
import logging
import runpy
import sys
from functools import update_wrapper
from pathlib import Path

import click
from termcolor import cprint

import modstub
from modstub.settings import get_settings
from modstub.utils.logging import setup_logging

logger = logging.getLogger("modstub")


class RunConfig:
    def __init__(self):
        self.traceback = False


def pass_cfg(f):
    """Pass configuration information"""

    @click.pass_context
    def new_func(ctx, *args, **kwargs):
        return ctx.invoke(f, ctx.obj, *args, **kwargs)

    return update_wrapper(new_func, f)


@click.group()
@click.option("--quiet", is_flag=True, help="Be quiet")
@click.option("--debug", is_flag=True, help="Be even more verbose (implies traceback)")
@click.option(
    "--traceback", is_flag=True, help="Display traceback if an exception occurs"
)
@click.pass_context
def cli(ctx, quiet, debug, traceback):
    settings = get_settings()
    debug = debug or settings.debug
    setup_logging(debug=debug, force_color=settings.force_color, quiet=quiet)

    ctx.obj = RunConfig()
    ctx.obj.traceback = traceback or debug


@cli.command(help="Get version")
def version():
    print(modstub.__version__)


@click.option("--importer", default=None, help="Module the specifier is imported from")
@click.argument("specifier")
@cli.command()
@pass_cfg
def resolve(cfg: RunConfig, specifier: str, importer: str):
    """Print the canonical path stubs for SPECIFIER are registered under"""
    modstub.install()
    try:
        print(modstub.resolve_path(specifier, importer))
    except ImportError as e:
        if cfg.traceback:
            raise
        cprint(f"Cannot resolve {specifier}: {e}", "red", file=sys.stderr)
        sys.exit(1)


@click.option(
    "--setup",
    "setups",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    multiple=True,
    help="Python file registering stubs, executed before TARGET",
)
@click.option("-m", "--module", "as_module", is_flag=True, help="TARGET is a module")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.argument("target")
@cli.command(
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False}
)
@pass_cfg
def run(cfg: RunConfig, target: str, args, as_module: bool, setups):
    """Run TARGET (a script, or a module with -m) with the stub finder installed"""
    modstub.install()

    for setup in setups:
        logger.info("Running stub setup %s", setup)
        runpy.run_path(str(setup), run_name="__modstub_setup__")

    sys.argv = [target, *args]
    try:
        if as_module:
            runpy.run_module(target, run_name="__main__", alter_sys=True)
        else:
            runpy.run_path(target, run_name="__main__")
    except Exception:
        if cfg.traceback:
            raise
        logger.exception("Error while running %s", target)
        sys.exit(1)


def main():
    cli(obj=None)


if __name__ == "__main__":
    main()
