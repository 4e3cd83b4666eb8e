"""
Command Line Interface for pocketdim.
"""
import logging
import shlex
import sys

import click

from ..BUILDERS.invocation_compiler import InvocationCompiler
from ..constants import DEFAULT_MANIFEST_FILE
from ..errors import ContainerCreationFailed, PocketDimensionError
from ..MODELS.manifest import Manifest
from ..PARSERS.manifest_parser import ManifestParser
from ..RUNNERS.container_creator import ContainerCreator


def setup_logging(verbose: bool, quiet: bool):
    """Configure logging based on verbosity flags."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)


def _exit_status(exit_code: int) -> int:
    """Maps a child exit code to a shell exit status; -N means killed by signal N."""
    return 128 - exit_code if exit_code < 0 else exit_code


def _load_manifest(ctx: click.Context, container: str, name: str) -> Manifest:
    try:
        manifests = ManifestParser().parse(ctx.obj['file'])
        return manifests.get(container, name)
    except PocketDimensionError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option('--file', '-f', default=DEFAULT_MANIFEST_FILE, envvar='POCKETDIM_FILE',
              show_default=True, help='Manifest file path')
@click.option('--verbose', '-v', is_flag=True, help='Log debug output')
@click.option('--quiet', '-q', is_flag=True, help='Only log errors')
@click.pass_context
def cli(ctx, file, verbose, quiet):
    """
    Pocket Dimension - declarative development containers.

    Compiles container manifests into podman invocations.
    """
    setup_logging(verbose, quiet)
    ctx.ensure_object(dict)
    ctx.obj['file'] = file


@cli.command('list')
@click.pass_context
def list_containers(ctx):
    """List containers declared in the manifest file."""
    try:
        manifests = ManifestParser().parse(ctx.obj['file'])
    except PocketDimensionError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"{'CONTAINER':20} {'NAME':20} {'IMAGE'}")
    click.echo("-" * 60)
    for container, manifest in manifests.containers.items():
        click.echo(f"{container:20} {manifest.name:20} {manifest.image}")


@cli.command()
@click.argument('container')
@click.option('--name', '-n', default=None, help='Override the container name')
@click.pass_context
def show(ctx, container, name):
    """Print the podman invocation for CONTAINER without running it."""
    manifest = _load_manifest(ctx, container, name)
    try:
        invocation = InvocationCompiler().compile(manifest)
    except PocketDimensionError as e:
        raise click.ClickException(str(e)) from e
    click.echo(shlex.join(invocation))


@cli.command()
@click.argument('container')
@click.option('--name', '-n', default=None, help='Override the container name')
@click.pass_context
def create(ctx, container, name):
    """Create CONTAINER with podman."""
    manifest = _load_manifest(ctx, container, name)
    try:
        invocation = InvocationCompiler().compile(manifest)
        ContainerCreator().create(invocation)
    except ContainerCreationFailed as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(_exit_status(e.exit_code))
    except PocketDimensionError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Container {manifest.name} created.")


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})


if __name__ == '__main__':
    main()
