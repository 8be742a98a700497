"""CLI entrypoint for ctverify."""

import logging
import sys
from pathlib import Path

import click

from . import __version__


LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _configure_logging(level: str) -> None:
    from rich.console import Console
    from rich.logging import RichHandler

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(__version__, prog_name="ctverify")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    envvar="CTVERIFY_LOG_LEVEL",
    show_default=True,
    help="Logging verbosity (stderr)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str) -> None:
    """ctverify - test policy templates and constraints without a cluster.

    Suites declare templates, constraints, sample objects and the
    violations each object is expected to produce.
    """
    ctx.ensure_object(dict)
    _configure_logging(log_level.upper())


@cli.command()
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "--recursive",
    "-r",
    is_flag=True,
    help="Search directories recursively for suites",
)
@click.option(
    "--run",
    "run_filter",
    type=str,
    default=None,
    envvar="CTVERIFY_RUN",
    metavar="TESTS//CASES",
    help="Only run tests (and cases) whose names match these regexes, e.g. --run 'labels//missing'",
)
@click.option(
    "--client",
    "client_ref",
    type=str,
    default=None,
    envvar="CTVERIFY_CLIENT",
    metavar="MODULE:CALLABLE",
    help="Rule client factory to use (default: ctverify.client:new_local_client)",
)
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output results as JSON",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="List passing cases as well as failures",
)
def verify(
    paths: tuple[Path, ...],
    recursive: bool,
    run_filter: str | None,
    client_ref: str | None,
    output_json: bool,
    verbose: bool,
) -> None:
    """Run verification suites.

    PATHS are suite files or directories containing suite files
    (YAML documents with `kind: Suite`). Paths inside a suite are
    relative to the suite file.

    Exits 0 when every test passes, 1 when any test or case fails.
    """
    from .commands.verify import load_client_factory, run_verify

    client_factory = None
    if client_ref:
        try:
            client_factory = load_client_factory(client_ref)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--client") from e

    exit_code = run_verify(
        list(paths),
        recursive=recursive,
        run=run_filter,
        output_json=output_json,
        verbose=verbose,
        client_factory=client_factory,
    )
    sys.exit(exit_code)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
