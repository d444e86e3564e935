"""lcov-remap CLI."""

import asyncio
from pathlib import Path

import click

from lcovremap import __version__
from lcovremap.config import load_config
from lcovremap.core.errors import LcovRemapError
from lcovremap.core.logging import configure_logging
from lcovremap.core.progress import pluralize, spinner, status
from lcovremap.ops import get_lcov, write_lcov
from lcovremap.sourcemaps import default_sourcemap_resolver, inline_sourcemap_resolver


@click.command()
@click.version_option(version=__version__, prog_name="lcov-remap")
@click.argument("lcov", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the remapped LCOV here instead of stdout",
)
@click.option(
    "-s",
    "--source-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Base directory of the original sources (default: current directory)",
)
@click.option("--sourcemap-suffix", help="Suffix appended to generated paths to find maps")
@click.option("--inline", is_flag=True, help="Read maps referenced by the generated files")
@click.option(
    "-j",
    "--parallelism",
    type=click.IntRange(min=1),
    help="Max concurrent file reads",
)
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: <source-dir>/.lcovremap.yaml)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(
    lcov: Path,
    output: Path | None,
    source_dir: Path | None,
    sourcemap_suffix: str | None,
    inline: bool,
    parallelism: int | None,
    config_file: Path | None,
    verbose: bool,
) -> None:
    """Remap LCOV coverage of generated files onto their original sources.

    LCOV is the coverage file recorded against the bundled/transpiled output.
    """
    source_dir = (source_dir or Path.cwd()).resolve()

    try:
        config = load_config(source_dir, config_file=config_file)
    except LcovRemapError as e:
        raise click.ClickException(str(e)) from e

    if verbose:
        configure_logging(level="DEBUG")
    else:
        configure_logging(config=config.logging)

    if inline or config.sourcemaps.inline:
        resolver = inline_sourcemap_resolver
    else:
        resolver = default_sourcemap_resolver(sourcemap_suffix or config.sourcemaps.suffix)
    workers = parallelism or config.sourcemaps.parallelism

    try:
        if output is None:
            click.echo(asyncio.run(get_lcov(lcov, resolver, source_dir, parallelism=workers)))
            return

        with spinner("Remapping coverage"):
            records = asyncio.run(
                write_lcov(lcov, resolver, source_dir, output, parallelism=workers)
            )
    except (LcovRemapError, OSError) as e:
        raise click.ClickException(str(e)) from e

    status(f"Wrote {pluralize(records, 'record')} to {output}", style="success")


if __name__ == "__main__":
    cli()
