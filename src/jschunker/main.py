"""Main CLI entry point for jschunker."""

import json
import logging
import sys
from pathlib import Path

import click

from . import __version__
from .analyzer import Analyzer
from .config import DEFAULT_CONFIG_FILE, Config
from .errors import FileIOError, JSChunkerError
from .file_io import FileIO
from .output import OutputWriter
from .parser import Parser
from .pipeline import ChunkPipeline
from .report import render_summary

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


@click.group()
@click.version_option(__version__, prog_name="jschunker")
def cli():
    """jschunker - Split JavaScript into dependency-aware, loadable chunks."""
    pass


@cli.command()
@click.argument("files", nargs=-1, required=True)
@click.option("--output", "-o", required=True, type=click.Path(), help="Output directory")
@click.option("--max-chunk-size", type=click.IntRange(min=1), help="Maximum chunk size in KB")
@click.option("--min-chunk-size", type=click.IntRange(min=1), help="Minimum chunk size in KB")
@click.option(
    "--strategy",
    type=click.Choice(["aggressive", "conservative", "auto"]),
    help="Chunking strategy (default: auto)",
)
@click.option("--node-entry", is_flag=True, help="Also write a Node.js entry point (index.js)")
@click.option("--no-beautify", is_flag=True, help="Keep chunk code as generated")
@click.option("--indent-size", type=click.IntRange(min=0), help="Indentation size")
@click.option(
    "--indent-char",
    type=click.Choice(["space", "tab"]),
    help="Indentation character",
)
@click.option("--preserve-newlines", is_flag=True, help="Preserve existing newlines")
@click.option(
    "--continue-on-error", is_flag=True, help="Skip input files that fail instead of aborting"
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    help="Configuration file (JSON or YAML)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def chunk(
    files: tuple[str, ...],
    output: str,
    max_chunk_size: int | None,
    min_chunk_size: int | None,
    strategy: str | None,
    node_entry: bool,
    no_beautify: bool,
    indent_size: int | None,
    indent_char: str | None,
    preserve_newlines: bool,
    continue_on_error: bool,
    config_path: str,
    verbose: bool,
):
    """Split JavaScript FILES into chunks written to the output directory.

    FILES may be glob patterns.

    Examples:
        jschunker chunk app.js -o dist/chunks

        jschunker chunk "src/**/*.js" -o out --strategy conservative --max-chunk-size 64

        jschunker chunk bundle.js -o out --node-entry
    """
    _configure_logging(verbose)

    beautify_options = {}
    if indent_size is not None:
        beautify_options["indent_size"] = indent_size
    if indent_char:
        beautify_options["indent_char"] = "\t" if indent_char == "tab" else " "
    if preserve_newlines:
        beautify_options["preserve_newlines"] = True

    try:
        config = Config.load(Path(config_path)).with_overrides(
            output_dir=Path(output),
            strategy=strategy,
            max_chunk_size=max_chunk_size * 1024 if max_chunk_size else None,
            min_chunk_size=min_chunk_size * 1024 if min_chunk_size else None,
            node_entry=True if node_entry else None,
            beautify=False if no_beautify else None,
            beautify_options=beautify_options or None,
            continue_on_error=True if continue_on_error else None,
        )
        _run_chunk(list(files), config, verbose)
    except JSChunkerError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _run_chunk(file_patterns: list[str], config: Config, verbose: bool) -> None:
    """Read inputs, chunk them and write all output files."""
    if verbose:
        click.echo(f"Options: {config.model_dump_json(by_alias=True)}")

    file_io = FileIO()
    validation = file_io.validate_paths(file_patterns, str(config.output_dir))
    if not validation.valid:
        if not config.continue_on_error:
            raise FileIOError("; ".join(validation.errors))
        for error in validation.errors:
            logger.warning(error)

    files = file_io.read_input_files(
        file_patterns,
        continue_on_error=config.continue_on_error,
        exclude=config.exclude,
    )
    if not files:
        raise FileIOError("No input files found")

    click.echo(f"Processing {len(files)} file(s)...")
    file_io.create_output_directory(config.output_dir, clean=True)

    pipeline = ChunkPipeline(config)
    result = pipeline.process_files(
        files,
        on_file=lambda i, f: click.echo(f"Processing {i + 1}/{len(files)}: {f.path}"),
    )

    click.echo("Generating output files...")
    writer = OutputWriter(
        config.output_dir,
        loader_template=config.loader_template,
        node_entry=config.node_entry,
        file_io=file_io,
    )
    writer.write(result.chunks)

    for failure in result.failures:
        click.echo(f"⚠️  Skipped {failure.path}: {failure.error}", err=True)

    click.echo(f"✓ Successfully processed {len(result.processed)} file(s)")
    click.echo(
        f"✓ Generated {len(result.chunks)} chunk(s) from {result.segment_count} segment(s) "
        f"in {config.output_dir}/"
    )

    if verbose:
        render_summary(result)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def analyze(file: str, verbose: bool):
    """Print the call graph and global references found in FILE as JSON."""
    _configure_logging(verbose)

    try:
        source = FileIO().read_input_file(file).content
        tree = Parser().parse(source)
    except JSChunkerError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    analysis = Analyzer().analyze(tree)
    report = {
        "functions": [
            {"name": f.name, "params": list(f.params)} for f in analysis.functions
        ],
        "variables": [{"name": v.name, "kind": v.kind} for v in analysis.variables],
        "dependencies": analysis.dependencies,
        "globalReferences": analysis.global_references,
    }
    click.echo(json.dumps(report, indent=2))


if __name__ == "__main__":
    cli()
