"""
Command-line interface for robin_chunking.

Chunks files, compares two files chunk by chunk, benchmarks the two chunking
modes and writes starter configuration files.
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
import yaml

from robin_chunking import __version__
from robin_chunking.chunker import RobinChunker
from robin_chunking.core.base import ChunkSet
from robin_chunking.core.config import ChunkerConfig, default_config, load_config
from robin_chunking.core.exceptions import ChunkingError
from robin_chunking.logging_config import (
    LogLevel,
    configure_logging,
    get_logger,
    user_info,
    user_success,
    user_warning,
)
from robin_chunking.utils.benchmarking import benchmark as run_benchmark
from robin_chunking.utils.diff import compare_chunk_sets
from robin_chunking.utils.validation import ChunkSetValidator

logger = get_logger(__name__)


def config_options(func):
    """Shared options selecting the chunker configuration."""
    options = [
        click.option('--config', '-c', 'config_path', type=click.Path(exists=True, path_type=Path),
                     help='YAML or JSON configuration file'),
        click.option('--prime', type=int, help='Weight multiplier (default 3)'),
        click.option('--min-size', type=int, help='Minimum chunk size in bytes (default 512)'),
        click.option('--max-size', type=int, help='Maximum chunk size in bytes (default 2048)'),
        click.option('--avg-size', type=int, help='Boundary modulus (default 1024)'),
        click.option('--window-size', type=int, help='Boundary window in bytes (default 31)'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_config(config_path: Optional[Path], **overrides) -> ChunkerConfig:
    """Load the configuration file (if any) and apply command-line overrides."""
    base = load_config(config_path) if config_path else default_config()
    values = base.to_dict()
    for key, value in overrides.items():
        if value is not None:
            values[key] = value
    # An overridden prime also moves the residue unless the file pinned it
    if overrides.get('prime') is not None and base.residue == base.prime:
        values['residue'] = overrides['prime']
    return ChunkerConfig.from_dict(values)


def _chunk_lines(chunk_set: ChunkSet):
    for i, record in enumerate(chunk_set):
        yield f"idx: {i} key: {record.key} checksum: {record.checksum} len: {record.size}"


def _save_chunks(chunk_set: ChunkSet, config: ChunkerConfig, output_path: Path, output_format: str) -> None:
    """Save chunk metadata to a file in the requested format."""
    data: Dict[str, Any] = {'config': config.to_dict(), **chunk_set.to_dict()}

    with open(output_path, 'w', encoding='utf-8') as f:
        if output_format == 'json':
            json.dump(data, f, indent=2)
        elif output_format == 'yaml':
            yaml.safe_dump(data, f, indent=2, sort_keys=False)
        else:
            for line in _chunk_lines(chunk_set):
                f.write(line + "\n")


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress output except errors')
@click.option('--debug', is_flag=True, help='Enable debug mode with detailed logging')
@click.option('--log-level', type=click.Choice([level.value for level in LogLevel]),
              help='Set specific log level')
@click.option('--log-file', type=click.Path(path_type=Path), help='Write logs to file')
@click.pass_context
def main(ctx: click.Context, verbose: bool, quiet: bool, debug: bool,
         log_level: Optional[str], log_file: Optional[Path]) -> None:
    """
    Robin content-defined chunking CLI

    Splits files into content-aligned chunks and reports their keys and checksums.
    """
    ctx.ensure_object(dict)

    if debug:
        level = LogLevel.DEBUG
    elif log_level:
        level = LogLevel(log_level)
    elif quiet:
        level = LogLevel.SILENT
    elif verbose:
        level = LogLevel.VERBOSE
    else:
        level = LogLevel.NORMAL

    configure_logging(
        level=level,
        file_output=bool(log_file),
        log_file=log_file,
        console_output=not quiet,
        collect_performance=debug or verbose,
        collect_metrics=debug or verbose
    )

    ctx.obj['verbose'] = verbose or debug
    ctx.obj['quiet'] = quiet


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@config_options
@click.option('--stream/--bulk', default=True, help='Read the file block-wise (default) or all at once')
@click.option('--output', '-o', type=click.Path(path_type=Path), help='Output file for chunk metadata')
@click.option('--format', 'output_format', type=click.Choice(['json', 'text', 'yaml']), default='json',
              help='Output file format')
@click.option('--validate', is_flag=True, help='Validate chunks after creation')
@click.pass_context
def chunk(
    ctx: click.Context,
    input_file: Path,
    config_path: Optional[Path],
    prime: Optional[int],
    min_size: Optional[int],
    max_size: Optional[int],
    avg_size: Optional[int],
    window_size: Optional[int],
    stream: bool,
    output: Optional[Path],
    output_format: str,
    validate: bool
) -> None:
    """Chunk a file and list its chunks."""
    try:
        config = _build_config(config_path, prime=prime, min_size=min_size, max_size=max_size,
                               avg_size=avg_size, window_size=window_size)
        chunker = RobinChunker(config)
        chunk_set = chunker.chunk_file(input_file, stream=stream)

        if validate:
            issues = ChunkSetValidator(config).validate(chunk_set, input_file.read_bytes())
            if issues:
                click.echo(f"Validation issues found: {len(issues)}", err=True)
                for issue in issues[:5]:
                    click.echo(f"  - {issue}", err=True)
                if len(issues) > 5:
                    click.echo(f"  ... and {len(issues) - 5} more", err=True)
                sys.exit(1)
            user_info("Validation passed")

        if output:
            _save_chunks(chunk_set, config, output, output_format)
            user_info(f"Chunk metadata saved to {output}")
        else:
            for line in _chunk_lines(chunk_set):
                click.echo(line)

        if not ctx.obj.get('quiet'):
            stats = chunker.get_stats()
            user_success(
                f"{len(chunk_set)} chunks, {stats['boundary_hits']} natural boundaries, "
                f"avg {stats['avg_chunk_size']:.1f} bytes"
            )

    except (ChunkingError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument('file1', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('file2', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@config_options
@click.option('--show-chunks', is_flag=True, help='List the chunks of both files')
def diff(
    file1: Path,
    file2: Path,
    config_path: Optional[Path],
    prime: Optional[int],
    min_size: Optional[int],
    max_size: Optional[int],
    avg_size: Optional[int],
    window_size: Optional[int],
    show_chunks: bool
) -> None:
    """Compare FILE2 against FILE1 chunk by chunk."""
    try:
        config = _build_config(config_path, prime=prime, min_size=min_size, max_size=max_size,
                               avg_size=avg_size, window_size=window_size)
        chunker = RobinChunker(config)
        base = chunker.chunk_file(file1, stream=False)
        target = chunker.chunk_file(file2, stream=True)

        if show_chunks:
            click.echo(f"{file1}:")
            for line in _chunk_lines(base):
                click.echo(f"  {line}")
            click.echo(f"{file2}:")
            for line in _chunk_lines(target):
                click.echo(f"  {line}")

        result = compare_chunk_sets(base, target)
        click.echo(f"base chunks: {result.base_chunks}")
        click.echo(f"target chunks: {result.target_chunks}")
        click.echo(f"positional matches: {len(result.positional_matches)}")
        click.echo(f"reused chunks: {len(result.reused_chunks)} ({result.reused_bytes} bytes)")
        click.echo(f"new chunks: {len(result.new_chunks)} ({result.new_bytes} bytes)")
        click.echo(f"similarity: {result.similarity:.4f}")
        if result.identical:
            click.echo("files are identical")

    except (ChunkingError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@config_options
@click.option('--runs', type=int, default=3, help='Number of runs per mode')
@click.option('--json', 'as_json', is_flag=True, help='Print the result as JSON')
def benchmark(
    input_file: Path,
    config_path: Optional[Path],
    prime: Optional[int],
    min_size: Optional[int],
    max_size: Optional[int],
    avg_size: Optional[int],
    window_size: Optional[int],
    runs: int,
    as_json: bool
) -> None:
    """Benchmark bulk and streaming chunking on a file."""
    try:
        config = _build_config(config_path, prime=prime, min_size=min_size, max_size=max_size,
                               avg_size=avg_size, window_size=window_size)
        result = run_benchmark(input_file.read_bytes(), config, runs=runs)

        if as_json:
            click.echo(json.dumps(result.to_dict(), indent=2))
            return

        click.echo(f"Size: {result.content_size:,} bytes, {result.runs} run(s)")
        click.echo(f"Bulk:   {result.bulk_time:.3f}s ({result.bulk_throughput_mbps:.2f} MB/s)")
        click.echo(f"Stream: {result.stream_time:.3f}s ({result.stream_throughput_mbps:.2f} MB/s)")
        click.echo(f"Chunks: {result.chunk_count} ({result.natural_boundaries} natural), "
                   f"avg {result.avg_chunk_size:.1f} +/- {result.chunk_size_stdev:.1f} bytes")
        if result.memory_usage_mb is not None:
            click.echo(f"Memory: {result.memory_usage_mb:.1f} MB")
        if not result.modes_agree:
            user_warning("Bulk and streaming modes disagree")
            sys.exit(1)

    except (ChunkingError, OSError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command('init-config')
@click.option('--output', '-o', type=click.Path(path_type=Path), default=Path('robin_chunking.yaml'),
              help='Output configuration file')
def init_config(output: Path) -> None:
    """Write the reference configuration to a YAML file."""
    config_data = {
        'chunker': default_config().to_dict()
    }

    try:
        with open(output, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config_data, f, indent=2, sort_keys=False)
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Configuration file created: {output}")


if __name__ == '__main__':
    main()
