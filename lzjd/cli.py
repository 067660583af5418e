"""Command-line interface for lzjd."""

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, TextIO, Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn

from . import __version__
from .config import load_config
from .core.builders import BUILDERS, get_builder
from .core.digest import write_comparisons, write_digests
from .core.errors import ConfigurationError, LZJDError, SourceIOError
from .core.hashers import HASHERS, get_hasher_factory
from .engine.comparator import BatchComparator
from .performance.parallel import ParallelExecutor
from .sources import collect_files, file_sources
from .utils.logging_setup import get_logger, setup_logging

logger = get_logger(__name__)

err_console = Console(stderr=True)


@contextmanager
def open_output(path: Optional[Path]) -> Iterator[TextIO]:
    """
    Yield the output stream: the given file, or stdout.

    Raises:
        SourceIOError: the output cannot be opened, written or flushed
    """
    target = "<stdout>" if path is None else str(path)
    try:
        if path is None:
            yield sys.stdout
            sys.stdout.flush()
        else:
            with open(path, "w", encoding="utf-8", newline="\n") as f:
                yield f
    except OSError as e:
        raise SourceIOError(f"IO error: {e}", path=target) from e


@contextmanager
def progress_bar(enabled: bool, total: int, description: str):
    """Yield a progress callback; a no-op unless enabled."""
    if not enabled:
        yield None
        return
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=err_console,
        transient=True,
    ) as progress:
        task = progress.add_task(description, total=total)
        yield lambda n: progress.advance(task, n)


def format_error(error: LZJDError) -> str:
    """Prefix the message with the digest file location when one is known."""
    path = error.details.get("path")
    line_number = error.details.get("line_number")
    if path and line_number is not None:
        return f"{path}:{line_number}: {error.message}"
    if path and path not in error.message:
        return f"{path}: {error.message}"
    return error.message


def run(inputs: Tuple[Path, ...], deep: bool, compare: bool, gen_compare: bool,
        threshold: Optional[int], threads: Optional[int], output: Optional[Path],
        hasher: Optional[str], strategy: Optional[str], processes: Optional[bool],
        config_path: Optional[Path], verbose: bool, log_file: Optional[Path],
        show_progress: bool) -> int:
    """Execute one CLI invocation; returns the number of lines written."""
    if compare and gen_compare:
        raise ConfigurationError("--compare and --gen-compare are mutually exclusive")

    config = load_config(config_path).merge(
        threshold=threshold,
        workers=threads,
        hasher=hasher,
        strategy=strategy,
        use_processes=processes,
        log_level="DEBUG" if verbose else None,
        log_file=str(log_file) if log_file else None,
    )
    setup_logging(level=config.log_level, log_file=Path(config.log_file) if config.log_file else None)
    logger.debug(f"Effective configuration: {config.to_dict()}")

    paths = collect_files(inputs, deep=deep)
    executor = ParallelExecutor(
        max_workers=config.workers,
        use_processes=config.use_processes,
        chunk_size=config.chunk_size
    )
    builder = get_builder(config.strategy, get_hasher_factory(config.hasher))

    with BatchComparator(builder, executor) as comparator, open_output(output) as writer:
        if compare:
            results = comparator.compare_digest_files(paths, config.threshold)
            return write_comparisons(results, writer)

        sources = file_sources(paths)
        with progress_bar(show_progress, len(sources), "Hashing") as advance:
            if gen_compare:
                results = comparator.generate_and_compare(sources, config.threshold, progress=advance)
            else:
                records = comparator.hash_sources(sources, progress=advance)

        if gen_compare:
            return write_comparisons(results, writer)
        return write_digests(records, writer)


@click.command(name="lzjd", context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="lzjd")
@click.argument("inputs", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option("-r", "--deep", is_flag=True, help="Generate digests from directories and files")
@click.option("-c", "--compare", is_flag=True, help="Compare digests in one file, or two digest files")
@click.option("-g", "--gen-compare", is_flag=True, help="Compare all pairs in source data")
@click.option("-t", "--threshold", type=click.IntRange(0, 100), default=None,
              help="Only show results >= threshold (default: 1)")
@click.option("-p", "--threads", type=int, default=None,
              help="Restrict compute to N workers (default: logical cores)")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Send output to FILE instead of stdout")
@click.option("--hasher", type=click.Choice(sorted(HASHERS)), default=None,
              help="Phrase hash function (default: murmur3)")
@click.option("--strategy", type=click.Choice(sorted(BUILDERS)), default=None,
              help="Sketch construction strategy (default: streaming)")
@click.option("--processes/--no-processes", default=None,
              help="Use worker processes instead of threads")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              default=None, help="Path to a YAML configuration file")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Also write JSON logs to this file")
@click.option("--progress", "show_progress", is_flag=True, help="Show a progress bar while hashing")
def cli(**kwargs):
    """Calculate the Lempel-Ziv Jaccard distance of input binaries."""
    try:
        run(**kwargs)
    except LZJDError as e:
        logger.debug("Command failed", exc_info=True)
        err_console.print(f"[red]{escape(format_error(e))}[/red]", soft_wrap=True)
        sys.exit(1)


def main():
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
