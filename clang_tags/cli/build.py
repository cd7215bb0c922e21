import logging
from typing import List, Optional

import typer
from clang import cindex

from clang_tags.missing_includes import format_missing_report
from clang_tags.parsing import LIBCLANG_ENV_VAR, ClangParser, build_clang_args, configure_libclang
from clang_tags.run import RunContext
from clang_tags.walker import SOURCE_PATTERN, DirectoryWalker, SourceFileFilter

logger = logging.getLogger(__name__)

PROGRESS_COUNT_EVERY = 10


def configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def echo_progress(files_indexed: int):
    typer.echo(".", nl=False)
    if files_indexed % PROGRESS_COUNT_EVERY == 0:
        typer.echo(str(files_indexed), nl=False)


def build(
    paths: List[str] = typer.Argument(..., help="Source files or directories to index"),
    include: List[str] = typer.Option([], "-I", "--include", help="Header search directory (repeatable)"),
    language: Optional[str] = typer.Option(None, "-x", "--language", help="Treat sources as this language (c, c++, ...)"),
    output: str = typer.Option("TAGS", "-o", "--output", help="TAGS file to write"),
    pattern: str = typer.Option(SOURCE_PATTERN, "--pattern", help="Regex selecting the files to index"),
    libclang: Optional[str] = typer.Option(None, "--libclang", envvar=LIBCLANG_ENV_VAR, help="Path to the libclang shared library"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log every file"),
):
    """Builds an etags TAGS file from C/C++ sources."""
    configure_logging(verbose)

    try:
        configure_libclang(libclang)
        parser = ClangParser()
    except cindex.LibclangError as e:
        typer.echo(f"Failed to load libclang: {e}", err=True)
        raise typer.Exit(code=1)

    try:
        context = RunContext.open(
            output,
            clang_args=build_clang_args(include, language),
            source_filter=SourceFileFilter(pattern),
            progress=echo_progress,
            parser=parser,
        )
    except OSError as e:
        typer.echo(f"Failed to open {output} for writing: {e}", err=True)
        raise typer.Exit(code=1)

    with context:
        walker = DirectoryWalker(context)
        for path in paths:
            walker.visit(path)

    typer.echo("\nDone")
    logger.info(
        "%d files indexed (%d skipped), %d tags written to %s",
        context.files_indexed, context.files_skipped, context.tags_written, output,
    )

    report = format_missing_report(context.missing_files)
    if report:
        typer.echo("\n" + report)
