from pathlib import Path
from typing import List, Tuple

import typer

from clang_tags.emitter import FileSection, iter_sections
from clang_tags.errors import TagsFormatError
from clang_tags.tags import TagRecord

app = typer.Typer(help="Inspect an existing TAGS file.")


def load_tags(tags_file: Path) -> List[Tuple[FileSection, List[TagRecord]]]:
    try:
        return [(section, section.records()) for section in iter_sections(tags_file.read_bytes())]
    except OSError as e:
        typer.echo(f"Cannot read {tags_file}: {e}", err=True)
        raise typer.Exit(code=1)
    except TagsFormatError as e:
        typer.echo(f"{tags_file} is not a valid TAGS file: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def files(tags_file: Path = typer.Argument(Path("TAGS"), help="TAGS file to read")):
    """Lists the file-sections with their number of tags."""
    for section, records in load_tags(tags_file):
        typer.echo(f"{section.file_path}\t{len(records)}")


@app.command()
def find(
    name: str = typer.Argument(..., help="Symbol name"),
    tags_file: Path = typer.Argument(Path("TAGS"), help="TAGS file to read"),
):
    """Prints every definition of NAME."""
    found = 0
    for section, records in load_tags(tags_file):
        for record in records:
            if record.symbol_name == name:
                typer.echo(f"{section.file_path}:{record.line}: {record.search_text}")
                found += 1

    if not found:
        typer.echo(f"Symbol '{name}' not found.", err=True)
        raise typer.Exit(code=1)
