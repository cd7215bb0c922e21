import os
from typing import Iterable, Iterator

from .parsing import CursorView
from .search_text import extract_search_text
from .tags import TagRecord


def same_file(a: str, b: str) -> bool:
    return os.path.normpath(a) == os.path.normpath(b)


def is_taggable(cursor: CursorView, source_file: str) -> bool:
    """
    A cursor becomes a tag when it defines a named symbol inside the file being
    indexed. Definitions that libclang attributes to included headers are left
    for the header's own file-section.
    """
    if not cursor.is_definition:
        return False
    if cursor.file is None or not same_file(cursor.file, source_file):
        return False
    return bool(cursor.spelling)


def iter_definition_tags(
    cursors: Iterable[CursorView],
    source_file: str,
    contents: bytes,
) -> Iterator[TagRecord]:
    """
    Turns a stream of cursors into a stream of tag records.

    Args:
        cursors: Cursors of a parsed file, in traversal order
        source_file: Path of the file being indexed
        contents: Raw bytes of `source_file`, used to recover the search text

    Returns:
        One TagRecord per definition, in the order the cursors arrive
    """
    for cursor in cursors:
        if not is_taggable(cursor, source_file):
            continue

        search_text = extract_search_text(
            contents,
            cursor.offset,
            max(cursor.end_offset - cursor.offset, 0),
        )
        yield TagRecord(
            symbol_name=cursor.spelling,
            search_text=search_text,
            line=cursor.line,
            byte_offset=cursor.offset,
        )
