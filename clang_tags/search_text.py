"""
Recovers the declaration snippet ("search text") attached to each tag.

This is a heuristic and not a parser. Starting at the offset where the
definition begins, it takes everything from the start of that line up to the
first terminator character, e.g. for

    int add(int a, int b) {

the search text of `add` is `int add(int a, int b)`. Editors look the text up
as a line prefix, so the leading indentation of the line is kept.
"""

from .tags import decode

TERMINATORS = frozenset(b"){\n\r;")
WHITESPACE = frozenset(b" \t\n\r\v\f")


def extract_search_text(contents: bytes, start_offset: int, max_span: int) -> str:
    """
    Extracts the search text for a definition starting at `start_offset`.

    Args:
        contents: Raw bytes of the whole source file
        start_offset: Byte offset where the definition starts
        max_span: Maximum number of bytes to scan forward looking for a terminator

    Returns:
        The text from the start of the line up to the terminator (inclusive,
        unless the terminator is whitespace), without trailing whitespace.
        When no terminator shows up within `max_span` bytes, the last byte of
        the span is used as if it were one. An offset past the end of
        `contents` yields an empty string.
    """
    size = len(contents)
    if start_offset < 0 or start_offset >= size:
        return ""

    # Start of the line
    start = start_offset
    while start > 0 and contents[start - 1] != 0x0A:
        start -= 1

    # Forward to the first terminator, bounded by the span and the contents
    limit = min(start_offset + max(max_span, 0), size - 1)
    end = start_offset
    while end < limit and contents[end] not in TERMINATORS:
        end += 1

    # Trailing whitespace (including a newline terminator)
    while end >= start and contents[end] in WHITESPACE:
        end -= 1

    if end < start:
        return ""
    return decode(contents[start:end + 1])
