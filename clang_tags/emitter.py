"""
Writing (and reading back) the etags TAGS format.

A TAGS file is a plain sequence of file-sections:

    \\x0c
    <file path>,<byte length>
    <byte length bytes of tag records>

Sections come in the order files were indexed; there is no global index.
"""

from dataclasses import dataclass
from typing import BinaryIO, Iterator, List

from .errors import TagsFormatError
from .tags import TagRecord, decode, encode, parse_tag_line

SECTION_DELIMITER = b"\x0c\n"


@dataclass(frozen=True)
class FileSection:
    file_path: str
    serialized_tags: bytes

    @property
    def byte_length(self) -> int:
        return len(self.serialized_tags)

    def header(self) -> bytes:
        return encode(self.file_path) + f",{self.byte_length}\n".encode("ascii")

    def to_bytes(self) -> bytes:
        return SECTION_DELIMITER + self.header() + self.serialized_tags

    def records(self) -> List[TagRecord]:
        return [parse_tag_line(line) for line in self.serialized_tags.split(b"\n") if line]


class TagsEmitter:
    """Writes one file-section per indexed file to a binary stream."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self.sections_written = 0

    def emit_section(self, file_path: str, snapshot: bytes) -> FileSection:
        section = FileSection(file_path=file_path, serialized_tags=snapshot)
        self._stream.write(section.to_bytes())
        self.sections_written += 1
        return section


# ------------------------------------------------------------
# Reading
# ------------------------------------------------------------

def iter_sections(data: bytes) -> Iterator[FileSection]:
    """
    Splits the contents of a TAGS file back into file-sections.

    Raises:
        TagsFormatError: on a missing delimiter, a bad header or a truncated tag block
    """
    pos = 0
    size = len(data)
    while pos < size:
        if not data.startswith(SECTION_DELIMITER, pos):
            raise TagsFormatError(f"Expected section delimiter at byte {pos}")
        pos += len(SECTION_DELIMITER)

        header_end = data.find(b"\n", pos)
        if header_end < 0:
            raise TagsFormatError(f"Unterminated section header at byte {pos}")
        header = data[pos:header_end]

        # Paths may contain commas, the length never does
        path, sep, length = header.rpartition(b",")
        if not sep:
            raise TagsFormatError(f"Malformed section header: {header!r}")
        try:
            byte_length = int(length)
        except ValueError as e:
            raise TagsFormatError(f"Malformed section length in header: {header!r}") from e

        block_start = header_end + 1
        block_end = block_start + byte_length
        if block_end > size:
            raise TagsFormatError(
                f"Section {decode(path)} declares {byte_length} bytes, "
                f"only {size - block_start} available"
            )

        yield FileSection(file_path=decode(path), serialized_tags=data[block_start:block_end])
        pos = block_end
