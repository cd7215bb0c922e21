from dataclasses import dataclass

from .errors import TagsFormatError

# Field separators of an etags record. Editors match these exact bytes.
SEARCH_TEXT_END = b"\x7f"
SYMBOL_NAME_END = b"\x01"

ENCODING = "utf-8"
ERRORS = "surrogateescape"


@dataclass(frozen=True)
class TagRecord:
    """One definition, as it appears in a file-section of the TAGS file."""
    symbol_name: str
    search_text: str
    line: int           # 1-based
    byte_offset: int    # 0-based, from the start of the file

    def to_bytes(self) -> bytes:
        """
        Serializes the record as `<searchText>\\x7f<symbolName>\\x01<line>,<offset>\\n`.
        """
        return b"".join([
            encode(self.search_text),
            SEARCH_TEXT_END,
            encode(self.symbol_name),
            SYMBOL_NAME_END,
            f"{self.line},{self.byte_offset}\n".encode("ascii"),
        ])


def encode(text: str) -> bytes:
    return text.encode(ENCODING, ERRORS)


def decode(data: bytes) -> str:
    return data.decode(ENCODING, ERRORS)


def parse_tag_line(line: bytes) -> TagRecord:
    """
    Parses one serialized record (with or without its trailing newline).

    Raises:
        TagsFormatError: if a separator is missing or line/offset are not integers
    """
    line = line.rstrip(b"\n")

    search_text, sep, rest = line.partition(SEARCH_TEXT_END)
    if not sep:
        raise TagsFormatError(f"Missing search text separator in tag line: {line!r}")

    symbol_name, sep, position = rest.partition(SYMBOL_NAME_END)
    if not sep:
        raise TagsFormatError(f"Missing symbol name separator in tag line: {line!r}")

    line_no, sep, offset = position.partition(b",")
    try:
        return TagRecord(
            symbol_name=decode(symbol_name),
            search_text=decode(search_text),
            line=int(line_no),
            byte_offset=int(offset),
        )
    except ValueError as e:
        raise TagsFormatError(f"Bad position {position!r} in tag line") from e
