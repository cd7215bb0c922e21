import logging
import re
from typing import Dict, Iterable, List, Optional

from .parsing import DiagnosticView

logger = logging.getLogger(__name__)

MAX_MISSING_FILES = 100

# libclang's "Lexical or Preprocessor Issue" diagnostic category
PREPROCESSOR_CATEGORY = 2
PREPROCESSOR_CATEGORY_NAME = "Preprocessor"

FILE_NOT_FOUND_RE = re.compile(r"'(.*)' file not found")


class MissingFileSet:
    """
    Headers that could not be found while parsing, collected over a whole run.

    Insertion-ordered and free of duplicates. Once `capacity` distinct names
    are held, further names are refused and remembered in `overflow`; the first
    refusal is logged as a warning.
    """

    def __init__(self, capacity: int = MAX_MISSING_FILES):
        self.capacity = capacity
        self._files: Dict[str, None] = {}
        self._overflow: Dict[str, None] = {}

    def add(self, name: str) -> bool:
        """Returns True if `name` was not known before and has been stored."""
        if name in self._files:
            return False

        if len(self._files) >= self.capacity:
            if not self._overflow:
                logger.warning(
                    "More than %d missing include files, further ones are not reported",
                    self.capacity,
                )
            self._overflow[name] = None
            return False

        self._files[name] = None
        return True

    @property
    def overflow(self) -> List[str]:
        return list(self._overflow)

    def __contains__(self, name: str) -> bool:
        return name in self._files

    def __iter__(self):
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)


def is_preprocessor_issue(diagnostic: DiagnosticView) -> bool:
    return (
        diagnostic.category_number == PREPROCESSOR_CATEGORY
        or PREPROCESSOR_CATEGORY_NAME in diagnostic.category_name
    )


def missing_include_name(message: str) -> Optional[str]:
    """Extracts `foo.h` from a message like `'foo.h' file not found`."""
    match = FILE_NOT_FOUND_RE.search(message)
    if match is None:
        return None
    return match.group(1)


def collect_missing_includes(diagnostics: Iterable[DiagnosticView], missing: MissingFileSet) -> int:
    """
    Adds the headers named by "file not found" diagnostics to `missing`.

    Returns:
        Number of names that were new to the set
    """
    added = 0
    for diagnostic in diagnostics:
        if not is_preprocessor_issue(diagnostic):
            continue
        name = missing_include_name(diagnostic.spelling)
        if name is not None and missing.add(name):
            added += 1
    return added


def format_missing_report(missing: MissingFileSet) -> str:
    """Renders the end-of-run hint about unresolved includes ("" when there are none)."""
    if not len(missing):
        return ""

    lines = ["The following include files could not be found:"]
    lines.extend(f"   {name}" for name in missing)
    if missing.overflow:
        lines.append(f"   ... and {len(missing.overflow)} more")
    lines.append("Using -I to specify header search directories will improve results.")
    return "\n".join(lines)
