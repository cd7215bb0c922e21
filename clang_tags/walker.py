import logging
import os
import re
import stat
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .run import RunContext

logger = logging.getLogger(__name__)

SOURCE_PATTERN = r"\.(c|cpp|cc|cxx|h|hpp)$"


@dataclass(frozen=True)
class SourceFileFilter:
    """Selects C/C++ sources and headers by file name suffix."""
    pattern: str = SOURCE_PATTERN
    _regex: "re.Pattern" = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_regex", re.compile(self.pattern))

    def matches(self, path: str) -> bool:
        return self._regex.search(path) is not None


def is_hidden(name: str) -> bool:
    return name.startswith(".")


class DirectoryWalker:
    """
    Visits files and directory trees, indexing every source file it finds.

    Dot-prefixed entries are skipped, and so are symbolic links, which are
    never followed.
    """

    def __init__(self, context: "RunContext"):
        self.context = context

    def visit(self, path: str):
        try:
            st = os.lstat(path)
        except OSError as e:
            logger.error("Cannot access %s: %s", path, e)
            return

        if stat.S_ISLNK(st.st_mode):
            logger.debug("Skipping symlink %s", path)
        elif stat.S_ISDIR(st.st_mode):
            self._visit_directory(path)
        elif stat.S_ISREG(st.st_mode):
            self._visit_file(path)
        else:
            logger.debug("Skipping special file %s", path)

    def _visit_file(self, path: str):
        if self.context.source_filter.matches(path):
            self.context.index_file(path)

    def _visit_directory(self, root: str):
        for dirpath, dirnames, filenames in os.walk(root, onerror=self._on_walk_error):
            # Ignores hidden and symlinked directories
            dirnames[:] = [
                d for d in dirnames
                if not is_hidden(d) and not os.path.islink(os.path.join(dirpath, d))
            ]
            for f in filenames:
                if is_hidden(f):
                    continue
                self.visit(os.path.join(dirpath, f))

    def _on_walk_error(self, error: OSError):
        logger.error("Cannot list %s: %s", error.filename, error)
