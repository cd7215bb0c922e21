"""
Thin adapter over libclang (`clang.cindex`).

Everything else in clang_tags only sees the plain `CursorView` and
`DiagnosticView` dataclasses produced here, so the rest of the pipeline can be
driven (and tested) without a compiler front end.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from clang import cindex

from .errors import ParseError

logger = logging.getLogger(__name__)

LIBCLANG_ENV_VAR = "CLANG_TAGS_LIBCLANG"

# Same behaviour as a "-fsyntax-only" compile that tolerates missing pieces:
# headers that cannot be found still leave a usable tree behind.
PARSE_OPTIONS = cindex.TranslationUnit.PARSE_INCOMPLETE


# ------------------------------------------------------------
# Views
# ------------------------------------------------------------

@dataclass(frozen=True)
class CursorView:
    kind: str
    is_definition: bool
    file: Optional[str]     # None for cursors without a location (e.g. the TU itself)
    line: int
    column: int
    offset: int
    end_offset: int
    spelling: str
    display_name: str


@dataclass(frozen=True)
class DiagnosticView:
    category_number: int
    category_name: str
    spelling: str
    severity: int = 0


# ------------------------------------------------------------
# Configuration
# ------------------------------------------------------------

def configure_libclang(library_file: Optional[str]):
    """
    Points clang.cindex at an explicit libclang shared library.

    Must run before the first Index is created; with no library file the
    bindings use their own lookup (the wheel's bundled library or the system one).
    """
    if not library_file:
        return
    if cindex.Config.loaded:
        logger.debug("libclang already loaded, ignoring %s", library_file)
        return
    logger.debug("Using libclang from %s", library_file)
    cindex.Config.set_library_file(library_file)


def build_clang_args(include_dirs: Sequence[str] = (), language: Optional[str] = None) -> List[str]:
    """Builds the compiler flags handed to libclang for every file."""
    args: List[str] = []
    for include_dir in include_dirs:
        args.extend(["-I", include_dir])
    if language:
        args.extend(["-x", language])
    return args


# ------------------------------------------------------------
# Parsed files
# ------------------------------------------------------------

def _cursor_view(cursor) -> CursorView:
    location = cursor.location
    extent = cursor.extent
    return CursorView(
        kind=cursor.kind.name,
        is_definition=cursor.is_definition(),
        file=location.file.name if location.file is not None else None,
        line=location.line,
        column=location.column,
        offset=location.offset,
        end_offset=extent.end.offset,
        spelling=cursor.spelling or "",
        display_name=cursor.displayname or "",
    )


def _diagnostic_view(diagnostic) -> DiagnosticView:
    return DiagnosticView(
        category_number=diagnostic.category_number,
        category_name=diagnostic.category_name or "",
        spelling=diagnostic.spelling or "",
        severity=diagnostic.severity,
    )


class ParsedFile:
    """A successfully parsed translation unit."""

    def __init__(self, path: str, translation_unit):
        self.path = path
        self._tu = translation_unit

    def iter_cursors(self) -> Iterator[CursorView]:
        """
        Yields every cursor of the translation unit in pre-order, depth-first.

        Nothing is pruned: the children of a definition are visited as well.
        """
        for cursor in self._tu.cursor.walk_preorder():
            try:
                yield _cursor_view(cursor)
            except ValueError as e:
                # Kinds newer than the Python bindings know about
                logger.debug("Skipping cursor with unknown kind in %s: %s", self.path, e)

    @property
    def diagnostics(self) -> List[DiagnosticView]:
        return [_diagnostic_view(d) for d in self._tu.diagnostics]


class ClangParser:
    """
    Parses files with one shared libclang index for the whole run.
    """

    def __init__(self, index=None):
        # excludeDecls: skip declarations coming from precompiled headers
        self._index = index if index is not None else cindex.Index.create(excludeDecls=True)

    def parse(self, path: str, args: Sequence[str] = ()) -> ParsedFile:
        """
        Raises:
            ParseError: if libclang returns no translation unit
        """
        try:
            tu = self._index.parse(path, args=list(args), options=PARSE_OPTIONS)
        except cindex.TranslationUnitLoadError as e:
            raise ParseError(path, str(e)) from e
        if tu is None:
            raise ParseError(path)
        return ParsedFile(path, tu)
