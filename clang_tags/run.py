import logging
import mmap
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, List, Optional, Sequence

from .definitions import iter_definition_tags
from .emitter import TagsEmitter
from .errors import ParseError
from .missing_includes import MissingFileSet, collect_missing_includes
from .parsing import ClangParser
from .tag_buffer import TagBuffer
from .walker import SourceFileFilter

logger = logging.getLogger(__name__)


def _no_progress(files_indexed: int):
    pass


@dataclass
class RunContext:
    """
    State shared by every file of one indexing run.

    Built once at startup and closed at the end; the tag buffer and the
    libclang index are reused across files, the missing-include set collects
    over the whole run.
    """
    output: BinaryIO
    parser: ClangParser
    clang_args: List[str] = field(default_factory=list)
    source_filter: SourceFileFilter = field(default_factory=SourceFileFilter)
    progress: Callable[[int], None] = _no_progress
    tag_buffer: TagBuffer = field(default_factory=TagBuffer)
    missing_files: MissingFileSet = field(default_factory=MissingFileSet)

    files_indexed: int = 0
    files_skipped: int = 0
    tags_written: int = 0
    emitter: TagsEmitter = field(init=False, repr=False)

    def __post_init__(self):
        self.emitter = TagsEmitter(self.output)

    @classmethod
    def open(
        cls,
        output_path: str,
        clang_args: Sequence[str] = (),
        source_filter: Optional[SourceFileFilter] = None,
        progress: Optional[Callable[[int], None]] = None,
        parser: Optional[ClangParser] = None,
    ) -> "RunContext":
        """
        Opens `output_path` for writing and prepares a run around it.

        Raises:
            OSError: if the TAGS file cannot be opened
        """
        output = open(output_path, "wb")
        try:
            return cls(
                output=output,
                parser=parser if parser is not None else ClangParser(),
                clang_args=list(clang_args),
                source_filter=source_filter or SourceFileFilter(),
                progress=progress or _no_progress,
            )
        except BaseException:
            output.close()
            raise

    def close(self):
        self.output.close()

    def __enter__(self) -> "RunContext":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ------------------------------------------------------------
    # Per-file pipeline
    # ------------------------------------------------------------
    def index_file(self, path: str) -> bool:
        """
        Parses `path`, writes its file-section and returns True.

        Returns False (and logs why) when the file is skipped because it cannot
        be parsed or read.
        """
        self.files_indexed += 1
        self.progress(self.files_indexed)

        try:
            parsed = self.parser.parse(path, self.clang_args)
        except ParseError as e:
            logger.warning("%s, skipping", e)
            self.files_skipped += 1
            return False

        collect_missing_includes(parsed.diagnostics, self.missing_files)

        try:
            f = open(path, "rb")
        except OSError as e:
            logger.error("Could not open %s: %s", path, e)
            self.files_skipped += 1
            return False

        with f:
            try:
                contents = _map_contents(f)
            except OSError as e:
                logger.error("Could not map %s: %s", path, e)
                self.files_skipped += 1
                return False

            try:
                for record in iter_definition_tags(parsed.iter_cursors(), path, contents):
                    self.tag_buffer.append_record(record)
                    self.tags_written += 1
            finally:
                if isinstance(contents, mmap.mmap):
                    contents.close()

        self.emitter.emit_section(path, self.tag_buffer.snapshot_and_reset())
        logger.debug("Indexed %s", path)
        return True


def _map_contents(f):
    # Empty files cannot be mapped
    try:
        return mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ)
    except ValueError:
        return b""
