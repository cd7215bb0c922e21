class ClangTagsError(Exception):
    """Base class for errors raised by clang_tags."""


class ParseError(ClangTagsError):
    """libclang could not produce a translation unit for a file."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"Failed to parse {path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class TagsFormatError(ClangTagsError):
    """A TAGS file (or a piece of one) does not follow the etags layout."""
