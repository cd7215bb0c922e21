from dataclasses import replace

from clang_tags.definitions import is_taggable, iter_definition_tags, same_file
from clang_tags.tags import TagRecord

from fakes import make_cursor

SOURCE = b"""struct point {
  int x;
  int y;
};

int add(int a, int b) {
  return a+b;
}
"""


class TestDefinitionFilter:

    def test_definitions_in_the_indexed_file_are_taggable(self):
        cursor = make_cursor(SOURCE, b"add(int a, int b) {", "add", "src/add.c")
        assert is_taggable(cursor, "src/add.c")

    def test_declarations_are_not_taggable(self):
        cursor = make_cursor(SOURCE, b"add", "add", "src/add.c", is_definition=False)
        assert not is_taggable(cursor, "src/add.c")

    def test_definitions_from_other_files_are_not_taggable(self):
        cursor = make_cursor(SOURCE, b"point", "point", "include/point.h", kind="STRUCT_DECL")
        assert not is_taggable(cursor, "src/add.c")

    def test_cursor_without_file_is_not_taggable(self):
        cursor = make_cursor(SOURCE, b"point", "point", None)
        assert not is_taggable(cursor, "src/add.c")

    def test_unnamed_definitions_are_not_taggable(self):
        cursor = make_cursor(SOURCE, b"struct point", "", "src/add.c", kind="STRUCT_DECL")
        assert not is_taggable(cursor, "src/add.c")

    def test_same_file_normalizes_paths(self):
        assert same_file("src/./add.c", "src/add.c")
        assert same_file("src/../src/add.c", "src/add.c")
        assert not same_file("src/add.c", "src/add.h")


class TestDefinitionTags:

    def test_each_definition_becomes_one_record_in_traversal_order(self):
        path = "src/add.c"
        cursors = [
            make_cursor(SOURCE, b"point {\n  int x;\n  int y;\n}", "point", path, kind="STRUCT_DECL"),
            make_cursor(SOURCE, b"x;", "x", path, kind="FIELD_DECL"),
            make_cursor(SOURCE, b"y;", "y", path, kind="FIELD_DECL"),
            make_cursor(SOURCE, b"add(int a, int b) {\n  return a+b;\n}", "add", path),
            # references inside the body, not definitions
            make_cursor(SOURCE, b"a+b", "a", path, kind="DECL_REF_EXPR", is_definition=False),
        ]

        records = list(iter_definition_tags(cursors, path, SOURCE))

        assert records == [
            TagRecord("point", "struct point {", 1, SOURCE.index(b"point")),
            TagRecord("x", "  int x;", 2, SOURCE.index(b"x;")),
            TagRecord("y", "  int y;", 3, SOURCE.index(b"y;")),
            TagRecord("add", "int add(int a, int b)", 6, SOURCE.index(b"add")),
        ]

    def test_nested_definitions_do_not_duplicate_parent(self):
        path = "src/add.c"
        cursors = [
            make_cursor(SOURCE, b"point {\n  int x;\n  int y;\n}", "point", path, kind="STRUCT_DECL"),
            make_cursor(SOURCE, b"x;", "x", path, kind="FIELD_DECL"),
        ]

        names = [r.symbol_name for r in iter_definition_tags(cursors, path, SOURCE)]

        assert names.count("point") == 1
        assert names.count("x") == 1

    def test_definitions_from_headers_are_skipped(self):
        cursors = [
            make_cursor(SOURCE, b"point", "point", "include/shapes.h", kind="STRUCT_DECL"),
            make_cursor(SOURCE, b"add(int a, int b)", "add", "src/add.c"),
        ]

        records = list(iter_definition_tags(cursors, "src/add.c", SOURCE))

        assert [r.symbol_name for r in records] == ["add"]

    def test_is_lazy(self):
        path = "src/add.c"

        def cursors():
            yield make_cursor(SOURCE, b"add(int a, int b)", "add", path)
            raise AssertionError("consumed past the first definition")

        stream = iter_definition_tags(cursors(), path, SOURCE)
        assert next(stream).symbol_name == "add"

    def test_extent_ending_before_start_is_clamped(self):
        cursor = make_cursor(SOURCE, b"add", "add", "src/add.c")
        broken = replace(cursor, end_offset=cursor.offset - 10)

        records = list(iter_definition_tags([broken], "src/add.c", SOURCE))

        assert records[0].search_text == "int a"
