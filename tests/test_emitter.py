import io

import pytest

from clang_tags.emitter import FileSection, TagsEmitter, iter_sections
from clang_tags.errors import TagsFormatError
from clang_tags.tag_buffer import TagBuffer
from clang_tags.tags import TagRecord

RECORDS = [
    TagRecord("add", "int add(int a, int b)", 3, 25),
    TagRecord("area", "area(struct rect r)", 8, 76),
]


class TestTagsEmitter:

    def test_section_layout(self):
        out = io.BytesIO()
        block = b"int add(int a, int b)\x7fadd\x013,25\n"

        TagsEmitter(out).emit_section("src/add.c", block)

        assert out.getvalue() == b"\x0c\nsrc/add.c,%d\n" % len(block) + block

    def test_declared_length_matches_block(self):
        buf = TagBuffer()
        for record in RECORDS:
            buf.append_record(record)
        out = io.BytesIO()

        section = TagsEmitter(out).emit_section("src/add.c", buf.snapshot_and_reset())

        header = out.getvalue().split(b"\n")[1]
        assert header == b"src/add.c,%d" % section.byte_length
        assert section.byte_length == len(b"".join(r.to_bytes() for r in RECORDS))

    def test_sections_are_written_in_emit_order(self):
        out = io.BytesIO()
        emitter = TagsEmitter(out)
        emitter.emit_section("b.c", b"")
        emitter.emit_section("a.c", RECORDS[0].to_bytes())

        assert emitter.sections_written == 2
        assert [s.file_path for s in iter_sections(out.getvalue())] == ["b.c", "a.c"]

    def test_empty_section(self):
        out = io.BytesIO()
        TagsEmitter(out).emit_section("empty.h", b"")
        assert out.getvalue() == b"\x0c\nempty.h,0\n"


class TestReadingSections:

    def test_round_trip(self):
        block = b"".join(r.to_bytes() for r in RECORDS)
        data = FileSection("src/add.c", block).to_bytes() + FileSection("x.h", b"").to_bytes()

        sections = list(iter_sections(data))

        assert [s.file_path for s in sections] == ["src/add.c", "x.h"]
        assert sections[0].records() == RECORDS
        assert sections[1].records() == []

    def test_path_with_comma(self):
        data = FileSection("odd,name.c", RECORDS[0].to_bytes()).to_bytes()
        assert next(iter_sections(data)).file_path == "odd,name.c"

    def test_empty_file(self):
        assert list(iter_sections(b"")) == []

    @pytest.mark.parametrize("data", [
        b"src/add.c,10\n0123456789",         # no delimiter
        b"\x0c\nsrc/add.c,10",                # unterminated header
        b"\x0c\nsrc/add.c\n",                 # no length
        b"\x0c\nsrc/add.c,ten\n",             # bad length
        b"\x0c\nsrc/add.c,50\nint x;\x7fx\x011,4\n",  # truncated block
    ])
    def test_malformed_files(self, data):
        with pytest.raises(TagsFormatError):
            list(iter_sections(data))
