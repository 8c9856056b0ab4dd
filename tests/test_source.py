"""Annotation source reader tests."""

import pytest

from pytablespec import (
    AnnotationSyntaxError,
    RecordShape,
    Visibility,
    parse_meta_list,
    parse_record,
)
from pytablespec.meta import ListValue, Literal, MetaShape


class TestParseRecord:
    def test_named_struct(self, entity_record):
        assert entity_record.name == "Entity"
        assert entity_record.shape is RecordShape.STRUCT
        assert entity_record.vis is Visibility.PUBLIC
        assert [f.name for f in entity_record.fields] == ["id", "created_at"]

    def test_field_types_kept_as_source(self, entity_record):
        assert [str(f.ty) for f in entity_record.fields] == ["u128", "Timestamp"]

    def test_field_attributes(self, entity_record):
        id_field = entity_record.fields[0]
        assert [a.key for a in id_field.attrs] == ["primary_key", "auto_inc"]
        assert entity_record.fields[1].attrs == ()

    def test_record_attributes(self, entity_record):
        (attr,) = entity_record.attrs
        assert attr.key == "table"
        assert attr.shape is MetaShape.GROUP
        assert [m.key for m in attr.nested] == ["public", "accessor"]

    def test_generic_and_tuple_types(self):
        record = parse_record(
            """
            struct Bag {
                items: Vec<Option<u8>>,
                pair: (u32, String),
                raw: [u8; 32],
                owner: std::Identity,
            }
            """
        )
        assert [str(f.ty) for f in record.fields] == [
            "Vec<Option<u8>>",
            "(u32, String)",
            "[u8; 32]",
            "std::Identity",
        ]

    def test_field_visibility(self):
        record = parse_record("struct S { pub a: u8, b: u8 }")
        assert [f.vis for f in record.fields] == [Visibility.PUBLIC, Visibility.INHERITED]

    def test_empty_struct(self):
        record = parse_record("struct Empty {}")
        assert record.fields == ()

    def test_tuple_struct(self):
        record = parse_record("struct Pair(u32, pub u32);")
        assert record.shape is RecordShape.TUPLE
        assert [f.name for f in record.fields] == [None, None]

    def test_unit_struct(self):
        record = parse_record("struct Marker;")
        assert record.shape is RecordShape.UNIT

    def test_enum(self):
        record = parse_record("enum Color { Red, Green(u8), Blue { level: u8 } }")
        assert record.shape is RecordShape.ENUM
        assert record.variants == ("Red", "Green", "Blue")

    def test_comments_ignored(self):
        record = parse_record(
            """
            // line comment
            struct S {
                // field comment
                a: u8, // trailing
            }
            """
        )
        assert [f.name for f in record.fields] == ["a"]

    def test_spans(self, entity_record):
        id_field = entity_record.fields[0]
        assert id_field.span is not None
        assert id_field.attrs[0].span.line == 5


class TestParseMetaList:
    def test_shapes(self):
        items = parse_meta_list("public, accessor = entity, index(btree), default(0)")
        assert [m.shape for m in items] == [
            MetaShape.FLAG,
            MetaShape.VALUE,
            MetaShape.GROUP,
            MetaShape.GROUP,
        ]

    def test_empty(self):
        assert parse_meta_list("") == ()

    def test_trailing_comma(self):
        assert len(parse_meta_list("public, event,")) == 2

    def test_dotted_path(self):
        (item,) = parse_meta_list("scheduled(jobs.send_reminder)")
        (job,) = item.nested
        assert job.path.segments == ("jobs", "send_reminder")
        assert job.key is None
        assert job.name == "jobs.send_reminder"

    def test_list_value(self):
        (item,) = parse_meta_list("columns = [a, b]")
        assert isinstance(item.value, ListValue)
        assert [str(v) for v in item.value.items] == ["a", "b"]

    def test_literals(self):
        (item,) = parse_meta_list('default("hello")')
        (arg,) = item.nested
        assert arg.shape is MetaShape.LITERAL
        assert isinstance(arg.value, Literal)
        assert arg.value.value == "hello"

    def test_negative_number(self):
        (item,) = parse_meta_list("default(-5)")
        assert item.nested[0].value.value == -5

    def test_source_text(self):
        (item,) = parse_meta_list("index(accessor = x,  btree(columns = [x]))")
        assert item.source == "index(accessor = x,  btree(columns = [x]))"


class TestSyntaxErrors:
    def test_unbalanced(self):
        with pytest.raises(AnnotationSyntaxError) as exc_info:
            parse_meta_list("index(btree")
        assert exc_info.value.internal_details

    def test_bad_character(self):
        with pytest.raises(AnnotationSyntaxError) as exc_info:
            parse_meta_list("public $")
        assert "unexpected character `$`" in str(exc_info.value)
        assert exc_info.value.span.column == 8

    def test_hash_is_not_a_comment(self):
        with pytest.raises(AnnotationSyntaxError) as exc_info:
            parse_record("struct S {\n    a#b: u8,\n}")
        assert "unexpected character `#`" in str(exc_info.value)
        assert exc_info.value.span.line == 2

    def test_missing_field_type(self):
        with pytest.raises(AnnotationSyntaxError) as exc_info:
            parse_record("struct S {\n    a,\n}")
        assert exc_info.value.span.line == 2

    def test_wraps_lark_error(self):
        with pytest.raises(AnnotationSyntaxError) as exc_info:
            parse_record("struct")
        assert exc_info.value.wrapped is not None
