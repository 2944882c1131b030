import math
from dataclasses import dataclass

import pytest
from webui.escaping import (
	escape_for_script_literal,
	js_number,
	primitive_literal,
	quote,
	quote_js_string,
	serialize_to_script_literal,
)
from webui.values import JsonBlob


@dataclass
class Point:
	x: int
	y: int


class Unprintable:
	def __str__(self) -> str:
		raise RuntimeError("no string form")


class Named:
	def __str__(self) -> str:
		return "named thing"


def test_escape_order():
	assert escape_for_script_literal('a\\b"c\nd\re\tf') == 'a\\\\b\\"c\\nd\\re\\tf'


def test_escape_backslash_first():
	# An escaped quote must not have its backslash escaped again
	assert escape_for_script_literal('"') == '\\"'
	assert escape_for_script_literal("\\n") == "\\\\n"


def test_escape_leaves_other_characters():
	assert escape_for_script_literal("héllo 'world' </b>") == "héllo 'world' </b>"


def test_quote_variants():
	assert quote('Hello "World"\nNew Line') == '"Hello \\"World\\"\\nNew Line"'
	assert quote_js_string("it's") == "'it\\'s'"


@pytest.mark.parametrize(
	"value,expected",
	[
		("hi", '"hi"'),
		(True, "true"),
		(False, "false"),
		(42, "42"),
		(-7, "-7"),
		(3.5, "3.5"),
		(None, "null"),
	],
)
def test_serialize_primitives(value: object, expected: str):
	assert serialize_to_script_literal(value) == expected


def test_bool_is_not_rendered_as_number():
	assert serialize_to_script_literal(True) == "true"
	assert primitive_literal(False) == "false"


def test_non_finite_floats_render_null():
	assert js_number(math.inf) == "null"
	assert js_number(math.nan) == "null"
	assert js_number(True) == "1"
	assert serialize_to_script_literal(-math.inf) == "null"


def test_serialize_structures_compact():
	assert serialize_to_script_literal([1, "a", None, True]) == '[1,"a",null,true]'
	assert serialize_to_script_literal({"a": 1, "b": [2, 3]}) == '{"a":1,"b":[2,3]}'
	assert serialize_to_script_literal((1, 2)) == "[1,2]"


def test_serialize_mapping_keys_are_strings():
	assert serialize_to_script_literal({1: "x"}) == '{"1":"x"}'


def test_serialize_escapes_nested_strings():
	assert serialize_to_script_literal({"q": 'say "hi"'}) == '{"q":"say \\"hi\\""}'


def test_serialize_dataclass_as_object():
	assert serialize_to_script_literal(Point(1, 2)) == '{"x":1,"y":2}'


def test_serialize_json_blob():
	assert serialize_to_script_literal(JsonBlob('{"a": [1, 2]}')) == '{"a":[1,2]}'


def test_invalid_json_blob_renders_null():
	assert serialize_to_script_literal(JsonBlob("{not json")) == "null"


def test_unsupported_nested_values_render_null():
	assert serialize_to_script_literal([1, object()]) == "[1,null]"


def test_cycle_renders_null():
	items: list[object] = [1]
	items.append(items)
	assert serialize_to_script_literal(items) == "[1,null]"


def test_top_level_fallback_to_string_form():
	assert serialize_to_script_literal(Named()) == '"named thing"'


def test_unprintable_value_renders_null():
	assert serialize_to_script_literal(Unprintable()) == "null"


def test_primitive_literal_rejects_structures():
	assert primitive_literal([1]) == "null"
	assert primitive_literal({"a": 1}) == "null"
