from dataclasses import dataclass

from webui.values import MISSING, JsonBlob, is_primitive, to_plain, to_state_value


@dataclass
class Point:
	x: int
	y: int


class Model:
	def model_dump(self) -> dict[str, object]:
		return {"kind": "model"}


def test_missing_sentinel():
	assert not MISSING
	assert repr(MISSING) == "MISSING"


def test_is_primitive():
	for value in (None, True, 1, 1.5, "s"):
		assert is_primitive(value)
	assert not is_primitive([1])
	assert not is_primitive(Point(1, 2))


def test_json_blob():
	blob = JsonBlob.encode({"a": [1, 2]})
	assert blob.text == '{"a":[1,2]}'
	assert blob.decode() == {"a": [1, 2]}


def test_to_state_value_normalizes_containers():
	assert to_state_value((1, (2, 3))) == [1, [2, 3]]
	assert to_state_value({1: {"b": (1,)}}) == {"1": {"b": [1]}}


def test_to_state_value_encodes_structured_values():
	assert to_state_value(Point(1, 2)) == JsonBlob('{"x":1,"y":2}')
	assert to_state_value(Model()) == JsonBlob('{"kind":"model"}')


def test_to_state_value_keeps_unknown_values():
	marker = object()
	assert to_state_value(marker) is marker


def test_to_plain():
	assert to_plain(JsonBlob('{"a":1}')) == {"a": 1}
	assert to_plain({"p": Point(1, 2), "t": (1, 2)}) == {"p": {"x": 1, "y": 2}, "t": [1, 2]}
	assert to_plain("text") == "text"
