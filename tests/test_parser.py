"""
Tests for the tree builder and the directive accessors.
"""

import pytest

from scfg import read_scfg
from scfg.errors import ConversionError
from scfg.events import Event
from scfg.parser import Block, Directive, TreeBuilder, build_tree, get, get_all


TRAINS = """\
train "Shinkansen" {
	model "E5" {
   	max-speed 320km/h
    weight 453.5t

    lines-served "Tōhoku" "Hokkaido"
	}

  model "E7" {
    max-speed 275km/h
    weight 540t

    lines-served "Hokuriku" "Jōetsu"
  }
}
"""


def directive(source: str) -> Directive:
    return read_scfg(source)[0]


def test_basic_directive() -> None:
    """Test that 'key value' becomes one blockless directive."""
    block = read_scfg("key value")

    assert len(block) == 1
    assert block[0].name == "key"
    assert block[0].params == ["value"]
    assert block[0].has_block is False
    assert block[0].children == []


def test_empty_document() -> None:
    """Test that empty and comment-only documents give an empty block."""
    assert read_scfg("") == []
    assert read_scfg("# only a comment\n\n") == []


def test_get() -> None:
    """Test first-match lookup on blocks and directives."""
    block = read_scfg(TRAINS)
    assert len(block) == 1

    train = get(block, "train")
    assert train is not None
    assert train.name == "train"
    assert train.params == ["Shinkansen"]
    assert len(train.children) == 2

    model = train.get("model")
    assert model is not None
    assert model.params == ["E5"]
    assert model.get("lines-served").params == ["Tōhoku", "Hokkaido"]


def test_get_no_result() -> None:
    """Test that lookups of missing names return None."""
    block = read_scfg(TRAINS)

    assert block.get("truck") is None
    assert get(block, "truck") is None
    assert block.get("train").get("type") is None


def test_get_all() -> None:
    """Test that get_all returns every match in order."""
    block = read_scfg(TRAINS)
    train = block.get("train")

    models = get_all(train, "model")
    assert [m.params[0] for m in models] == ["E5", "E7"]
    assert train.get_all("model") == models


def test_get_all_empty_result() -> None:
    """Test that get_all returns an empty list for missing names."""
    block = read_scfg(TRAINS)

    assert block.get_all("truck") == []
    trains = get_all(block, "train")
    assert len(trains) == 1
    assert trains[0].get_all("type") == []


def test_line_numbers() -> None:
    """Test that directives remember their source line."""
    train = read_scfg(TRAINS).get("train")
    models = train.get_all("model")

    assert train.line == 1
    assert models[0].line == 2
    assert models[1].line == 9


def test_server_example(server_config: str) -> None:
    """Test reading values out of the server example."""
    config = read_scfg(server_config)
    server = get(config, "server")

    assert server.get("listen").to_int() == 80
    assert server.get("server_name").params == ["example.com", "www.example.com"]

    locations = server.get_all("location")
    assert len(locations) == 2
    assert locations[0].params == ["/"]
    assert locations[0].get("root").to_str() == "/var/www/html"
    assert locations[1].params == ["=", "/robots.txt"]


def test_single_location_lookup() -> None:
    """Test lookups on a server with one location."""
    source = "server {\n    listen 80\n    location / {\n        root /var/www/html\n    }\n}\n"
    server = get(read_scfg(source), "server")

    assert server.get("listen").to_int() == 80
    locations = get_all(server, "location")
    assert len(locations) == 1
    assert locations[0].params == ["/"]


def test_quoted_escape() -> None:
    """Test that an escaped quote ends up in the param."""
    assert directive('key "a\\"b"').params == ['a"b']


def test_empty_block_keeps_has_block() -> None:
    """Test that an empty block still sets has_block."""
    block = read_scfg("a {\n}\nb\n")

    assert block[0].has_block is True
    assert block[0].children == []
    assert block[1].has_block is False


def test_blockless_directives_have_no_children() -> None:
    """Test that only block directives have children."""
    def walk(nodes: list[Directive]):
        for node in nodes:
            yield node
            yield from walk(node.children)

    for node in walk(read_scfg(TRAINS)):
        if not node.has_block:
            assert node.children == []


def test_tree_builder_feed() -> None:
    """Test building a tree one event at a time."""
    builder = TreeBuilder()
    for event in [
        Event.start("a", [], True, 1),
        Event.start("b", ["x"], False, 2),
        Event.end(False),
        Event.end(True),
        Event.start("c", [], False, 3),
        Event.end(False),
    ]:
        builder.feed(event)

    assert [d.name for d in builder.root] == ["a", "c"]
    assert builder.root[0].children == [Directive("b", ["x"], line=2)]


def test_deep_tree_does_not_recurse() -> None:
    """Test that deep trees build without recursion."""
    depth = 900
    events = [Event.start("n", [], True, i + 1) for i in range(depth)]
    events += [Event.end(True) for _ in range(depth)]

    node = build_tree(events)[0]
    for _ in range(depth - 1):
        node = node.children[0]
    assert node.line == depth
    assert node.children == []


def test_block_is_a_list() -> None:
    """Test that blocks are lists of directives."""
    block = read_scfg("a\nb\n")
    assert isinstance(block, Block)
    assert isinstance(block, list)
    assert isinstance(block[0].children, Block)


# Scalar accessors


def test_to_str() -> None:
    """Test reading a single string value."""
    assert directive("key value").to_str() == "value"
    assert directive('key ""').to_str() == ""


@pytest.mark.parametrize("source", ["key", "key value 2"])
def test_to_str_wrong_count(source: str) -> None:
    """Test that to_str needs exactly one param."""
    with pytest.raises(ConversionError, match="Expected exactly one value for key"):
        directive(source).to_str()


def test_to_str_error_is_value_error() -> None:
    """Test that conversion errors are ValueErrors with a line."""
    with pytest.raises(ValueError) as exc_info:
        directive("\n\nkey a b").to_str()
    assert exc_info.value.line == 3


@pytest.mark.parametrize(
    "text, expected",
    [("1", 1), ("10_000", 10000), ("+1", 1), ("-1", -1), ("0", 0)],
)
def test_to_int(text: str, expected: int) -> None:
    """Test integer conversion, including signs and underscores."""
    assert directive(f"key {text}").to_int() == expected


@pytest.mark.parametrize("source", ["key 120km/h", "key", 'key ""', 'key " 1"', "key 1.5"])
def test_to_int_invalid(source: str) -> None:
    """Test that non-integers are rejected."""
    with pytest.raises(ConversionError):
        directive(source).to_int()


def test_to_int_error_message() -> None:
    """Test that the error message cites name and text."""
    with pytest.raises(ConversionError, match="Expected an integer for key got: '120km/h'"):
        directive("key 120km/h").to_int()


def test_to_uint() -> None:
    """Test unsigned integer conversion."""
    assert directive("key 1").to_uint() == 1
    assert directive("key +7").to_uint() == 7


@pytest.mark.parametrize("source", ["key -1", "key -0", "key 120km/h", "key"])
def test_to_uint_invalid(source: str) -> None:
    """Test that negative and malformed values are rejected."""
    with pytest.raises(ConversionError):
        directive(source).to_uint()


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1", 1.0),
        ("+1", 1.0),
        ("-1", -1.0),
        ("1.25", 1.25),
        ("+1.25", 1.25),
        ("-1.25", -1.25),
        ('"+1.25"', 1.25),
        ("'-1.25'", -1.25),
    ],
)
def test_to_float(text: str, expected: float) -> None:
    """Test float conversion of quoted and unquoted values."""
    assert directive(f"key {text}").to_float() == expected


@pytest.mark.parametrize("source", ["key 120km/h", "key", 'key ""'])
def test_to_float_invalid(source: str) -> None:
    """Test that non-numbers are rejected."""
    with pytest.raises(ConversionError, match="Expected"):
        directive(source).to_float()
