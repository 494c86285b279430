"""
Tests for canonical serialization, including the golden documents.
"""

import io
from pathlib import Path

import pytest

from scfg import load_scfg, read_scfg, scan_file
from scfg.errors import ScfgError
from scfg.events import parse_scfg
from scfg.writer import dump, dump_events, dumps, iter_events, quote


DATA_DIR = Path(__file__).parent / "data"
VALID = sorted((DATA_DIR / "valid").glob("*.scfg"))
INVALID = sorted((DATA_DIR / "invalid").glob("*.scfg"))


def expected_text(path: Path) -> str:
    return (DATA_DIR / "expected" / path.name).read_text(encoding="utf-8")


@pytest.mark.parametrize("path", VALID, ids=lambda p: p.name)
def test_valid_tree_mode(path: Path) -> None:
    """Test golden output built from the tree."""
    assert dumps(load_scfg(path)) == expected_text(path)


@pytest.mark.parametrize("path", VALID, ids=lambda p: p.name)
def test_valid_streaming_mode(path: Path) -> None:
    """Test golden output built from the event stream."""
    output = "".join(f"{line}\n" for line in dump_events(scan_file(path)))
    assert output == expected_text(path)


@pytest.mark.parametrize("path", VALID, ids=lambda p: p.name)
def test_canonical_form_is_idempotent(path: Path) -> None:
    """Test that canonical text canonicalizes to itself."""
    canonical = expected_text(path)
    assert dumps(read_scfg(canonical)) == canonical


@pytest.mark.parametrize("path", INVALID, ids=lambda p: p.name)
def test_invalid_documents(path: Path) -> None:
    """Test that invalid documents fail in both modes."""
    with pytest.raises(ScfgError):
        load_scfg(path)
    with pytest.raises(ScfgError):
        list(scan_file(path))


def test_golden_files_present() -> None:
    """Test that the golden documents were found."""
    assert len(VALID) >= 4
    assert len(INVALID) >= 8


@pytest.mark.parametrize("path", VALID, ids=lambda p: p.name)
def test_tree_and_stream_are_isomorphic(path: Path) -> None:
    """Test that walking the tree gives the scanner's events."""
    streamed = list(scan_file(path))
    walked = list(iter_events(load_scfg(path)))
    assert walked == streamed


def test_quote() -> None:
    """Test canonical quoting and escaping."""
    assert quote("plain") == '"plain"'
    assert quote('a"b') == '"a\\"b"'
    assert quote("back\\slash") == '"back\\\\slash"'
    assert quote("") == '""'


@pytest.mark.parametrize(
    "word, expected",
    [
        ("plain", "plain"),
        ("/var/www", "/var/www"),
        ("two words", '"two words"'),
        ("", '""'),
        ("{", '"{"'),
        ("#tag", '"#tag"'),
        ("it's", '"it\'s"'),
    ],
)
def test_quote_when_needed(word: str, expected: str) -> None:
    """Test minimal quoting."""
    assert quote(word, always=False) == expected


def test_bare_output_reads_back() -> None:
    """Test that minimally quoted output parses to the same tree."""
    source = 'a "two words" "" "{" x\\\\y\nb {\n    c "#tag"\n}\n'
    bare = "".join(f"{line}\n" for line in dump_events(parse_scfg(source), quote_all=False))

    assert read_scfg(bare) == read_scfg(source)


def test_custom_indent() -> None:
    """Test a custom indent string."""
    block = read_scfg("a {\n  b {\n    c\n  }\n}\n")
    assert dumps(block, indent="\t") == '"a" {\n\t"b" {\n\t\t"c"\n\t}\n}\n'


def test_empty_block_is_written_without_braces() -> None:
    """Test that empty blocks lose their braces."""
    assert dumps(read_scfg("a {\n}\nb x {\n}\n")) == '"a"\n"b" "x"\n'


def test_dump_to_file() -> None:
    """Test writing to an open file."""
    fp = io.StringIO()
    dump(read_scfg("key value\n"), fp)
    assert fp.getvalue() == '"key" "value"\n'


def test_empty_document() -> None:
    """Test that an empty document serializes to nothing."""
    assert dumps(read_scfg("")) == ""
