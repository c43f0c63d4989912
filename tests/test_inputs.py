from __future__ import annotations

from pathlib import Path

from splash_inputs import clean_local_splashes, load_splashes_from_file, parse_splash_lines


def test_parse_splash_lines_drops_comments_and_blanks():
    assert parse_splash_lines("A\n#comment\n\nB\n") == ("A", "B")


def test_parse_splash_lines_mixed_newlines_and_whitespace():
    text = "  first  \r\nsecond\rthird\n   \n  # indented comment\nnot # a comment"
    assert parse_splash_lines(text) == ("first", "second", "third", "not # a comment")


def test_clean_local_splashes_ignores_non_strings():
    values = [" Hello ", "", "   ", "# note", 42, None, "World"]
    assert clean_local_splashes(values) == ("Hello", "World")


def test_load_splashes_from_file(tmp_path: Path):
    path = tmp_path / "splashes.txt"
    path.write_text("\ufeffOne\n# skip\nTwo\n", encoding="utf-8")
    assert load_splashes_from_file(path) == ("One", "Two")
