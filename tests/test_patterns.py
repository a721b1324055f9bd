import re
from pathlib import Path

import pytest

from Dir_Hash.core.errors import DirHashIOError, InvalidPatternError
from Dir_Hash.core.models import HashOptions, ROOT_IGNORE_FILENAME
from Dir_Hash.core.patterns import (
    build_pattern_set,
    compile_patterns,
    glob_to_regex,
    load_pattern_file,
    prepare_pattern,
)


def test_plain_name_matches_whole_path_only():
    matcher = compile_patterns(["b.txt"])

    assert matcher.matches("b.txt")
    assert not matcher.matches("sub/b.txt")


def test_star_crosses_separators():
    matcher = compile_patterns(["*.log"])

    assert matcher.matches("x.log")
    assert matcher.matches("sub/x.log")
    assert matcher.matches("a/b/c.log")
    assert not matcher.matches("x.log.bak")


def test_double_star_matches_any_depth():
    matcher = compile_patterns(["**/*.log"])

    assert matcher.matches("c.log")
    assert matcher.matches("a/b/c.log")
    assert not matcher.matches("a/b/c.txt")


def test_bare_directory_name_does_not_cover_descendants():
    matcher = compile_patterns(["target"])

    assert matcher.matches("target")
    assert not matcher.matches("target/x")


def test_trailing_double_star_covers_descendants():
    matcher = compile_patterns(["logs/**", "a/**/z.txt"])

    assert matcher.matches("logs/2020/app.txt")
    assert not matcher.matches("logs")
    assert matcher.matches("a/z.txt")
    assert matcher.matches("a/b/c/z.txt")
    assert not matcher.matches("src/logs.py")


def test_brace_alternation():
    matcher = compile_patterns(["{a,b}.txt", "src/*.{c,h}"])

    assert matcher.matches("a.txt")
    assert matcher.matches("b.txt")
    assert not matcher.matches("c.txt")
    assert not matcher.matches("{a,b}.txt")
    assert matcher.matches("src/main.c")
    assert matcher.matches("src/main.h")
    assert not matcher.matches("src/main.o")


def test_mixed_pattern_list():
    matcher = compile_patterns(["*.log", "{a,b}.txt", "target"])

    assert matcher.matches("sub/x.log")
    assert matcher.matches("a.txt")
    assert matcher.matches("target")
    assert not matcher.matches("target/keep.rs")


def test_question_mark_and_classes():
    matcher = compile_patterns(["file?.txt", "data[0-9].csv", "img[!a-c].png"])

    assert matcher.matches("file1.txt")
    assert not matcher.matches("file10.txt")
    assert matcher.matches("data7.csv")
    assert not matcher.matches("dataX.csv")
    assert matcher.matches("imgd.png")
    assert not matcher.matches("imgb.png")


def test_regex_characters_are_literal():
    matcher = compile_patterns(["a+b(1).txt"])

    assert matcher.matches("a+b(1).txt")
    assert not matcher.matches("aab1.txt")


def test_backslashes_are_normalized():
    assert prepare_pattern("sub\\*.tmp") == "sub/*.tmp"
    assert compile_patterns(["sub\\*.tmp"]).matches("sub/x.tmp")


def test_glob_to_regex_whole_double_star_matches_everything():
    regex = re.compile(glob_to_regex("**"))

    assert regex.match("a")
    assert regex.match("a/b/c")


def test_negation_is_dropped():
    matcher = compile_patterns(["!a.txt"])

    assert len(matcher) == 0
    assert not matcher.matches("a.txt")


def test_negation_does_not_unignore():
    matcher = compile_patterns(["*.txt", "!keep.txt"])

    assert matcher.matches("keep.txt")


def test_empty_pattern_set_matches_nothing():
    matcher = compile_patterns([])

    assert not matcher.matches("anything")


def test_unclosed_class_is_invalid():
    with pytest.raises(InvalidPatternError) as info:
        compile_patterns(["ok.txt", "src/[abc"])

    assert info.value.pattern == "src/[abc"
    assert info.value.source == "inline"
    assert "src/[abc" in str(info.value)


def test_invalid_pattern_is_value_error():
    with pytest.raises(ValueError):
        compile_patterns(["[oops"])


@pytest.mark.parametrize(
    "pattern",
    ["[z-a]", "{a,b", "{a,{b,c}}", "a}"],
)
def test_malformed_globs_are_invalid(pattern):
    with pytest.raises(InvalidPatternError) as info:
        compile_patterns([pattern])

    assert info.value.pattern == pattern


def test_load_pattern_file_skips_comments_and_blanks(tmp_path: Path):
    f = tmp_path / "ignore"
    f.write_text("# comment\n\n*.log\n  build/  \n!keep\n")

    patterns = load_pattern_file(f)

    assert [p for p, _ in patterns] == ["*.log", "build/", "!keep"]
    assert patterns[0][1] == f"{f}:3"


def test_invalid_pattern_in_file_reports_line(tmp_path: Path):
    f = tmp_path / "ignore"
    f.write_text("*.log\nbad[\n")

    with pytest.raises(InvalidPatternError) as info:
        compile_patterns(load_pattern_file(f))

    assert info.value.source == f"{f}:2"


def test_build_pattern_set_uses_all_sources(tmp_path: Path, warnings_sink):
    root = tmp_path / "root"
    root.mkdir()
    (root / ROOT_IGNORE_FILENAME).write_text("from_dotfile.txt\n")
    extra = tmp_path / "extra_ignore"
    extra.write_text("from_file.txt\n")

    options = HashOptions(
        ignore_patterns=("inline.txt",),
        ignore_files=(extra,),
    )
    matcher = build_pattern_set(root, options, on_warning=warnings_sink)

    assert matcher.matches("from_dotfile.txt")
    assert matcher.matches("from_file.txt")
    assert matcher.matches("inline.txt")
    assert warnings_sink.messages == []


def test_root_ignore_file_can_be_disabled(tmp_path: Path):
    (tmp_path / ROOT_IGNORE_FILENAME).write_text("secret.txt\n")

    matcher = build_pattern_set(tmp_path, HashOptions(load_root_ignore_file=False))

    assert not matcher.matches("secret.txt")


def test_missing_ignore_file_is_skipped_with_warning(tmp_path: Path, warnings_sink):
    missing = tmp_path / "nope"

    matcher = build_pattern_set(
        tmp_path,
        HashOptions(ignore_files=(missing,)),
        on_warning=warnings_sink,
    )

    assert len(matcher) == 0
    assert len(warnings_sink.messages) == 1
    assert "nope" in warnings_sink.messages[0]


def test_unreadable_ignore_file_raises(tmp_path: Path, monkeypatch):
    f = tmp_path / "ignore"
    f.write_text("*.log\n")

    def broken_read_text(self, *args, **kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr(Path, "read_text", broken_read_text)

    with pytest.raises(DirHashIOError):
        load_pattern_file(f)
