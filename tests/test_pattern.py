import pytest

from commit_checker.errors import InvalidFlagsError, PatternSyntaxError
from commit_checker.pattern import matches, validate_flags


@pytest.mark.parametrize("flags", ["", "g", "gimsuy", "gg", "ysumig"])
def test_validate_flags_accepts_supported(flags):
    validate_flags(flags)


@pytest.mark.parametrize(
    "flags,bad",
    [
        ("abcdefgh", "abcdefh"),
        ("gix", "x"),
        ("xgx", "xx"),
        ("G", "G"),
        ("i m", " "),
    ],
)
def test_validate_flags_reports_bad_chars_in_order(flags, bad):
    with pytest.raises(InvalidFlagsError) as exc:
        validate_flags(flags)
    assert exc.value.bad_chars == bad
    assert str(exc.value) == f'FLAGS contains invalid characters "{bad}".'


def test_matches_searches_anywhere():
    assert matches("fix: thing [ABC-1]", r"\[ABC-\d+\]")
    assert not matches("fix: thing", r"\[ABC-\d+\]")


def test_default_flags_are_multiline():
    # "gm" by default: ^ anchors on every line
    assert matches("WIP\nfeat: body", "^feat")
    assert not matches("WIP\nfeat: body", "^feat", "g")


def test_case_insensitive_flag():
    assert not matches("FEAT: x", "^feat", "g")
    assert matches("FEAT: x", "^feat", "gi")


def test_dotall_flag():
    assert not matches("a\nb", "a.b", "g")
    assert matches("a\nb", "a.b", "s")


def test_sticky_flag_anchors_at_start():
    assert matches("feat: x", "feat", "y")
    assert not matches("x feat", "feat", "y")


def test_malformed_pattern_raises():
    with pytest.raises(PatternSyntaxError):
        matches("anything", "([unclosed", "")
