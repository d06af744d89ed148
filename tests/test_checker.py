import logging

import pytest

from commit_checker.checker import check_messages
from commit_checker.errors import ConfigurationError, InvalidFlagsError, MatchFailure, PatternSyntaxError
from commit_checker.models import CheckerArguments


def args(**overrides):
    base = {"pattern": "some-pattern", "flags": "", "error": "some-error", "messages": ["some-message"]}
    base.update(overrides)
    return CheckerArguments(**base)


def test_requires_pattern():
    with pytest.raises(ConfigurationError, match="PATTERN not defined."):
        check_messages(args(pattern=""))


def test_requires_valid_flags():
    with pytest.raises(InvalidFlagsError, match='FLAGS contains invalid characters "abcdefh".'):
        check_messages(args(flags="abcdefgh"))


def test_pattern_checked_before_flags():
    with pytest.raises(ConfigurationError, match="PATTERN not defined."):
        check_messages(args(pattern="", flags="xyz"))


def test_requires_error():
    with pytest.raises(ConfigurationError, match="ERROR not defined."):
        check_messages(args(error=""))


def test_requires_messages():
    with pytest.raises(ConfigurationError, match="MESSAGES not defined."):
        check_messages(args(messages=[]))


def test_fails_with_configured_error():
    with pytest.raises(MatchFailure) as exc:
        check_messages(args())
    assert str(exc.value) == "some-error"
    assert exc.value.error == "some-error"


def test_succeeds_for_match_all():
    check_messages(args(pattern=".*", messages=["one", "two", ""]))


def test_any_failure_fails_whole_check(caplog):
    caplog.set_level(logging.INFO, logger="commit_checker.checker")
    with pytest.raises(MatchFailure):
        check_messages(args(pattern="^a$", messages=["a", "b"]))
    # Every message is evaluated, no fail-fast
    assert '- OK: "a"' in caplog.text
    assert '- failed: "b"' in caplog.text


def test_logs_header_and_ok_lines(caplog):
    caplog.set_level(logging.INFO, logger="commit_checker.checker")
    check_messages(args(pattern="some", messages=["some-message"]))
    assert 'Checking commit messages against "some"...' in caplog.text
    assert '- OK: "some-message"' in caplog.text


def test_malformed_pattern_propagates():
    with pytest.raises(PatternSyntaxError):
        check_messages(args(pattern="(", messages=["x"]))


def test_repeated_runs_are_idempotent():
    a = args(pattern="^feat", messages=["feat: a"])
    check_messages(a)
    check_messages(a)
