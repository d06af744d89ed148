import re

from .errors import InvalidFlagsError, PatternSyntaxError

VALID_FLAGS = "gimsuy"
# Applied when no flags are configured: global + multiline search.
DEFAULT_FLAGS = "gm"

_RE_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "u": re.UNICODE,
}


def validate_flags(flags: str) -> None:
    """Raise InvalidFlagsError carrying every unsupported character, in order."""
    bad = "".join(c for c in flags if c not in VALID_FLAGS)
    if bad:
        raise InvalidFlagsError(bad)


def compile_pattern(pattern: str, flags: str = "") -> "re.Pattern[str]":
    re_flags = 0
    for c in flags or DEFAULT_FLAGS:
        re_flags |= _RE_FLAGS.get(c, 0)
    try:
        return re.compile(pattern, re_flags)
    except re.error as e:
        raise PatternSyntaxError(pattern, str(e)) from e


def matches(message: str, pattern: str, flags: str = "") -> bool:
    """True if the pattern is found anywhere in the message.

    The sticky flag ``y`` anchors the match at the start of the message.
    """
    regex = compile_pattern(pattern, flags)
    if "y" in flags:
        return regex.match(message) is not None
    return regex.search(message) is not None
