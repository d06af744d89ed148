import logging

from .errors import ConfigurationError, MatchFailure
from .metrics import checks_total, messages_checked_total
from .models import CheckerArguments
from .pattern import matches, validate_flags

logger = logging.getLogger(__name__)


def check_messages(args: CheckerArguments) -> None:
    """Check every message in args against the pattern.

    All messages are evaluated before deciding; if any of them fails to match,
    MatchFailure is raised with the configured error text.
    """
    if not args.pattern:
        raise ConfigurationError("PATTERN not defined.")
    validate_flags(args.flags)
    if not args.error:
        raise ConfigurationError("ERROR not defined.")
    if not args.messages:
        raise ConfigurationError("MESSAGES not defined.")

    logger.info('Checking commit messages against "%s"...', args.pattern)

    result = True
    for message in args.messages:
        if matches(message, args.pattern, args.flags):
            logger.info('- OK: "%s"', message)
            messages_checked_total.labels(result="ok").inc()
        else:
            logger.info('- failed: "%s"', message)
            messages_checked_total.labels(result="failed").inc()
            result = False

    checks_total.labels(result="passed" if result else "failed").inc()
    if not result:
        raise MatchFailure(args.error)
