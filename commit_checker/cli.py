import logging
import sys
from typing import Mapping, Optional

from .checker import check_messages
from .config import SETTINGS
from .errors import CheckerError
from .inputs import get_inputs, read_event, read_inputs
from .metrics import write_metrics

logger = logging.getLogger(__name__)


def set_failed(message: str) -> None:
    logger.error(message)
    # Workflow command so the runner annotates the job
    print(f"::error::{message}", flush=True)


def _check(env: Optional[Mapping[str, str]]) -> None:
    inputs = read_inputs(env)
    event_name, payload = read_event(env)
    args = get_inputs(inputs, event_name, payload)
    if not args.messages:
        logger.info("No commits found in the payload, skipping check.")
    else:
        check_messages(args)


def run(env: Optional[Mapping[str, str]] = None) -> int:
    """Collect and check the messages of the triggering event; return the exit code."""
    code = 0
    try:
        _check(env)
    except CheckerError as e:
        set_failed(str(e))
        code = 1
    except Exception as e:
        logger.exception("Unexpected error while checking messages")
        set_failed(str(e) or e.__class__.__name__)
        code = 1
    if SETTINGS.metrics_textfile:
        write_metrics(SETTINGS.metrics_textfile)
    return code


def main() -> None:
    logging.basicConfig(level=SETTINGS.log_level.upper(), format="%(message)s")
    sys.exit(run())


if __name__ == "__main__":
    main()
