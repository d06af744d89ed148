import json
import os
import logging
import re
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from .collector import collect_messages
from .config import get_input
from .errors import InputRequiredError, InvalidPayload
from .github import GitHubClient
from .models import ActionInputs, CheckerArguments

logger = logging.getLogger(__name__)


def _required(name: str, env: Optional[Mapping[str, str]]) -> str:
    value = get_input(name, env)
    if not value:
        raise InputRequiredError(name)
    return value


def _boolean(name: str, env: Optional[Mapping[str, str]]) -> bool:
    return get_input(name, env) == "true"


def parse_user_list(raw: str) -> FrozenSet[str]:
    """Split a comma and/or newline separated list, dropping blanks."""
    return frozenset(u.strip() for u in re.split(r"[,\n]", raw) if u.strip())


def read_inputs(env: Optional[Mapping[str, str]] = None) -> ActionInputs:
    return ActionInputs(
        pattern=_required("pattern", env),
        flags=get_input("flags", env),
        error=_required("error", env),
        exclude_title=_boolean("excludeTitle", env),
        exclude_description=_boolean("excludeDescription", env),
        check_all_commit_messages=_boolean("checkAllCommitMessages", env),
        exclude_merge_commits=_boolean("excludeMergeCommits", env),
        access_token=get_input("accessToken", env) or None,
        exclude_users=parse_user_list(get_input("excludeUsers", env)),
    )


def read_event(env: Optional[Mapping[str, str]] = None) -> Tuple[Optional[str], Optional[Dict[str, Any]]]:
    """Return the triggering event name and its JSON payload, if any."""
    env = os.environ if env is None else env
    event_name = env.get("GITHUB_EVENT_NAME") or None
    path = env.get("GITHUB_EVENT_PATH")
    payload: Optional[Dict[str, Any]] = None
    if path and os.path.isfile(path):
        with open(path, "r", encoding="utf-8") as f:
            try:
                payload = json.load(f)
            except ValueError as e:
                raise InvalidPayload(f"{path} is not valid JSON: {e}") from e
    elif path:
        logger.debug("GITHUB_EVENT_PATH %s does not exist; no payload", path)
    return event_name, payload


def get_inputs(
    inputs: ActionInputs,
    event_name: Optional[str],
    payload: Optional[Dict[str, Any]],
    client: Optional[GitHubClient] = None,
) -> CheckerArguments:
    """Build the checker arguments from the inputs and the trigger event."""
    messages = collect_messages(event_name, payload, inputs.pull_request_options(), client)
    return CheckerArguments(
        pattern=inputs.pattern,
        flags=inputs.flags,
        error=inputs.error,
        messages=messages,
    )
