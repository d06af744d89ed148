import logging
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import (
    InvalidPayload,
    MissingToken,
    NoNumber,
    NoPayload,
    NoPullRequest,
    NoRepository,
    NoRepositoryName,
    NoRepositoryOwner,
    NoTitle,
    UnsupportedEvent,
)
from .github import GitHubClient
from .metrics import commits_excluded_total, messages_collected_total
from .models import PullRequestOptions, PullRequestPayload, PushCommit, PushPayload

logger = logging.getLogger(__name__)

PULL_REQUEST_EVENTS = ("pull_request", "pull_request_target")
PUSH_EVENTS = ("push",)

M = TypeVar("M", bound=BaseModel)


def parse_repository(payload: Dict[str, Any]) -> Tuple[str, str]:
    """Return (owner, name) of the payload's repository."""
    repo = payload.get("repository")
    if not repo:
        raise NoRepository()
    if not isinstance(repo, dict):
        raise InvalidPayload("repository must be an object")
    name = repo.get("name")
    if not name:
        raise NoRepositoryName()
    owner_obj = repo.get("owner") or {}
    if not isinstance(owner_obj, dict):
        raise InvalidPayload("repository.owner must be an object")
    owner = owner_obj.get("login") or owner_obj.get("name")
    if not owner:
        raise NoRepositoryOwner()
    return owner, name


def _build(model: Type[M], **fields: Any) -> M:
    try:
        return model(**fields)
    except ValidationError as e:
        raise InvalidPayload(str(e)) from e


def parse_pull_request(payload: Dict[str, Any]) -> PullRequestPayload:
    pr = payload.get("pull_request") or {}
    number = pr.get("number")
    if not number:
        raise NoNumber()
    owner, name = parse_repository(payload)
    return _build(
        PullRequestPayload,
        title=pr.get("title"),
        body=pr.get("body"),
        number=number,
        repository_owner=owner,
        repository_name=name,
    )


def parse_push(payload: Dict[str, Any], require_repository: bool = False) -> PushPayload:
    raw = payload.get("commits") or []
    if not isinstance(raw, list):
        raise InvalidPayload("commits must be a list")
    commits = [
        _build(PushCommit, id=c.get("id"), message=c.get("message"))
        for c in raw
        if isinstance(c, dict)
    ]
    if not require_repository:
        return PushPayload(commits=commits)
    owner, name = parse_repository(payload)
    return _build(PushPayload, commits=commits, repository_owner=owner, repository_name=name)


def _client(options: PullRequestOptions, client: Optional[GitHubClient]) -> GitHubClient:
    return client if client is not None else GitHubClient(options.access_token or "")


def collect_pull_request_messages(
    payload: Optional[Dict[str, Any]],
    options: PullRequestOptions,
    client: Optional[GitHubClient] = None,
) -> List[str]:
    if not payload:
        raise NoPayload()
    if not isinstance(payload, dict):
        raise InvalidPayload("payload must be an object")
    pr = payload.get("pull_request")
    if not pr:
        raise NoPullRequest()
    if not isinstance(pr, dict):
        raise InvalidPayload("pull_request must be an object")
    title, body = pr.get("title"), pr.get("body")
    for field, value in (("title", title), ("body", body)):
        if value is not None and not isinstance(value, str):
            raise InvalidPayload(f"pull_request.{field} must be a string")

    messages: List[str] = []
    message = ""
    if not options.ignore_title:
        if not title:
            raise NoTitle()
        message = title
    if body and not options.ignore_description:
        message = f"{message}\n\n{body}" if message else body
    if message:
        messages.append(message)

    if options.check_all_commits:
        if not options.access_token:
            raise MissingToken("checkAllCommitMessages")
        parsed = parse_pull_request(payload)
        gh = _client(options, client)
        records = gh.fetch_pull_request_commits(
            parsed.repository_owner,
            parsed.repository_name,
            parsed.number,
            options.exclude_users,
        )
        for record in records:
            if options.exclude_merge_commits and record.is_merge:
                logger.debug("Excluding merge commit: %s", record.message.partition("\n")[0])
                commits_excluded_total.labels(reason="merge").inc()
                continue
            if record.message:
                messages.append(record.message)
    elif options.exclude_merge_commits:
        # Pull request commits are only known once fetched
        logger.warning("excludeMergeCommits has no effect on pull requests without checkAllCommitMessages")
    return messages


def collect_push_messages(
    payload: Optional[Dict[str, Any]],
    options: PullRequestOptions,
    client: Optional[GitHubClient] = None,
) -> List[str]:
    if not payload:
        raise NoPayload()
    if not isinstance(payload, dict):
        raise InvalidPayload("payload must be an object")
    if not payload.get("commits"):
        # e.g. tag pushes or branch deletions
        return []

    push = parse_push(payload)
    commits = [c for c in push.commits if c.message]
    if options.exclude_merge_commits and commits:
        if not options.access_token:
            raise MissingToken("excludeMergeCommits")
        push = parse_push(payload, require_repository=True)
        gh = _client(options, client)
        kept = []
        for commit in commits:
            if not commit.id:
                kept.append(commit)
                continue
            record = gh.fetch_commit(push.repository_owner, push.repository_name, commit.id)
            if record.is_merge:
                logger.debug("Excluding merge commit %s", commit.id)
                commits_excluded_total.labels(reason="merge").inc()
                continue
            kept.append(commit)
        commits = kept
    return [c.message for c in commits]


def collect_messages(
    event_name: Optional[str],
    payload: Optional[Dict[str, Any]],
    options: Optional[PullRequestOptions] = None,
    client: Optional[GitHubClient] = None,
) -> List[str]:
    """Gather the messages to check for a trigger event.

    Pull requests yield their title and description as one message, followed
    by every commit message when all commits are checked. Pushes yield the
    message of each pushed commit in order.
    """
    options = options or PullRequestOptions()
    if event_name in PULL_REQUEST_EVENTS:
        messages = collect_pull_request_messages(payload, options, client)
    elif event_name in PUSH_EVENTS:
        messages = collect_push_messages(payload, options, client)
    else:
        raise UnsupportedEvent(event_name)
    messages_collected_total.labels(event=event_name).inc(len(messages))
    logger.debug("Collected %d messages for event=%s", len(messages), event_name)
    return messages
