from pydantic import BaseModel, ConfigDict, Field
from typing import FrozenSet, List, Optional


class CheckerArguments(BaseModel):
    model_config = ConfigDict(frozen=True)

    pattern: str
    flags: str = ""
    error: str
    messages: List[str] = Field(default_factory=list)


class PullRequestOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    ignore_title: bool = False
    ignore_description: bool = False
    check_all_commits: bool = False
    access_token: Optional[str] = None
    exclude_merge_commits: bool = False
    exclude_users: FrozenSet[str] = frozenset()


class PullRequestPayload(BaseModel):
    title: Optional[str] = None
    body: Optional[str] = None
    number: int
    repository_owner: str
    repository_name: str


class PushCommit(BaseModel):
    id: Optional[str] = None
    message: Optional[str] = None


class PushPayload(BaseModel):
    commits: List[PushCommit] = Field(default_factory=list)
    repository_owner: Optional[str] = None
    repository_name: Optional[str] = None


class CommitRecord(BaseModel):
    message: str = ""
    parent_count: int = 1
    author_name: Optional[str] = None
    author_login: Optional[str] = None

    @property
    def is_merge(self) -> bool:
        return self.parent_count > 1

    def authored_by_any(self, users: FrozenSet[str]) -> bool:
        return bool(users) and (self.author_name in users or self.author_login in users)


class ActionInputs(BaseModel):
    """Per-run inputs read once from the configuration source."""

    model_config = ConfigDict(frozen=True)

    pattern: str
    flags: str = ""
    error: str
    exclude_title: bool = False
    exclude_description: bool = False
    check_all_commit_messages: bool = False
    exclude_merge_commits: bool = False
    access_token: Optional[str] = None
    exclude_users: FrozenSet[str] = frozenset()

    def pull_request_options(self) -> PullRequestOptions:
        return PullRequestOptions(
            ignore_title=self.exclude_title,
            ignore_description=self.exclude_description,
            check_all_commits=self.check_all_commit_messages,
            access_token=self.access_token or None,
            exclude_merge_commits=self.exclude_merge_commits,
            exclude_users=self.exclude_users,
        )
