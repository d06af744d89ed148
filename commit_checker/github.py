import time
import logging
from typing import Any, Dict, FrozenSet, List, Optional
import httpx

from .config import SETTINGS
from .errors import RemoteFetchError
from .metrics import github_api_requests_total, github_api_latency_seconds
from .models import CommitRecord

logger = logging.getLogger(__name__)

# GitHub caps connection page sizes at 100.
PAGE_SIZE = 100

PULL_REQUEST_COMMITS_QUERY = """
query commitMessages(
  $repositoryOwner: String!
  $repositoryName: String!
  $pullRequestNumber: Int!
  $numberOfCommits: Int = 100
  $cursor: String
) {
  repository(owner: $repositoryOwner, name: $repositoryName) {
    pullRequest(number: $pullRequestNumber) {
      commits(first: $numberOfCommits, after: $cursor) {
        pageInfo {
          hasNextPage
          endCursor
        }
        edges {
          node {
            commit {
              message
              parents {
                totalCount
              }
              author {
                name
                user {
                  login
                }
              }
            }
          }
        }
      }
    }
  }
}
"""

COMMIT_QUERY = """
query commitParents(
  $repositoryOwner: String!
  $repositoryName: String!
  $commitSha: GitObjectID!
) {
  repository(owner: $repositoryOwner, name: $repositoryName) {
    object(oid: $commitSha) {
      ... on Commit {
        message
        parents {
          totalCount
        }
        author {
          name
          user {
            login
          }
        }
      }
    }
  }
}
"""


def _safe_url(url: str) -> str:
    try:
        u = httpx.URL(url)
        # remove query to avoid leaking params
        return str(u.copy_with(query=None))
    except Exception:
        return url.split("?", 1)[0]


def _commit_record(commit: Dict[str, Any]) -> CommitRecord:
    author = commit.get("author") or {}
    return CommitRecord(
        message=commit.get("message") or "",
        parent_count=int((commit.get("parents") or {}).get("totalCount") or 0),
        author_name=author.get("name"),
        author_login=(author.get("user") or {}).get("login"),
    )


class GitHubClient:
    """Blocking GraphQL client authenticated with a personal or workflow token."""

    def __init__(self, token: str, base_url: Optional[str] = None):
        self._token = token
        self.base_url = base_url or SETTINGS.github_graphql_url

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": "commit-message-checker/1.0",
        }

    def graphql(self, query: str, variables: Dict[str, Any], operation: str) -> Dict[str, Any]:
        """Run a GraphQL query and return its ``data`` object.

        Transport failures, non-2xx responses and GraphQL errors all raise
        RemoteFetchError; nothing is retried here.
        """
        url = self.base_url
        endpoint = f"POST /graphql {operation}"
        start = time.perf_counter()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "github.request: method=POST path=%s operation=%s variables=%s",
                _safe_url(url),
                operation,
                sorted(variables.keys()),
            )
        try:
            resp = httpx.post(
                url,
                headers=self._headers(),
                json={"query": query, "variables": variables},
                timeout=SETTINGS.http_timeout_seconds,
            )
        except (httpx.TimeoutException, httpx.TransportError) as e:
            github_api_requests_total.labels(endpoint=endpoint, status="exc").inc()
            raise RemoteFetchError(f"GitHub request failed: {e}") from e
        duration = time.perf_counter() - start
        github_api_latency_seconds.labels(endpoint=endpoint).observe(duration)
        github_api_requests_total.labels(endpoint=endpoint, status=str(resp.status_code)).inc()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "github.response: method=POST path=%s operation=%s status=%s duration_ms=%d rl_remaining=%s",
                _safe_url(url),
                operation,
                resp.status_code,
                int(duration * 1000),
                resp.headers.get("X-RateLimit-Remaining"),
            )

        try:
            payload = resp.json()
        except ValueError:
            payload = {"message": resp.text}
        if not isinstance(payload, dict):
            payload = {"message": str(payload)}
        if resp.status_code >= 300:
            raise RemoteFetchError(
                f"GitHub GraphQL {operation} failed: {resp.status_code} {payload.get('message', '')}".rstrip(),
                status_code=resp.status_code,
                response_data=payload,
            )
        errors = payload.get("errors")
        if errors:
            messages = "; ".join(str(e.get("message", e)) for e in errors)
            raise RemoteFetchError(
                f"GitHub GraphQL {operation} returned errors: {messages}",
                status_code=resp.status_code,
                response_data=payload,
            )
        data = payload.get("data")
        if not isinstance(data, dict):
            raise RemoteFetchError(
                f"GitHub GraphQL {operation} returned no data",
                status_code=resp.status_code,
                response_data=payload,
            )
        return data

    def fetch_pull_request_commits(
        self,
        owner: str,
        repo: str,
        number: int,
        exclude_users: FrozenSet[str] = frozenset(),
    ) -> List[CommitRecord]:
        """List the commits of a pull request, oldest first.

        Commits authored by anyone in exclude_users (matched on author name or
        login) are left out.
        """
        records: List[CommitRecord] = []
        cursor: Optional[str] = None
        while True:
            variables = {
                "repositoryOwner": owner,
                "repositoryName": repo,
                "pullRequestNumber": number,
                "numberOfCommits": PAGE_SIZE,
                "cursor": cursor,
            }
            data = self.graphql(PULL_REQUEST_COMMITS_QUERY, variables, "commitMessages")
            pr = (data.get("repository") or {}).get("pullRequest")
            if not pr:
                raise RemoteFetchError(f"Pull request {owner}/{repo}#{number} not found", response_data=data)
            commits = pr.get("commits") or {}
            for edge in commits.get("edges") or []:
                record = _commit_record(((edge or {}).get("node") or {}).get("commit") or {})
                if record.authored_by_any(exclude_users):
                    logger.debug(
                        "Skipping commit by excluded author name=%s login=%s",
                        record.author_name,
                        record.author_login,
                    )
                    continue
                records.append(record)
            page_info = commits.get("pageInfo") or {}
            if not page_info.get("hasNextPage") or not page_info.get("endCursor"):
                break
            cursor = page_info["endCursor"]
        logger.debug("Fetched %d commits for %s/%s#%s", len(records), owner, repo, number)
        return records

    def fetch_commit(self, owner: str, repo: str, sha: str) -> CommitRecord:
        variables = {"repositoryOwner": owner, "repositoryName": repo, "commitSha": sha}
        data = self.graphql(COMMIT_QUERY, variables, "commitParents")
        obj = (data.get("repository") or {}).get("object")
        if not obj:
            raise RemoteFetchError(f"Commit {sha} not found in {owner}/{repo}", response_data=data)
        return _commit_record(obj)
