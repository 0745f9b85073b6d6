"""Authenticated access to the GitHub GraphQL and REST APIs."""

from __future__ import annotations
import time
from typing import Any, Dict, List, Optional

import requests

from . import config
from .config import debug, warn
from .errors import ApiError, DataFormatError
from .usage import LanguageUsage, RankedEntry, aggregate

PAGE_LIMIT = 100  # GitHub's maximum for `first`

LOGIN_QUERY = """
query {
  viewer { login }
}"""

REPO_COUNT_QUERY = """
query {
  viewer {
    repositories(ownerAffiliations: OWNER) { totalCount }
  }
}"""

LANGS_QUERY = """
query($count: Int!, $cursor: String){
  viewer {
    repositories(first: $count, after: $cursor, ownerAffiliations: OWNER) {
      nodes {
        languages(first: 100) {
          edges {
            size
            node { name }
          }
        }
      }
      pageInfo { endCursor hasNextPage }
    }
  }
}"""


def _dig(data: Any, path: str) -> Any:
    """Follow a dotted key path through nested dicts, failing with the path that broke."""
    node = data
    walked = []
    for key in path.split("."):
        walked.append(key)
        if not isinstance(node, dict) or key not in node:
            raise DataFormatError(f"response is missing '{'.'.join(walked)}'", field=".".join(walked))
        node = node[key]
    return node


def _decode(r: requests.Response, tag: str) -> Dict[str, Any]:
    try:
        data = r.json()
    except ValueError as e:
        raise ApiError(f"{tag}: response is not JSON: {r.text[:300]}", status=r.status_code) from e
    if not isinstance(data, dict):
        raise DataFormatError(f"{tag}: expected a JSON object, got {type(data).__name__}",
                              field="body", value=data)
    return data


def parse_language_records(data: Dict[str, Any]) -> List[List[RankedEntry]]:
    """Turn one page of LANGS_QUERY output into per-repository (language, size) records."""
    nodes = _dig(data, "data.viewer.repositories.nodes")
    if not isinstance(nodes, list):
        raise DataFormatError("'repositories.nodes' is not a list", field="nodes", value=nodes)
    records = []
    for i, repo in enumerate(nodes):
        edges = _dig(repo, "languages.edges")
        if not isinstance(edges, list):
            raise DataFormatError(f"repository #{i}: 'languages.edges' is not a list",
                                  field="languages.edges", value=edges)
        record = []
        for edge in edges:
            name = _dig(edge, "node.name")
            size = _dig(edge, "size")
            if not isinstance(name, str):
                raise DataFormatError(f"repository #{i}: language name {name!r} is not text",
                                      field="node.name", value=name)
            if isinstance(size, bool) or not isinstance(size, int):
                raise DataFormatError(f"repository #{i}: size of {name} is not an integer ({size!r})",
                                      field="size", value=size)
            record.append((name, size))
        records.append(record)
    return records


class GitHubClient:
    def __init__(self, token: str, session: Optional[requests.Session] = None):
        self.token = token
        self.http = session or requests
        self.headers = {
            "Authorization": f"bearer {token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": config.USER_AGENT,
        }
        self.query_counts: Dict[str, int] = {}

    def _count(self, tag: str):
        self.query_counts[tag] = self.query_counts.get(tag, 0) + 1

    def _backoff(self, tag: str, attempt: int, reason: str):
        debug(f"{tag}: {reason}, retry {attempt}")
        time.sleep(config.RETRY_BACKOFF ** attempt)

    def gql(self, query: str, variables: Dict[str, Any], tag: str) -> Dict[str, Any]:
        self._count(tag)
        for attempt in range(1, config.MAX_RETRIES + 1):
            last = attempt == config.MAX_RETRIES
            try:
                r = self.http.post(
                    config.GRAPHQL_URL,
                    json={"query": query, "variables": variables},
                    headers=self.headers,
                    timeout=config.HTTP_TIMEOUT,
                )
            except (requests.Timeout, requests.ConnectionError) as e:
                if last:
                    raise ApiError(f"{tag}: network error: {e}") from e
                self._backoff(tag, attempt, f"network error {e}")
                continue
            if r.status_code == 502 and not last:
                self._backoff(tag, attempt, "502 Bad Gateway")
                continue
            if r.status_code != 200:
                raise ApiError(f"{tag} failed: {r.status_code} {r.text[:300]}", status=r.status_code)
            data = _decode(r, tag)
            if data.get("errors"):
                messages = " | ".join(
                    str(e.get("message", "")) if isinstance(e, dict) else str(e) for e in data["errors"])
                if "rate limit" in messages.lower() and not last:
                    self._backoff(tag, attempt, "rate limit encountered")
                    continue
                raise ApiError(f"{tag} GraphQL errors: {messages}", status=r.status_code)
            return data
        raise ApiError(f"{tag} failed after {config.MAX_RETRIES} attempts")

    def rest(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        tag = f"{method} {path}"
        self._count("rest")
        url = f"{config.REST_URL}/{path.lstrip('/')}"
        try:
            r = self.http.request(method, url, json=payload, headers=self.headers,
                                  timeout=config.HTTP_TIMEOUT)
        except (requests.Timeout, requests.ConnectionError) as e:
            raise ApiError(f"{tag}: network error: {e}") from e
        if not 200 <= r.status_code < 300:
            raise ApiError(f"{tag} failed: {r.status_code} {r.text[:300]}", status=r.status_code)
        debug(f"{tag}: {r.status_code}")
        return _decode(r, tag)

    def get_login(self) -> str:
        data = self.gql(LOGIN_QUERY, {}, "login")
        login = _dig(data, "data.viewer.login")
        if not isinstance(login, str) or not login:
            raise DataFormatError(f"invalid viewer login {login!r}", field="viewer.login", value=login)
        return login

    def get_repo_count(self) -> int:
        data = self.gql(REPO_COUNT_QUERY, {}, "repo_count")
        count = _dig(data, "data.viewer.repositories.totalCount")
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise DataFormatError(f"invalid repo count {count!r}", field="totalCount", value=count)
        return count

    def get_repo_languages(self, count: int) -> List[List[RankedEntry]]:
        """Language records for the viewer's first ``count`` owned repositories.

        ``count`` comes from get_repo_count(). Repositories created or deleted
        between the two calls are not reconciled; a mismatch is only reported.
        """
        if count == 0:
            return []
        records: List[List[RankedEntry]] = []
        cursor = None
        while len(records) < count:
            page_size = min(count - len(records), PAGE_LIMIT)
            data = self.gql(LANGS_QUERY, {"count": page_size, "cursor": cursor}, "languages")
            records.extend(parse_language_records(data))
            page_info = _dig(data, "data.viewer.repositories.pageInfo")
            if not isinstance(page_info, dict):
                raise DataFormatError("'repositories.pageInfo' is not an object", field="pageInfo", value=page_info)
            if not page_info.get("hasNextPage"):
                break
            cursor = page_info.get("endCursor")
        if len(records) != count:
            warn(f"expected {count} repositories, language query returned {len(records)}")
        debug(f"languages: {len(records)} repository records")
        return records[:count]

    def get_overall_languages(self) -> LanguageUsage:
        return aggregate(self.get_repo_languages(self.get_repo_count()))
