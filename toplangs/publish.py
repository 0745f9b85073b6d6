"""Commit a single file to a branch through the Git Data API.

Steps: read branch head -> read its commit (base tree) -> write blob ->
write tree on top of the base tree -> write commit (parent = head) ->
move the branch ref to the new commit.
"""

from __future__ import annotations
import datetime
from typing import Optional
from urllib.parse import quote

from dateutil import parser as dateparser
from dateutil import relativedelta

from .config import debug
from .errors import DataFormatError
from .github import GitHubClient


def rel_age(timestamp: str, now: Optional[datetime.datetime] = None) -> str:
    """Human readable age of an ISO-8601 timestamp, e.g. '2 days, 3 hours ago'."""
    then = dateparser.isoparse(timestamp)
    now = now or datetime.datetime.now(datetime.timezone.utc)
    diff = relativedelta.relativedelta(now, then)
    parts = []
    for unit in ("years", "months", "days", "hours", "minutes"):
        n = getattr(diff, unit)
        if n:
            parts.append(f"{n} {unit[:-1] if n == 1 else unit}")
    return (", ".join(parts[:2]) or "moments") + " ago"


def _sha(data, what: str) -> str:
    sha = data.get("sha") if isinstance(data, dict) else None
    if not isinstance(sha, str) or not sha:
        raise DataFormatError(f"{what} response has no sha", field=f"{what}.sha", value=sha)
    return sha


def commit_file(client: GitHubClient, owner: str, repo: str, branch: str,
                path: str, content: str, message: str) -> str:
    """Write ``content`` to ``path`` on ``branch`` as a new commit; returns its sha."""
    base = f"repos/{owner}/{repo}/git"
    ref = f"heads/{quote(branch, safe='/')}"

    head = client.rest("GET", f"{base}/ref/{ref}")
    head_sha = _sha(head.get("object"), "ref")
    head_commit = client.rest("GET", f"{base}/commits/{head_sha}")
    base_tree = _sha(head_commit.get("tree"), "commit tree")
    committed = (head_commit.get("committer") or {}).get("date")
    if committed:
        print(f"{owner}/{repo}@{branch}: head {head_sha[:7]} committed {rel_age(committed)}")

    blob = client.rest("POST", f"{base}/blobs", {"content": content, "encoding": "utf-8"})
    tree = client.rest("POST", f"{base}/trees", {
        "base_tree": base_tree,
        "tree": [{"path": path, "mode": "100644", "type": "blob", "sha": _sha(blob, "blob")}],
    })
    commit = client.rest("POST", f"{base}/commits", {
        "message": message,
        "tree": _sha(tree, "tree"),
        "parents": [head_sha],
    })
    new_sha = _sha(commit, "commit")
    client.rest("PATCH", f"{base}/refs/{ref}", {"sha": new_sha})
    debug(f"{branch}: {head_sha} -> {new_sha}")
    return new_sha
