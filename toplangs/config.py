"""Environment settings and debug output.

Environment Variables:
  ACCESS_TOKEN (optional) : Personal token. Falls back to GITHUB_TOKEN in Actions.
  DEBUG                   : '1' => print [DEBUG] lines.
  GQL_MAX_RETRIES         : attempts per API call on transient failures. Default 3.
  GQL_RETRY_BACKOFF       : backoff base in seconds (sleep = base ** attempt). Default 1.5.
  HTTP_TIMEOUT            : per-request timeout in seconds. Default 40.
"""

from __future__ import annotations
import os
import sys
from typing import Optional

GRAPHQL_URL = "https://api.github.com/graphql"
REST_URL = "https://api.github.com"
USER_AGENT = "toplangs"

DEFAULT_BRANCH = "main"
DEFAULT_PATH = "top-langs.svg"
DEFAULT_MESSAGE = "Update top languages"

DEBUG = os.environ.get("DEBUG", "0") == "1"
MAX_RETRIES = int(os.environ.get("GQL_MAX_RETRIES", "3"))
RETRY_BACKOFF = float(os.environ.get("GQL_RETRY_BACKOFF", "1.5"))
HTTP_TIMEOUT = float(os.environ.get("HTTP_TIMEOUT", "40"))


def env_token() -> Optional[str]:
    return os.environ.get("ACCESS_TOKEN") or os.environ.get("GITHUB_TOKEN")


def set_debug(enabled: bool):
    global DEBUG
    DEBUG = enabled


def debug(msg: str):
    if DEBUG:
        print(f"[DEBUG] {msg}", file=sys.stderr)


def warn(msg: str):
    print(f"[WARN] {msg}", file=sys.stderr)
