"""Command line entry point: fetch language usage, render the SVG, print or commit it."""

from __future__ import annotations
import argparse
import sys
import time
import traceback
from typing import List, Optional

from . import config
from .errors import InvalidConfigError, ToplangsError
from .github import GitHubClient
from .publish import commit_file
from .render import RenderConfig, Theme, render
from .usage import rank


def build_parser() -> argparse.ArgumentParser:
    defaults = RenderConfig()
    parser = argparse.ArgumentParser(
        prog="toplangs",
        description="Render your most used GitHub languages as an SVG bar chart")
    parser.add_argument("--token", help="GitHub token (defaults to ACCESS_TOKEN / GITHUB_TOKEN env var)")
    parser.add_argument("--branch", default=config.DEFAULT_BRANCH, help="Branch to commit to")
    parser.add_argument("--theme", choices=[t.value for t in Theme], default=Theme.DARK.value,
                        help="Colour scheme of the image")
    parser.add_argument("--local", action="store_true", help="Print the SVG instead of committing it")
    parser.add_argument("--repo", help="Target repository OWNER/NAME (defaults to LOGIN/LOGIN)")
    parser.add_argument("--path", default=config.DEFAULT_PATH, help="File path inside the repository")
    parser.add_argument("--message", default=config.DEFAULT_MESSAGE, help="Commit message")
    parser.add_argument("--top", type=int, default=defaults.top_n, help="Number of languages shown")
    parser.add_argument("--ignore", action="append", metavar="LANG",
                        help="Language to leave out (repeatable, default: HTML)")
    parser.add_argument("--width", type=float, default=defaults.width, help="Canvas width")
    parser.add_argument("--font-size", type=float, default=defaults.font_size, help="Font size")
    parser.add_argument("--debug", action="store_true", help="Print debug output and tracebacks")
    return parser


def render_config(args: argparse.Namespace) -> RenderConfig:
    ignored = frozenset(args.ignore) if args.ignore is not None else RenderConfig().ignored
    cfg = RenderConfig(width=args.width, font_size=args.font_size, top_n=args.top,
                       ignored=ignored, theme=Theme(args.theme))
    cfg.validate()
    return cfg


def split_repo(repo: str):
    owner, sep, name = repo.partition("/")
    if not sep or not owner or not name or "/" in name:
        raise InvalidConfigError(f"--repo must look like OWNER/NAME, got {repo!r}", field="repo", value=repo)
    return owner, name


def generate(client: GitHubClient, cfg: RenderConfig) -> str:
    usage = client.get_overall_languages()
    top = rank(usage, cfg.top_n, cfg.ignored)
    config.debug(f"top languages: {top}")
    return render(top, cfg)


def run(args: argparse.Namespace) -> int:
    token = args.token or config.env_token()
    if not token:
        print("ERROR: GitHub token is required. Use --token or set ACCESS_TOKEN/GITHUB_TOKEN.",
              file=sys.stderr)
        return 1
    # stdout carries the SVG in local mode
    out = sys.stderr if args.local else sys.stdout

    cfg = render_config(args)
    if args.repo:
        split_repo(args.repo)
    client = GitHubClient(token)
    print("Collecting language usage...", file=out)
    t0 = time.time()
    svg = generate(client, cfg)

    if args.local:
        sys.stdout.write(svg)
    else:
        if args.repo:
            owner, name = split_repo(args.repo)
        else:
            # profile README repository
            owner = name = client.get_login()
        sha = commit_file(client, owner, name, args.branch, args.path, svg, args.message)
        print(f"Committed {args.path} to {owner}/{name}@{args.branch} ({sha[:7]})", file=out)

    print("Done in {:.2f}s".format(time.time() - t0), file=out)
    print("API query counts:", client.query_counts, file=out)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.debug:
        config.set_debug(True)
    try:
        return run(args)
    except ToplangsError as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.debug:
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
