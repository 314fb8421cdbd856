from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure project root is importable when running as a standalone script.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from shopbot.config.settings import github_token
from shopbot.services.gist_bridge import GistError, download_file, upload_file


def _build_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Upload a file to a private GitHub Gist or write a file from a Gist raw link.",
    )
    sub = parser.add_subparsers(dest="action", required=True)

    up = sub.add_parser("upload", help="Upload a local file to a private gist.")
    up.add_argument("path", help="Local file to upload.")
    up.add_argument(
        "--token",
        default=github_token(),
        help="GitHub token with the gist scope. Default: GITHUB_TOKEN env.",
    )
    up.add_argument("--description", default="Uploaded via shopbot CLI")

    down = sub.add_parser("download", help="Overwrite a local file from a gist raw link.")
    down.add_argument("url", help="https://gist.githubusercontent.com/... raw link.")
    down.add_argument("path", help="Local file to write.")
    down.add_argument(
        "--force",
        action="store_true",
        help="Create the file if it does not exist yet.",
    )
    return parser.parse_args()


def main() -> int:
    args = _build_args()
    try:
        if args.action == "upload":
            print(upload_file(args.path, token=str(args.token or "").strip(), description=args.description))
        else:
            download_file(args.url, args.path, overwrite_if_missing=args.force)
            print(f'"{args.path}" written successfully')
    except GistError as exc:
        print(f"Operation failed: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
