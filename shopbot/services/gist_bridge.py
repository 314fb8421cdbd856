from __future__ import annotations

import json
from http.client import HTTPException
from pathlib import Path
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from shopbot.config.settings import (
    GIST_RAW_PREFIX,
    GIST_TIMEOUT_SECONDS,
    GIST_USER_AGENT,
    GITHUB_API_URL,
)


class GistError(Exception):
    pass


class GistConfigError(GistError):
    pass


class GistURLError(GistError):
    pass


def _read_error_body(exc: HTTPError) -> str:
    try:
        return exc.read().decode("utf-8")
    except Exception:
        return "<unable to read response body>"


def _send(req: Request) -> tuple[int, str]:
    """Run one request; every transport or decode failure becomes a GistError.

    HTTPError is left to the caller so each endpoint can word its status error.
    """
    try:
        with urlopen(req, timeout=GIST_TIMEOUT_SECONDS) as resp:
            status = int(resp.status)
            body = resp.read()
    except HTTPError:
        raise
    except URLError as exc:
        raise GistError(f"Network error: {exc.reason}") from exc
    except (OSError, HTTPException) as exc:
        raise GistError(f"Network error: {exc!r}") from exc
    try:
        return status, body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise GistError(f"Response is not valid UTF-8 text: {exc}") from exc


def upload_file(
    path: str | Path,
    *,
    token: str,
    description: str = "Uploaded via bot",
    api_url: str = GITHUB_API_URL,
) -> str:
    """Upload a local file as a private gist and return its browsable URL."""
    if not token:
        raise GistConfigError("GitHub token not found.")

    file_path = Path(path)
    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise GistError(f"Could not read {path}: {exc}") from exc

    payload = {
        "description": description,
        "public": False,
        "files": {file_path.name: {"content": content}},
    }
    req = Request(
        url=api_url,
        method="POST",
        headers={
            "User-Agent": GIST_USER_AGENT,
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "Content-Type": "application/json",
        },
        data=json.dumps(payload).encode("utf-8"),
    )
    try:
        status, raw = _send(req)
    except HTTPError as exc:
        raise GistError(f"GitHub API error: {exc.code} - {_read_error_body(exc)}") from exc

    if status != 201:
        raise GistError(f"GitHub API error: {status} - {raw}")
    try:
        html_url = json.loads(raw)["html_url"]
    except (json.JSONDecodeError, KeyError, TypeError) as exc:
        raise GistError(f"Failed to parse GitHub API response: {exc}") from exc
    print(f"[gist] uploaded {file_path} -> {html_url}")
    return str(html_url)


def fetch_raw(raw_url: str) -> str:
    if not raw_url.startswith(GIST_RAW_PREFIX):
        raise GistURLError(f"Link must start with {GIST_RAW_PREFIX}")
    req = Request(url=raw_url, method="GET", headers={"User-Agent": GIST_USER_AGENT})
    try:
        status, raw = _send(req)
    except HTTPError as exc:
        raise GistError(f"Failed to fetch Gist content: {exc.code}") from exc
    if status != 200:
        raise GistError(f"Failed to fetch Gist content: {status}")
    return raw


def download_file(raw_url: str, path: str | Path, *, overwrite_if_missing: bool) -> Path:
    """Overwrite ``path`` with the raw gist content at ``raw_url``.

    Unless ``overwrite_if_missing`` is set the destination must already exist;
    that check runs before anything is fetched.
    """
    file_path = Path(path)
    if not raw_url.startswith(GIST_RAW_PREFIX):
        raise GistURLError(f"Link must start with {GIST_RAW_PREFIX}")
    if not overwrite_if_missing and not file_path.is_file():
        raise GistError(
            f'The file "{path}" was not found. Use /forcewritefile to forcibly create & write to the file.'
        )

    content = fetch_raw(raw_url)
    try:
        file_path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise GistError(f"Could not write {path}: {exc}") from exc
    print(f"[gist] wrote {file_path} from {raw_url} ({len(content)} chars)")
    return file_path
