"""
Read-only GitHub access: raw file content and the contents REST API.
"""

import re
import logging
from typing import Dict, List, Optional, Sequence, Tuple

import requests

logger = logging.getLogger(__name__)

RAW_BASE_URL = "https://raw.githubusercontent.com"
API_BASE_URL = "https://api.github.com"

# #L10 or #L10-L20 on a blob URL
LINE_RANGE_RE = re.compile(r"#L(\d+)(?:-L(\d+))?$")


class FetchError(RuntimeError):
    """Raised when no candidate URL could be fetched. Keeps every attempt."""

    def __init__(self, message: str, attempts: Optional[List[Tuple[str, str]]] = None):
        super().__init__(message)
        self.attempts = attempts or []


class GitHubClient:
    """Thin requests wrapper over GitHub's raw content host and REST API."""

    def __init__(self, token: Optional[str] = None, timeout: int = 30,
                 user_agent: str = "cosmos-docs-sync",
                 session: Optional[requests.Session] = None):
        """
        Args:
            token: Optional GitHub token, raises the API rate limit
            timeout: Per-request timeout in seconds
            user_agent: User-Agent header sent with every request
            session: Pre-built session, mainly for tests
        """
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})
        if token:
            self.session.headers.update({"Authorization": f"token {token}"})

    @classmethod
    def from_settings(cls, settings) -> "GitHubClient":
        """Build a client from the mintport Settings (token from keyring or GITHUB_TOKEN)."""
        return cls(
            token=settings.github_auth_token(),
            timeout=settings.request_timeout,
            user_agent=settings.user_agent,
        )

    @staticmethod
    def raw_url(repo: str, ref: str, path: str) -> str:
        return f"{RAW_BASE_URL}/{repo}/{ref}/{path.lstrip('/')}"

    @staticmethod
    def blob_to_raw(url: str) -> str:
        """github.com/<repo>/blob/<ref>/<path> -> raw.githubusercontent.com/<repo>/<ref>/<path>"""
        url = url.split("#", 1)[0]
        return url.replace("://github.com/", "://raw.githubusercontent.com/", 1).replace("/blob/", "/", 1)

    def fetch_text(self, url: str) -> str:
        """
        GET url and return the body.

        Raises:
            FetchError: On transport errors or non-2xx responses
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(f"Failed to fetch {url}: {e}", [(url, str(e))]) from e
        if response.status_code >= 400:
            raise FetchError(
                f"Failed to fetch {url}: HTTP {response.status_code}",
                [(url, str(response.status_code))],
            )
        return response.text

    def fetch_raw(self, repo: str, ref: str, path: str) -> str:
        return self.fetch_text(self.raw_url(repo, ref, path))

    def fetch_first(self, repo: str, ref: str, candidates: Sequence[str]) -> Tuple[str, str]:
        """
        Try candidate paths in order and return the first that exists.

        Args:
            repo: owner/name
            ref: Branch, tag or commit
            candidates: Paths tried in order; duplicates are skipped

        Returns:
            (path that worked, file content)

        Raises:
            FetchError: When every candidate fails; the message lists each attempt
        """
        attempts: List[Tuple[str, str]] = []
        seen = set()
        for path in candidates:
            if not path or path in seen:
                continue
            seen.add(path)
            url = self.raw_url(repo, ref, path)
            logger.debug(f"Trying {url}")
            try:
                response = self.session.get(url, timeout=self.timeout)
            except requests.RequestException as e:
                attempts.append((path, str(e)))
                continue
            if not response.ok:
                attempts.append((path, str(response.status_code)))
                continue
            if not response.text.strip():
                attempts.append((path, "empty"))
                continue
            logger.info(f"Fetched {path} from {repo}@{ref}")
            return path, response.text

        tried = "; ".join(f"{path}: {status}" for path, status in attempts)
        raise FetchError(f"Failed to fetch changelog from {repo}. Tried: {tried}", attempts)

    def fetch_reference(self, url: str) -> str:
        """
        Fetch the file behind a GitHub blob URL, honouring #Lstart-Lend ranges.
        """
        content = self.fetch_text(self.blob_to_raw(url))
        match = LINE_RANGE_RE.search(url)
        if match:
            start = int(match.group(1))
            end = int(match.group(2) or start)
            lines = content.split("\n")
            content = "\n".join(lines[start - 1:end])
        return content.strip("\n").rstrip()

    def _api_get(self, path: str) -> requests.Response:
        url = f"{API_BASE_URL}/{path.lstrip('/')}"
        response = self.session.get(
            url,
            headers={"Accept": "application/vnd.github.v3+json"},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response

    def list_contents(self, repo: str, path: str = "", ref: Optional[str] = None) -> List[Dict]:
        """List one directory through the contents API."""
        endpoint = f"repos/{repo}/contents/{path.strip('/')}"
        if ref:
            endpoint += f"?ref={ref}"
        data = self._api_get(endpoint).json()
        if isinstance(data, dict):
            return [data]
        return data

    def list_contents_recursive(self, repo: str, path: str = "", ref: Optional[str] = None) -> List[Dict]:
        """Walk a directory tree through the contents API, files only."""
        files: List[Dict] = []
        for item in self.list_contents(repo, path, ref):
            if item.get("type") == "dir":
                files.extend(self.list_contents_recursive(repo, item["path"], ref))
            elif item.get("type") == "file":
                files.append(item)
        return files

    def latest_release_tag(self, repo: str) -> Optional[str]:
        try:
            data = self._api_get(f"repos/{repo}/releases/latest").json()
        except requests.RequestException as e:
            logger.warning(f"Could not read latest release of {repo}: {e}")
            return None
        return data.get("tag_name")
