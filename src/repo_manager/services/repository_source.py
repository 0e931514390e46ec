"""Repository listing strategies: GitHub REST API and GitHub CLI."""

import json
import logging
from typing import Any

import requests

from .. import __version__
from ..models.config import REPOSITORY_SOURCES, AppConfig
from ..models.repository import RepositoryEntry
from ..utils.exceptions import (
    ConfigurationError,
    NetworkError,
    RepositorySourceError,
    ValidationError,
)
from .base import RepositorySource
from .process_runner import ProcessRunner

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
USER_AGENT = f"RepoManager/{__version__}"
REST_PAGE_SIZE = 100
CLI_REPOSITORY_LIMIT = 200


def _require_username(username: str) -> str:
    username = (username or "").strip()
    if not username:
        raise ValidationError("Username required", field="username")
    return username


def parse_repository_payload(data: Any, url_key: str) -> list[RepositoryEntry]:
    """
    Extract repository entries from a decoded JSON listing.

    Args:
        data: Decoded JSON document, expected to be an array of objects
        url_key: Field holding the clone URL (``ssh_url`` or ``sshUrl``)

    Returns:
        List[RepositoryEntry]: Entries in input order

    Raises:
        RepositorySourceError: If the payload is not a JSON array
    """
    if not isinstance(data, list):
        raise RepositorySourceError(
            f"Unexpected API JSON: expected an array, got {type(data).__name__}",
            user_message="Unexpected API JSON",
        )

    entries = []
    for item in data:
        if not isinstance(item, dict) or not item.get("name"):
            logger.debug(f"Skipping repository element without a name: {item!r}")
            continue
        entries.append(
            RepositoryEntry(name=str(item["name"]), clone_url=str(item.get(url_key) or ""))
        )
    return entries


class RestRepositorySource(RepositorySource):
    """Lists repositories through ``GET /users/{username}/repos``."""

    name = "rest"

    def __init__(
        self,
        token: str = "",
        timeout: int = 30,
        base_url: str = GITHUB_API_URL,
        session: requests.Session | None = None,
    ):
        """
        Initialize the REST source.

        Args:
            token: Optional personal access token sent as ``Authorization``
            timeout: Request timeout in seconds
            base_url: GitHub API base URL
            session: Optional session, mainly for connection reuse
        """
        self.token = token
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self._http = session or requests

    def _headers(self) -> dict[str, str]:
        headers = {
            "User-Agent": USER_AGENT,
            "Accept": "application/vnd.github+json",
        }
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def list_repositories(self, username: str) -> list[RepositoryEntry]:
        username = _require_username(username)
        url = f"{self.base_url}/users/{username}/repos"

        logger.info(f"Requesting repositories for {username} from {url}")

        try:
            response = self._http.get(
                url,
                params={"per_page": REST_PAGE_SIZE},
                headers=self._headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            raise NetworkError(
                f"GitHub API returned an error: {e}",
                url=url,
                status_code=status_code,
                suggested_action="Check the username, or set GITHUB_TOKEN if rate limited.",
            ) from e
        except requests.RequestException as e:
            raise NetworkError(f"GitHub API request failed: {e}", url=url) from e

        try:
            data = response.json()
        except ValueError as e:
            raise RepositorySourceError(
                f"GitHub API returned invalid JSON: {e}",
                source=self.name,
                user_message="Unexpected API JSON",
            ) from e

        entries = parse_repository_payload(data, "ssh_url")
        logger.info(f"GitHub API listed {len(entries)} repositories for {username}")
        return entries


class CliRepositorySource(RepositorySource):
    """Lists repositories through ``gh repo list``."""

    name = "cli"

    def __init__(
        self,
        runner: ProcessRunner | None = None,
        executable: str = "gh",
        timeout: int = 120,
        limit: int = CLI_REPOSITORY_LIMIT,
    ):
        self.runner = runner or ProcessRunner()
        self.executable = executable
        self.timeout = timeout
        self.limit = limit

    def build_arguments(self, username: str) -> list[str]:
        return [
            "repo",
            "list",
            username,
            "--limit",
            str(self.limit),
            "--json",
            "name,sshUrl",
        ]

    def list_repositories(self, username: str) -> list[RepositoryEntry]:
        username = _require_username(username)

        result = self.runner.run(
            self.executable, self.build_arguments(username), timeout=self.timeout
        )
        if not result.success:
            raise RepositorySourceError(
                f"{self.executable} repo list failed: {result.error.strip()}",
                source=self.name,
                suggested_action=f"Check that '{self.executable}' is installed and authenticated.",
            )

        try:
            entries = parse_repository_payload(json.loads(result.output), "sshUrl")
        except (ValueError, RepositorySourceError) as e:
            logger.warning(f"CLI output is not a JSON array, listing lines as-is: {e}")
            entries = [
                RepositoryEntry(name=line.strip())
                for line in result.output.splitlines()
                if line.strip()
            ]

        logger.info(f"GitHub CLI listed {len(entries)} repositories for {username}")
        return entries


def create_repository_source(
    config: AppConfig, runner: ProcessRunner | None = None
) -> RepositorySource:
    """
    Build the repository source selected by configuration.

    Raises:
        ConfigurationError: If the configured source is unknown
    """
    preferences = config.preferences
    source = preferences.repository_source.strip().lower()

    if source == "rest":
        return RestRepositorySource(
            token=config.github_token, timeout=preferences.request_timeout
        )
    if source == "cli":
        return CliRepositorySource(
            runner=runner,
            executable=preferences.gh_executable,
            timeout=preferences.command_timeout,
        )

    raise ConfigurationError(
        f"Unknown repository source '{preferences.repository_source}', "
        f"expected one of: {', '.join(REPOSITORY_SOURCES)}"
    )
