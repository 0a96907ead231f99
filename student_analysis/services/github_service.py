"""
GitHub Service - public profile and recent repositories via the REST API.

contributionsLastYear is left as None: the REST API does not expose the
contribution calendar.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from student_analysis.core.config import Settings, get_settings
from student_analysis.core.errors import TransportError, ValidationError

logger = logging.getLogger(__name__)

USER_AGENT = "Student-Analysis-System"
RECENT_REPO_LIMIT = 10


def parse_github_username(github_url: Optional[str]) -> str:
    """'https://github.com/octocat/repo' -> 'octocat'"""
    if not github_url:
        raise ValidationError("GitHub URL is required")
    if "github.com/" not in github_url:
        raise ValidationError("Invalid GitHub URL")
    username = github_url.split("github.com/", 1)[1].split("/")[0].split("?")[0].strip()
    if not username:
        raise ValidationError("Invalid GitHub URL")
    return username


class GitHubService:
    def __init__(self, settings: Settings):
        self.base_url = settings.github_api_url.rstrip("/")
        self.timeout = settings.github_timeout_seconds

    async def fetch_profile(self, username: str) -> Dict[str, Any]:
        """
        Raises:
            TransportError with status_code 404 (no such user), 403 (rate limit)
            or None (network failure)
        """
        logger.info("🐙 Fetching GitHub data for: %s", username)
        headers = {"User-Agent": USER_AGENT, "Accept": "application/vnd.github+json"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, headers=headers) as client:
                user_response = await client.get(f"{self.base_url}/users/{username}")
                user_response.raise_for_status()
                repos_response = await client.get(
                    f"{self.base_url}/users/{username}/repos",
                    params={"sort": "updated", "per_page": RECENT_REPO_LIMIT}
                )
                repos_response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(f"GitHub returned {e.response.status_code}", e.response.status_code)
        except httpx.HTTPError as e:
            raise TransportError(f"GitHub request failed: {e}")

        user = user_response.json()
        repos = repos_response.json()

        languages = []
        for repo in repos:
            if repo.get("language") and repo["language"] not in languages:
                languages.append(repo["language"])

        return {
            "username": user.get("login"),
            "repositories": user.get("public_repos", 0),
            "publicRepos": user.get("public_repos", 0),
            "followers": user.get("followers", 0),
            "following": user.get("following", 0),
            "languages": languages,
            "profileUrl": user.get("html_url"),
            "avatar": user.get("avatar_url"),
            "bio": user.get("bio"),
            "contributionsLastYear": None,
            "topRepos": [
                {
                    "name": repo.get("name"),
                    "description": repo.get("description") or "",
                    "stars": repo.get("stargazers_count", 0),
                    "language": repo.get("language") or "None",
                    "updatedAt": repo.get("updated_at"),
                }
                for repo in repos
            ],
        }


def get_github_service() -> GitHubService:
    return GitHubService(get_settings())
