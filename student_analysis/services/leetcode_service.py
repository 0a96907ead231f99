"""
LeetCode Service - username extraction only.

There is no supported public LeetCode API, so statistics are returned as
None instead of being made up. The profile URL is enough for the frontend
to link out.
"""
from typing import Any, Dict, Optional

from student_analysis.core.errors import ValidationError

STAT_FIELDS = [
    "totalSolved", "easySolved", "mediumSolved", "hardSolved",
    "contestRating", "ranking", "acceptanceRate", "submissions",
]


def parse_leetcode_username(leetcode_url: Optional[str]) -> Optional[str]:
    """
    Handles both profile URL styles:
    - https://leetcode.com/u/alice/
    - https://leetcode.com/alice/
    """
    if not leetcode_url or "leetcode.com/" not in leetcode_url:
        return None
    parts = [p for p in leetcode_url.split("leetcode.com/", 1)[1].split("/") if p]
    if not parts:
        return None
    if parts[0] == "u":
        return parts[1] if len(parts) > 1 else None
    return parts[0]


def build_leetcode_profile(leetcode_url: Optional[str], username: Optional[str]) -> Dict[str, Any]:
    if not leetcode_url and not username:
        raise ValidationError("LeetCode URL or username is required")

    username = username or parse_leetcode_username(leetcode_url)
    if not username:
        raise ValidationError("Could not extract username from LeetCode URL")

    profile = {
        "username": username,
        "profileUrl": leetcode_url or f"https://leetcode.com/u/{username}/",
        "badges": [],
        "note": "LeetCode statistics are not fetched; only the profile link is recorded.",
    }
    profile.update({stat: None for stat in STAT_FIELDS})
    return profile
