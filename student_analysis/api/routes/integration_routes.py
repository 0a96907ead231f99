"""
Integration Routes

POST /fetch-github-data   - Public GitHub profile + 10 most recent repos
POST /fetch-leetcode-data - LeetCode username/profile link
POST /upload-photo        - Student photo to Cloudinary
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, File, UploadFile

from student_analysis.core.config import Settings, get_settings
from student_analysis.core.errors import TransportError
from student_analysis.services.github_service import GitHubService, get_github_service, parse_github_username
from student_analysis.services.leetcode_service import build_leetcode_profile
from student_analysis.services.photo_service import PhotoService, get_photo_service
from student_analysis.utils.file_upload import IMAGE_EXTENSIONS, staged_upload
from student_analysis.schemas.schemas import GitHubRequest, LeetCodeRequest, PhotoUploadResponse

router = APIRouter(tags=["Integrations"])


@router.post("/fetch-github-data")
async def fetch_github_data(body: GitHubRequest, service: GitHubService = Depends(get_github_service)):
    """Fetch a student's public GitHub data."""
    username = parse_github_username(body.githubUrl)
    try:
        return await service.fetch_profile(username)
    except TransportError as e:
        if e.status_code == 404:
            raise HTTPException(status_code=404, detail="GitHub user not found")
        if e.status_code == 403:
            raise HTTPException(status_code=403, detail="GitHub API rate limit exceeded")
        raise HTTPException(status_code=500, detail="Failed to fetch GitHub data")


@router.post("/fetch-leetcode-data")
async def fetch_leetcode_data(body: LeetCodeRequest):
    """Resolve a LeetCode profile from its URL or username."""
    return build_leetcode_profile(body.leetcodeUrl, body.username)


@router.post("/upload-photo", response_model=PhotoUploadResponse)
async def upload_photo(
    photo: Optional[UploadFile] = File(None),
    service: PhotoService = Depends(get_photo_service),
    settings: Settings = Depends(get_settings)
):
    """Upload a student photo and return its public URL."""
    async with staged_upload(photo, settings, "photo", IMAGE_EXTENSIONS) as staged:
        try:
            url = service.upload(staged)
        except TransportError:
            raise HTTPException(status_code=500, detail="Error uploading photo")
    return PhotoUploadResponse(url=url)
