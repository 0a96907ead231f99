from unittest.mock import MagicMock

import httpx
import pytest
from pymongo.errors import PyMongoError

from student_analysis.core.config import Settings
from student_analysis.core.errors import PersistenceError, TransportError, ValidationError
from student_analysis.services.extraction_client import RESUME_ENDPOINT, ExtractionServiceClient
from student_analysis.services.github_service import GitHubService, parse_github_username
from student_analysis.services.leetcode_service import parse_leetcode_username
from student_analysis.services.persistence import persist_result
from student_analysis.services.student_store import StudentStore
from student_analysis.utils.file_upload import StagedUpload

from conftest import STUDENT_ID, FakeStore, run

REAL_ASYNC_CLIENT = httpx.AsyncClient


@pytest.fixture
def mock_http(monkeypatch):
    """Route every httpx.AsyncClient through a handler: mock_http(handler)."""
    def install(handler):
        def factory(**kwargs):
            return REAL_ASYNC_CLIENT(transport=httpx.MockTransport(handler), **kwargs)
        monkeypatch.setattr(httpx, "AsyncClient", factory)
    return install


@pytest.fixture
def staged(tmp_path):
    path = tmp_path / "resume.txt"
    path.write_bytes(b"Python developer")
    return StagedUpload(path=str(path), filename="resume.txt", content_type="text/plain", size=16)


# ============================================================
# EXTRACTION SERVICE
# ============================================================

def extraction_handler(analysis_response):
    def handler(request):
        if request.url.path == "/health":
            return httpx.Response(200, json={"status": "healthy"})
        return analysis_response(request)
    return handler


def test_extraction_success(mock_http, staged):
    def analysis(request):
        assert request.url.path == RESUME_ENDPOINT
        assert b"Python developer" in request.content
        return httpx.Response(200, json={"success": True, "analysis": "Knows Python",
                                         "filename": "resume.txt", "extracted_text_length": 16})
    mock_http(extraction_handler(analysis))

    result = run(ExtractionServiceClient(Settings(_env_file=None)).analyze(RESUME_ENDPOINT, staged))
    assert result == {"detailedAnalysis": "Knows Python", "filename": "resume.txt", "extractedTextLength": 16}


@pytest.mark.parametrize("analysis", [
    lambda request: httpx.Response(200, json={"success": False, "error": "OCR failed"}),
    lambda request: httpx.Response(200, json={"success": True, "analysis": "  "}),
    lambda request: httpx.Response(502, text="bad gateway"),
    lambda request: httpx.Response(200, text="<html>not json</html>"),
])
def test_extraction_failures_are_transport_errors(mock_http, staged, analysis):
    mock_http(extraction_handler(analysis))
    with pytest.raises(TransportError):
        run(ExtractionServiceClient(Settings(_env_file=None)).analyze(RESUME_ENDPOINT, staged))


def test_extraction_timeout_is_transport_error(mock_http, staged):
    def analysis(request):
        raise httpx.ReadTimeout("timed out", request=request)
    mock_http(extraction_handler(analysis))

    with pytest.raises(TransportError):
        run(ExtractionServiceClient(Settings(_env_file=None)).analyze(RESUME_ENDPOINT, staged))


def test_unhealthy_service_is_not_called(mock_http, staged):
    calls = []

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(200, json={"status": "degraded"})
    mock_http(handler)

    with pytest.raises(TransportError, match="unavailable"):
        run(ExtractionServiceClient(Settings(_env_file=None)).analyze(RESUME_ENDPOINT, staged))
    assert calls == ["/health"]


# ============================================================
# GITHUB / LEETCODE
# ============================================================

def test_github_profile(mock_http):
    def handler(request):
        if request.url.path == "/users/asha":
            return httpx.Response(200, json={"login": "asha", "public_repos": 3, "followers": 5,
                                             "following": 1, "html_url": "https://github.com/asha"})
        assert request.url.params["per_page"] == "10"
        return httpx.Response(200, json=[
            {"name": "tracker", "language": "Python", "stargazers_count": 4},
            {"name": "notes", "language": "Python"},
            {"name": "site", "language": "TypeScript"},
            {"name": "dotfiles", "language": None},
        ])
    mock_http(handler)

    profile = run(GitHubService(Settings(_env_file=None)).fetch_profile("asha"))
    assert profile["repositories"] == 3
    assert profile["languages"] == ["Python", "TypeScript"]
    assert profile["contributionsLastYear"] is None
    assert profile["topRepos"][3]["language"] == "None"


@pytest.mark.parametrize("status", [404, 403])
def test_github_errors_keep_status(mock_http, status):
    mock_http(lambda request: httpx.Response(status, json={"message": "nope"}))
    with pytest.raises(TransportError) as exc_info:
        run(GitHubService(Settings(_env_file=None)).fetch_profile("ghost"))
    assert exc_info.value.status_code == status


@pytest.mark.parametrize("url, username", [
    ("https://github.com/asha", "asha"),
    ("https://github.com/asha/tracker", "asha"),
    ("github.com/asha?tab=repositories", "asha"),
])
def test_parse_github_username(url, username):
    assert parse_github_username(url) == username


@pytest.mark.parametrize("url", [None, "", "https://gitlab.com/asha", "https://github.com/"])
def test_parse_github_username_rejects(url):
    with pytest.raises(ValidationError):
        parse_github_username(url)


@pytest.mark.parametrize("url, username", [
    ("https://leetcode.com/u/asha/", "asha"),
    ("https://leetcode.com/asha", "asha"),
    ("https://leetcode.com/u/", None),
    ("https://example.com/asha", None),
])
def test_parse_leetcode_username(url, username):
    assert parse_leetcode_username(url) == username


# ============================================================
# STUDENT STORE
# ============================================================

def test_store_save_sets_field():
    collection = MagicMock()
    collection.update_one.return_value.matched_count = 1

    assert StudentStore(collection).save(STUDENT_ID, "resume", {"skills": []}) is True
    query, update = collection.update_one.call_args[0]
    assert update["$set"]["resume"] == {"skills": []}
    assert "updatedAt" in update["$set"]


def test_store_save_unknown_student():
    collection = MagicMock()
    collection.update_one.return_value.matched_count = 0
    assert StudentStore(collection).save(STUDENT_ID, "marks", {}) is False


def test_store_errors_become_persistence_errors():
    collection = MagicMock()
    collection.update_one.side_effect = PyMongoError("connection refused")
    store = StudentStore(collection)

    with pytest.raises(PersistenceError):
        store.save(STUDENT_ID, "marks", {})
    with pytest.raises(PersistenceError):
        store.save("not-an-id", "marks", {})


def test_store_find_by_usn_uppercases():
    collection = MagicMock()
    collection.find_one.return_value = {"_id": "abc", "usn": "1RV21CS001"}

    student = StudentStore(collection).find_by_usn("1rv21cs001")
    collection.find_one.assert_called_once_with({"usn": "1RV21CS001"})
    assert student["_id"] == "abc"


def test_persist_result_swallows_failures():
    assert persist_result(FakeStore(fail_saves=True), STUDENT_ID, "resume", {}) is False
    assert persist_result(FakeStore(), STUDENT_ID, "resume", {}) is False


def test_unreadable_staged_file_is_transport_error(mock_http, tmp_path):
    mock_http(extraction_handler(lambda request: httpx.Response(200, json={"success": True, "analysis": "x"})))
    missing = StagedUpload(path=str(tmp_path / "gone.txt"), filename="gone.txt", content_type="text/plain", size=3)

    with pytest.raises(TransportError, match="Could not read staged file"):
        run(ExtractionServiceClient(Settings(_env_file=None)).analyze(RESUME_ENDPOINT, missing))
