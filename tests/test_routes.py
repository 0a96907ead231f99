import json
import os

from student_analysis.core.errors import TransportError

from conftest import STUDENT_ID, FakeExtraction, FakeLLM, FakeStore, make_student

ANSWERS = [{"questionId": i, "answer": f"Answer number {i}"} for i in range(1, 6)]


def upload_dir_is_empty(settings):
    return not os.path.exists(settings.upload_dir) or os.listdir(settings.upload_dir) == []


# ============================================================
# SOFT SKILLS
# ============================================================

def test_questions(client):
    response = client.get("/api/soft-skills/questions")
    body = response.json()

    assert response.status_code == 200
    assert body["totalQuestions"] == 5
    assert [q["id"] for q in body["questions"]] == [1, 2, 3, 4, 5]


def test_analyze_soft_skills(client, fakes):
    fakes.llm = FakeLLM('{"overallSoftSkillsScore": 81}')
    response = client.post("/api/soft-skills/analyze", json={"responses": ANSWERS, "studentId": STUDENT_ID})
    body = response.json()

    assert response.status_code == 200
    assert body["success"] is True
    assert body["data"]["overallSoftSkillsScore"] == 81
    assert body["data"]["source"] == "primary"
    assert "softSkillsAssessment" in fakes.store.students[STUDENT_ID]


def test_analyze_soft_skills_degrades_instead_of_failing(client, fakes):
    fakes.llm = FakeLLM(TransportError("Groq unavailable"))
    response = client.post("/api/soft-skills/analyze", json={"responses": ANSWERS})

    assert response.status_code == 200
    assert response.json()["data"]["source"] == "error-fallback"


def test_analyze_soft_skills_requires_five_answers(client, fakes):
    response = client.post("/api/soft-skills/analyze", json={"responses": ANSWERS[:4]})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "All 5 question responses are required"}
    assert fakes.llm.requests == []


def test_stored_soft_skills(client, fakes):
    fakes.store = FakeStore([make_student(softSkillsAssessment={"overallSoftSkillsScore": 70})])
    response = client.get(f"/api/students/{STUDENT_ID}/soft-skills")
    body = response.json()

    assert response.status_code == 200
    assert body["data"]["overallSoftSkillsScore"] == 70
    assert body["studentInfo"] == {"name": "Asha Rao", "usn": "1RV21CS001", "semester": 6}


def test_stored_soft_skills_missing(client):
    response = client.get(f"/api/students/{STUDENT_ID}/soft-skills")
    assert response.status_code == 404
    assert response.json()["detail"] == "No soft skills assessment found for this student"


def test_stored_soft_skills_unknown_student(client):
    response = client.get("/api/students/64b7f0c2a1b2c3d4e5f60799/soft-skills")
    assert response.status_code == 404
    assert response.json()["detail"] == "Student not found"


def test_stored_soft_skills_bad_id(client):
    response = client.get("/api/students/not-an-id/soft-skills")
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid student ID format"


# ============================================================
# DOCUMENTS
# ============================================================

def test_analyze_resume_without_extraction_service(client, fakes, settings):
    fakes.extraction = FakeExtraction(error=TransportError("timed out"))
    fakes.llm = FakeLLM('{"skills": ["Python"]}')
    response = client.post(
        "/api/analyze-resume",
        files={"resume": ("resume.txt", b"Python developer", "text/plain")},
        data={"student_id": STUDENT_ID}
    )
    body = response.json()

    assert response.status_code == 200
    assert body["source"] == "llm-fallback"
    assert body["skills"] == ["Python"]
    assert body["filename"] == "resume.txt"
    assert fakes.store.students[STUDENT_ID]["resume"]["skills"] == ["Python"]
    assert upload_dir_is_empty(settings)


def test_analyze_resume_total_failure_still_200(client, fakes, settings):
    fakes.extraction = FakeExtraction(error=TransportError("down"))
    fakes.llm = FakeLLM(TransportError("down"))
    response = client.post("/api/analyze-resume", files={"resume": ("cv.pdf", b"%PDF-broken", "application/pdf")})

    assert response.status_code == 200
    assert response.json()["source"] == "error-fallback"
    assert upload_dir_is_empty(settings)


def test_analyze_resume_requires_file(client):
    response = client.post("/api/analyze-resume", data={"student_id": STUDENT_ID})
    assert response.status_code == 400
    assert response.json()["error"] == "No resume file uploaded"


def test_analyze_resume_rejects_extension(client, settings):
    response = client.post("/api/analyze-resume", files={"resume": ("cv.exe", b"MZ", "application/octet-stream")})
    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid file type")
    assert upload_dir_is_empty(settings)


def test_analyze_resume_rejects_large_file(client, settings):
    settings.max_upload_size_mb = 0
    response = client.post("/api/analyze-resume", files={"resume": ("cv.txt", b"too big", "text/plain")})
    assert response.status_code == 400
    assert response.json()["error"] == "File too large. Maximum size is 0MB."


def test_analyze_marks_success(client, fakes, settings):
    fakes.extraction = FakeExtraction(result={
        "detailedAnalysis": "GPA 8.2", "filename": "marks.pdf", "extractedTextLength": 100})
    fakes.llm = FakeLLM('{"cgpa": 8.2, "semester": 5}')
    response = client.post("/api/analyze-marks", files={"marksheet": ("marks.pdf", b"%PDF", "application/pdf")})
    body = response.json()

    assert response.status_code == 200
    assert body["success"] is True
    assert body["nextEnabled"] is True
    assert body["data"]["cgpa"] == 8.2
    assert body["data"]["source"] == "primary"
    assert upload_dir_is_empty(settings)


def test_analyze_marks_error_lets_student_continue(client, fakes):
    fakes.extraction = FakeExtraction(error=TransportError("down"))
    fakes.llm = FakeLLM(TransportError("down"))
    response = client.post("/api/analyze-marks", files={"marksheet": ("marks.txt", b"DBMS A", "text/plain")})
    body = response.json()

    assert response.status_code == 200
    assert body["success"] is False
    assert body["nextEnabled"] is True
    assert body["data"]["subjects"] == []


# ============================================================
# PROFILE
# ============================================================

def test_analyze_student_by_usn(client, fakes):
    fakes.llm = FakeLLM(json.dumps({"overallScore": 74, "strengths": ["Consistent"]}))
    response = client.post("/api/students/usn/1rv21cs001/analyze")
    body = response.json()

    assert response.status_code == 200
    assert body["overallScore"] == 74
    assert body["source"] == "primary"
    assert fakes.store.students[STUDENT_ID]["analysis"]["overallScore"] == 74


def test_analyze_unknown_usn(client, fakes):
    response = client.post("/api/students/usn/1RV00XX999/analyze")
    assert response.status_code == 404
    assert fakes.llm.requests == []


# ============================================================
# INTEGRATIONS
# ============================================================

def test_leetcode_from_url(client):
    response = client.post("/api/fetch-leetcode-data", json={"leetcodeUrl": "https://leetcode.com/u/asha_rao/"})
    body = response.json()

    assert response.status_code == 200
    assert body["username"] == "asha_rao"
    assert body["totalSolved"] is None


def test_leetcode_requires_input(client):
    response = client.post("/api/fetch-leetcode-data", json={})
    assert response.status_code == 400


def test_github_rejects_bad_url(client):
    response = client.post("/api/fetch-github-data", json={"githubUrl": "https://gitlab.com/asha"})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid GitHub URL"


def test_upload_photo_rejects_document(client, settings):
    response = client.post("/api/upload-photo", files={"photo": ("cv.pdf", b"%PDF", "application/pdf")})
    assert response.status_code == 400
    assert upload_dir_is_empty(settings)


def test_health_reports_services(client, fakes, monkeypatch):
    monkeypatch.setattr("student_analysis.main.test_mongo_connection", lambda: False)
    fakes.extraction = FakeExtraction(healthy=True)
    body = client.get("/api/health").json()

    assert body["status"] == "online"
    assert body["services"] == {"mongodb": "disconnected", "extractionService": "connected"}


def test_database_failure_reports_details(client, fakes):
    fakes.store = FakeStore(fail_reads=True)
    response = client.get(f"/api/students/{STUDENT_ID}/soft-skills")

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Database error",
        "details": f"Could not read student {STUDENT_ID}: connection refused",
    }
