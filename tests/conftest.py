"""
Shared fakes for the enrichment pipeline.

No test needs MongoDB, Groq or the extraction service: each collaborator is
replaced by a scripted fake, injected directly or via dependency overrides.
"""
import asyncio
import copy

import pytest
from fastapi.testclient import TestClient

from student_analysis.core.config import Settings, get_settings
from student_analysis.core.errors import PersistenceError
from student_analysis.main import app
from student_analysis.services.extraction_client import get_extraction_client
from student_analysis.services.llm_client import get_llm_client
from student_analysis.services.student_store import get_student_store, to_object_id

STUDENT_ID = "64b7f0c2a1b2c3d4e5f60718"


def run(coro):
    return asyncio.run(coro)


class FakeLLM:
    """Returns scripted outputs in order; an Exception instance is raised instead."""

    def __init__(self, *outputs):
        self.outputs = list(outputs)
        self.requests = []

    async def complete(self, request):
        self.requests.append(request)
        output = self.outputs.pop(0)
        if isinstance(output, Exception):
            raise output
        return output


class FakeExtraction:
    def __init__(self, result=None, error=None, healthy=True):
        self.result = result
        self.error = error
        self.healthy = healthy
        self.calls = []

    async def is_healthy(self):
        return self.healthy

    async def analyze(self, endpoint, staged):
        self.calls.append((endpoint, staged.filename))
        if self.error is not None:
            raise self.error
        return dict(self.result)


class FakeStore:
    def __init__(self, students=None, fail_saves=False, fail_reads=False):
        self.students = {s["_id"]: s for s in (students or [])}
        self.fail_saves = fail_saves
        self.fail_reads = fail_reads
        self.saved = []

    def find_by_id(self, student_id):
        to_object_id(student_id)
        if self.fail_reads:
            raise PersistenceError(f"Could not read student {student_id}: connection refused")
        return copy.deepcopy(self.students.get(student_id))

    def find_by_usn(self, usn):
        for student in self.students.values():
            if student.get("usn") == usn.upper():
                return copy.deepcopy(student)
        return None

    def save(self, student_id, field, value):
        if self.fail_saves:
            raise PersistenceError("database unavailable")
        self.saved.append((student_id, field, value))
        if student_id not in self.students:
            return False
        self.students[student_id][field] = value
        return True


def make_student(**overrides):
    student = {
        "_id": STUDENT_ID,
        "name": "Asha Rao",
        "usn": "1RV21CS001",
        "email": "asha@example.edu",
        "semester": 6,
    }
    student.update(overrides)
    return student


@pytest.fixture
def settings(tmp_path):
    return Settings(upload_dir=str(tmp_path / "uploads"), _env_file=None)


@pytest.fixture
def fakes():
    """Mutable bag of collaborators; tests swap members before making requests."""
    class Fakes:
        llm = FakeLLM()
        extraction = FakeExtraction(error=None, result={})
        store = FakeStore([make_student()])
    return Fakes()


@pytest.fixture
def client(fakes, settings):
    app.dependency_overrides[get_llm_client] = lambda: fakes.llm
    app.dependency_overrides[get_extraction_client] = lambda: fakes.extraction
    app.dependency_overrides[get_student_store] = lambda: fakes.store
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()
