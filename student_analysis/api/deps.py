"""
FastAPI dependencies - wire settings, clients and the store into the analyzers.

Tests replace get_llm_client / get_extraction_client / get_student_store
through app.dependency_overrides.
"""
from fastapi import Depends

from student_analysis.services.extraction_client import ExtractionServiceClient, get_extraction_client
from student_analysis.services.llm_client import GroqClient, get_llm_client
from student_analysis.services.marks_service import MarksAnalyzer
from student_analysis.services.profile_service import ProfileAnalyzer
from student_analysis.services.resume_service import ResumeAnalyzer
from student_analysis.services.soft_skills_service import SoftSkillsAnalyzer
from student_analysis.services.student_store import StudentStore, get_student_store


def get_soft_skills_analyzer(
    llm: GroqClient = Depends(get_llm_client),
    store: StudentStore = Depends(get_student_store)
) -> SoftSkillsAnalyzer:
    return SoftSkillsAnalyzer(llm, store)


def get_resume_analyzer(
    llm: GroqClient = Depends(get_llm_client),
    extraction: ExtractionServiceClient = Depends(get_extraction_client),
    store: StudentStore = Depends(get_student_store)
) -> ResumeAnalyzer:
    return ResumeAnalyzer(llm, extraction, store)


def get_marks_analyzer(
    llm: GroqClient = Depends(get_llm_client),
    extraction: ExtractionServiceClient = Depends(get_extraction_client),
    store: StudentStore = Depends(get_student_store)
) -> MarksAnalyzer:
    return MarksAnalyzer(llm, extraction, store)


def get_profile_analyzer(
    llm: GroqClient = Depends(get_llm_client),
    store: StudentStore = Depends(get_student_store)
) -> ProfileAnalyzer:
    return ProfileAnalyzer(llm, store)
