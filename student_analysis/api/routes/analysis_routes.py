"""
Document Analysis Routes

POST /analyze-resume - Upload and analyze a resume (PDF/DOC/DOCX/TXT)
POST /analyze-marks  - Upload and analyze a marks card

Both stage the upload on disk for the duration of the request; the file is
deleted however the analysis ends.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from student_analysis.api.deps import get_marks_analyzer, get_resume_analyzer
from student_analysis.core.config import Settings, get_settings
from student_analysis.services.fallback_ladder import FallbackTier
from student_analysis.services.marks_service import MarksAnalyzer
from student_analysis.services.resume_service import ResumeAnalyzer
from student_analysis.utils.file_upload import staged_upload
from student_analysis.schemas.schemas import MarksAnalysisResponse

router = APIRouter(tags=["Document Analysis"])


@router.post("/analyze-resume")
async def analyze_resume(
    resume: Optional[UploadFile] = File(None, description="Resume file (PDF, DOC, DOCX or TXT)"),
    student_id: Optional[str] = Form(None),
    analyzer: ResumeAnalyzer = Depends(get_resume_analyzer),
    settings: Settings = Depends(get_settings)
):
    """
    Analyze a resume.

    Process:
    1. Extraction service analyses the file (falls back to Groq on local text)
    2. Groq structures skills, projects, experience, education
    3. Optionally saved to the student's resume field
    """
    async with staged_upload(resume, settings, "resume") as staged:
        result, _ = await analyzer.analyze(staged, student_id)
    return result


@router.post("/analyze-marks", response_model=MarksAnalysisResponse)
async def analyze_marks(
    marksheet: Optional[UploadFile] = File(None, description="Marks card (PDF, DOC, DOCX or TXT)"),
    student_id: Optional[str] = Form(None),
    analyzer: MarksAnalyzer = Depends(get_marks_analyzer),
    settings: Settings = Depends(get_settings)
):
    """
    Analyze a marks card. The form can always continue (nextEnabled),
    even when analysis failed.
    """
    async with staged_upload(marksheet, settings, "marksheet") as staged:
        result, tier = await analyzer.analyze(staged, student_id)

    if tier == FallbackTier.error_fallback:
        return MarksAnalysisResponse(
            success=False,
            data=result,
            message="There was an error analyzing your marks, but you can continue to the next step."
        )
    return MarksAnalysisResponse(
        success=True,
        data=result,
        message="Marks sheet analyzed successfully"
    )
