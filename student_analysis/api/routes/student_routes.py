"""
Student Routes

GET  /students/{student_id}/soft-skills - Stored soft skills assessment
POST /students/usn/{usn}/analyze        - Full profile analysis, saved to the record
"""

from fastapi import APIRouter, HTTPException, Depends

from student_analysis.api.deps import get_profile_analyzer
from student_analysis.services.profile_service import ProfileAnalyzer
from student_analysis.services.student_store import StudentStore, get_student_store
from student_analysis.schemas.schemas import SoftSkillsRecordResponse, StudentInfo

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("/{student_id}/soft-skills", response_model=SoftSkillsRecordResponse)
async def get_soft_skills(student_id: str, store: StudentStore = Depends(get_student_store)):
    """Get a student's soft skills assessment."""
    student = store.find_by_id(student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")

    assessment = student.get("softSkillsAssessment")
    if not assessment:
        raise HTTPException(status_code=404, detail="No soft skills assessment found for this student")

    return SoftSkillsRecordResponse(
        data=assessment,
        studentInfo=StudentInfo(
            name=student.get("name"),
            usn=student.get("usn"),
            semester=student.get("semester")
        )
    )


@router.post("/usn/{usn}/analyze")
async def analyze_student(
    usn: str,
    store: StudentStore = Depends(get_student_store),
    analyzer: ProfileAnalyzer = Depends(get_profile_analyzer)
):
    """
    Analyze a student's complete profile: academics, resume, GitHub,
    LeetCode and soft skills. Returns the analysis with its `source` tier.
    """
    student = store.find_by_usn(usn)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")

    result, _ = await analyzer.analyze(student)
    return result
