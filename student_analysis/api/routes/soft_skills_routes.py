"""
Soft Skills Routes

GET  /soft-skills/questions - The five assessment questions
POST /soft-skills/analyze   - Analyze the five answers (optionally save to a student)
"""

from fastapi import APIRouter, Depends

from student_analysis.api.deps import get_soft_skills_analyzer
from student_analysis.services.soft_skills_service import SOFT_SKILLS_QUESTIONS, SoftSkillsAnalyzer
from student_analysis.schemas.schemas import (
    SoftSkillsQuestionsResponse, SoftSkillsAnalyzeRequest, EnrichmentResponse
)

router = APIRouter(prefix="/soft-skills", tags=["Soft Skills"])


@router.get("/questions", response_model=SoftSkillsQuestionsResponse)
async def get_questions():
    """Serve the soft skills assessment questions."""
    return SoftSkillsQuestionsResponse(
        questions=SOFT_SKILLS_QUESTIONS,
        totalQuestions=len(SOFT_SKILLS_QUESTIONS)
    )


@router.post("/analyze", response_model=EnrichmentResponse)
async def analyze_soft_skills(
    body: SoftSkillsAnalyzeRequest,
    analyzer: SoftSkillsAnalyzer = Depends(get_soft_skills_analyzer)
):
    """
    Analyze soft skills responses.

    Exactly 5 responses are required (400 otherwise). AI failures never
    produce an error: `data.source` says which fallback tier answered.
    """
    answers = [r.answer for r in body.responses] if body.responses is not None else None
    result, _ = await analyzer.analyze(answers, body.studentId)

    return EnrichmentResponse(
        success=True,
        data=result,
        message="Soft skills assessment completed successfully"
    )
