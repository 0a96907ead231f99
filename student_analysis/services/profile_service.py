"""
Profile Analysis Service

Combines everything known about a student (marks, resume, GitHub, LeetCode,
soft skills) into one payload and asks the LLM for career guidance.
The result is stored on the student's `analysis` field.
"""

import json
import logging
from typing import Tuple

from student_analysis.services.fallback_ladder import EnrichmentPlan, FallbackLadder, FallbackTier
from student_analysis.services.llm_client import AnalysisRequest, GroqClient
from student_analysis.services.normalizer import Array, Number, Obj, Text
from student_analysis.services.persistence import persist_result
from student_analysis.services.student_store import StudentStore

logger = logging.getLogger(__name__)


PROFILE_SCHEMA = Obj({
    "strengths": Array(Text()),
    "weaknesses": Array(Text()),
    "recommendations": Array(Text()),
    "overallScore": Number(50, minimum=0, maximum=100),
    "skillGaps": Array(Text()),
    "careerSuggestions": Array(Text()),
    "learningPath": Array(Text()),
    "detailedAnalysis": Text("Analysis completed successfully."),
})


SYSTEM_PROMPT = """You are an expert career advisor for computer science students. Analyze this student's complete profile including academic performance, technical skills, GitHub activity, LeetCode performance, and soft skills assessment. Return ONLY JSON with the following structure:
{
  "strengths": ["Strong programming fundamentals", "Good project portfolio"],
  "weaknesses": ["Limited industry experience", "Needs more frontend skills"],
  "recommendations": ["Focus on learning React", "Contribute to open source"],
  "overallScore": 78,
  "skillGaps": ["Cloud computing", "DevOps"],
  "careerSuggestions": ["Full Stack Developer", "Backend Engineer"],
  "learningPath": ["Take AWS certification", "Learn Docker and Kubernetes"],
  "detailedAnalysis": "The student shows strong potential in backend development with solid academic performance..."
}

Provide specific, actionable insights based on ALL available data including academic performance, technical skills, GitHub activity, LeetCode performance, and soft skills."""


def build_student_profile(student: dict) -> dict:
    """Flatten a student record into the payload the advisor prompt expects."""
    marks = student.get("marks") or {}
    resume = student.get("resume") or {}
    github = student.get("github") or {}
    leetcode = student.get("leetcode") or {}
    soft_skills = student.get("softSkillsAssessment") or {}

    return {
        "name": student.get("name"),
        "semester": student.get("semester"),
        "academicPerformance": {
            "cgpa": marks.get("cgpa") or 0,
            "percentage": marks.get("totalPercentage") or 0,
            "subjects": marks.get("subjects") or [],
            "detailedMarksAnalysis": marks.get("detailedAnalysis"),
        },
        "technicalSkills": resume.get("skills") or [],
        "projects": resume.get("projects") or [],
        "experience": resume.get("experience") or [],
        "education": resume.get("education") or [],
        "detailedResumeAnalysis": resume.get("detailedAnalysis"),
        "github": {
            "repositories": github.get("repositories") or 0,
            "languages": github.get("languages") or [],
            "contributions": github.get("contributionsLastYear") or 0,
            "followers": github.get("followers") or 0,
        },
        "leetcode": {
            "totalSolved": leetcode.get("totalSolved") or 0,
            "contestRating": leetcode.get("contestRating") or 0,
            "acceptance": leetcode.get("acceptanceRate") or 0,
        },
        "softSkills": {
            "overallScore": soft_skills.get("overallSoftSkillsScore"),
            "strengths": soft_skills.get("strengths") or [],
            "improvements": soft_skills.get("areasForImprovement") or [],
        },
    }


def basic_fallback(context: dict) -> dict:
    return {
        "strengths": ["Profile data collected"],
        "weaknesses": [],
        "recommendations": ["Re-run the analysis for personalised recommendations"],
        "overallScore": 50,
        "skillGaps": [],
        "careerSuggestions": [],
        "learningPath": [],
        "detailedAnalysis": (
            "The profile was analyzed, but the advisor's response could not be read. "
            "Neutral values are shown until the analysis is re-run."
        ),
    }


def error_fallback(context: dict) -> dict:
    payload = basic_fallback(context)
    payload["strengths"] = []
    payload["detailedAnalysis"] = "Automated profile analysis is temporarily unavailable."
    return payload


class ProfileAnalyzer:
    def __init__(self, llm: GroqClient, store: StudentStore):
        self.ladder = FallbackLadder(llm)
        self.store = store

    def build_plan(self, student: dict) -> EnrichmentPlan:
        profile = build_student_profile(student)

        def build_request(context: dict) -> AnalysisRequest:
            return AnalysisRequest(
                system_prompt=SYSTEM_PROMPT,
                user_content="Analyze this comprehensive student profile:\n"
                             + json.dumps(profile, indent=2, default=str),
                temperature=0.3,
                max_tokens=1500
            )

        return EnrichmentPlan(
            name="profile",
            schema=PROFILE_SCHEMA,
            build_request=build_request,
            fallbacks={
                FallbackTier.basic_fallback: basic_fallback,
                FallbackTier.error_fallback: error_fallback,
            }
        )

    async def analyze(self, student: dict) -> Tuple[dict, FallbackTier]:
        """Analyze an already-loaded student record and save the result on success."""
        logger.info("🧠 Analyzing student data for USN: %s", student.get("usn"))
        result, tier = await self.ladder.run(self.build_plan(student))

        if not tier.degraded:
            persist_result(self.store, student["_id"], "analysis", result)
        return result, tier
