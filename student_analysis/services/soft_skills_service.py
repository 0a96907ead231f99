"""
Soft Skills Assessment Service

Five fixed behavioural questions. The student's answers go to the LLM, which
rates eight skills on a 1-10 scale plus an overall 0-100 score.

Flow:
1. Validate: exactly 5 responses (ValidationError otherwise, no AI call)
2. Fallback ladder (LLM only, no pre-analysis)
3. Attach assessmentDate + formatted responses
4. Save to the student's softSkillsAssessment if a studentId was given
"""

import json
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from student_analysis.core.errors import ValidationError
from student_analysis.services.fallback_ladder import EnrichmentPlan, FallbackLadder, FallbackTier
from student_analysis.services.llm_client import AnalysisRequest, GroqClient
from student_analysis.services.normalizer import Array, Number, Obj, Text
from student_analysis.services.persistence import persist_result
from student_analysis.services.student_store import StudentStore

logger = logging.getLogger(__name__)


SOFT_SKILLS_QUESTIONS = [
    {
        "id": 1,
        "question": "Describe a challenging project you worked on and how you overcame the obstacles. What did you learn from this experience?",
        "category": "Problem Solving & Resilience",
        "skills": ["problem_solving", "resilience", "learning_agility"]
    },
    {
        "id": 2,
        "question": "Tell me about a time when you had to work with a difficult team member or in a challenging team environment. How did you handle the situation?",
        "category": "Communication & Teamwork",
        "skills": ["communication", "teamwork", "conflict_resolution"]
    },
    {
        "id": 3,
        "question": "Describe a situation where you had to learn a new technology or skill quickly to complete a task or project. What was your approach?",
        "category": "Adaptability & Learning",
        "skills": ["adaptability", "learning_agility", "self_motivation"]
    },
    {
        "id": 4,
        "question": "Give an example of when you had to take initiative or leadership in a project or situation, even when it wasn't formally assigned to you.",
        "category": "Leadership & Initiative",
        "skills": ["leadership", "initiative", "responsibility"]
    },
    {
        "id": 5,
        "question": "Describe a time when you received constructive feedback or criticism. How did you respond, and what changes did you make as a result?",
        "category": "Growth Mindset & Professionalism",
        "skills": ["growth_mindset", "professionalism", "self_awareness"]
    }
]

REQUIRED_RESPONSES = len(SOFT_SKILLS_QUESTIONS)

SKILLS = [
    "communication", "teamwork", "problem_solving", "leadership",
    "adaptability", "learning_agility", "initiative", "professionalism"
]

CAREER_ROLES = ["technicalRoles", "managementRoles", "consultingRoles", "entrepreneurialRoles"]


def _skill_score():
    return Obj({
        "score": Number(5, minimum=1, maximum=10),
        "feedback": Text("No specific feedback provided."),
    })


SOFT_SKILLS_SCHEMA = Obj({
    "overallSoftSkillsScore": Number(50, minimum=0, maximum=100),
    "skillBreakdown": Obj({skill: _skill_score() for skill in SKILLS}),
    "strengths": Array(Text()),
    "areasForImprovement": Array(Text()),
    "developmentRecommendations": Array(Text()),
    "personalityTraits": Array(Text()),
    "careerFitness": Obj({role: Number(5, minimum=0, maximum=10) for role in CAREER_ROLES}),
    "detailedAnalysis": Text("Analysis completed successfully."),
})


SYSTEM_PROMPT = """You are an expert HR professional and soft skills assessor. Analyze the student's responses to evaluate their soft skills and provide detailed feedback.

Rate each skill on a scale of 1-10 and provide specific feedback. Return ONLY valid JSON with this exact structure:
{
  "overallSoftSkillsScore": 85,
  "skillBreakdown": {
    "communication": { "score": 8, "feedback": "Strong communication skills evident..." },
    "teamwork": { "score": 7, "feedback": "Good collaborative abilities..." },
    "problem_solving": { "score": 9, "feedback": "Excellent analytical thinking..." },
    "leadership": { "score": 6, "feedback": "Shows potential for leadership..." },
    "adaptability": { "score": 8, "feedback": "Demonstrates flexibility..." },
    "learning_agility": { "score": 9, "feedback": "Quick learner with growth mindset..." },
    "initiative": { "score": 7, "feedback": "Takes proactive approach..." },
    "professionalism": { "score": 8, "feedback": "Maintains professional standards..." }
  },
  "strengths": ["Excellent problem-solving abilities", "Strong learning agility"],
  "areasForImprovement": ["Leadership confidence", "Conflict resolution"],
  "developmentRecommendations": ["Join leadership training programs", "Practice public speaking"],
  "personalityTraits": ["Analytical", "Growth-oriented", "Collaborative"],
  "careerFitness": {
    "technicalRoles": 8,
    "managementRoles": 6,
    "consultingRoles": 7,
    "entrepreneurialRoles": 6
  },
  "detailedAnalysis": "Based on the responses, the student demonstrates..."
}

Focus on specific examples from their answers. Be constructive and provide actionable feedback."""


BASIC_FEEDBACK = "Assessment completed - detailed analysis available."
BASIC_SCORES = {
    "communication": 7, "teamwork": 7, "problem_solving": 7, "leadership": 6,
    "adaptability": 7, "learning_agility": 8, "initiative": 6, "professionalism": 7
}


def basic_fallback(context: dict) -> dict:
    return {
        "overallSoftSkillsScore": 70,
        "skillBreakdown": {
            skill: {"score": score, "feedback": BASIC_FEEDBACK} for skill, score in BASIC_SCORES.items()
        },
        "strengths": ["Completed comprehensive assessment"],
        "areasForImprovement": ["Continue developing professional skills"],
        "developmentRecommendations": ["Review detailed analysis for specific guidance"],
        "personalityTraits": ["Engaged", "Thoughtful"],
        "careerFitness": {
            "technicalRoles": 7,
            "managementRoles": 6,
            "consultingRoles": 6,
            "entrepreneurialRoles": 6
        },
        "detailedAnalysis": (
            "Soft skills assessment completed. The student provided thoughtful responses "
            "to all questions, demonstrating engagement with the assessment process."
        ),
    }


def error_fallback(context: dict) -> dict:
    payload = basic_fallback(context)
    payload["detailedAnalysis"] = (
        "Soft skills assessment recorded. Automated analysis is temporarily unavailable, "
        "so neutral scores are shown until the assessment is re-run."
    )
    return payload


def format_responses(answers: List[str]) -> List[dict]:
    """Pair each answer with its question, category and target skills."""
    return [
        {
            "questionId": question["id"],
            "question": question["question"],
            "category": question["category"],
            "targetSkills": question["skills"],
            "studentAnswer": answer or "",
        }
        for question, answer in zip(SOFT_SKILLS_QUESTIONS, answers)
    ]


class SoftSkillsAnalyzer:
    def __init__(self, llm: GroqClient, store: StudentStore):
        self.ladder = FallbackLadder(llm)
        self.store = store

    def build_plan(self, formatted: List[dict]) -> EnrichmentPlan:
        def build_request(context: dict) -> AnalysisRequest:
            return AnalysisRequest(
                system_prompt=SYSTEM_PROMPT,
                user_content="Analyze these soft skill assessment responses:\n\n"
                             + json.dumps(formatted, indent=2),
                temperature=0.3,
                max_tokens=2000
            )

        def decorate(result: dict, context: dict) -> dict:
            result["assessmentDate"] = datetime.now(timezone.utc).isoformat()
            result["responses"] = formatted
            return result

        return EnrichmentPlan(
            name="soft-skills",
            schema=SOFT_SKILLS_SCHEMA,
            build_request=build_request,
            fallbacks={
                FallbackTier.basic_fallback: basic_fallback,
                FallbackTier.error_fallback: error_fallback,
            },
            decorate=decorate
        )

    async def analyze(self, answers: Optional[List[str]],
                      student_id: Optional[str] = None) -> Tuple[dict, FallbackTier]:
        """
        Analyze the five answers.

        Raises:
            ValidationError if there are not exactly 5 answers
        """
        if answers is None or len(answers) != REQUIRED_RESPONSES:
            raise ValidationError(f"All {REQUIRED_RESPONSES} question responses are required")

        logger.info("🧠 Analyzing soft skills responses...")
        result, tier = await self.ladder.run(self.build_plan(format_responses(answers)))

        # A basic-fallback result still reflects the student's answers; an
        # error-fallback one must not replace an earlier assessment
        if student_id and tier != FallbackTier.error_fallback:
            persist_result(self.store, student_id, "softSkillsAssessment", result)
        return result, tier
