"""
Marks Card Analysis Service

PRIMARY:      extraction service reads the marks card, Groq pulls out subjects/scores
LLM FALLBACK: Groq on text read locally from the file
BASIC:        GPA scraped from the detailed analysis with a regex, if present
ERROR:        empty academic data; the student can still continue the form
"""

import logging
import re
from typing import Optional, Tuple

from student_analysis.services.extraction_client import ExtractionServiceClient, MARKS_CARD_ENDPOINT
from student_analysis.services.fallback_ladder import EnrichmentPlan, FallbackLadder, FallbackTier
from student_analysis.services.llm_client import AnalysisRequest, GroqClient
from student_analysis.services.normalizer import Array, Number, Obj, Text
from student_analysis.services.persistence import persist_result
from student_analysis.services.student_store import StudentStore
from student_analysis.utils.file_upload import StagedUpload, extract_text_from_path

logger = logging.getLogger(__name__)

LOCAL_TEXT_CHAR_LIMIT = 3000

GPA_PATTERN = re.compile(r"GPA.*?(\d+\.?\d*)", re.IGNORECASE)


MARKS_SCHEMA = Obj({
    "subjects": Array(Obj({
        "name": Text("Unknown Subject"),
        "score": Number(0, minimum=0),
    })),
    "totalPercentage": Number(None, minimum=0, maximum=100),
    "cgpa": Number(None, minimum=0, maximum=10),
    "semester": Number(None, integer=True, minimum=1, maximum=8),
    "detailedAnalysis": Text(None),
    "extractedTextLength": Number(0, integer=True, minimum=0),
})


STRUCTURE_PROMPT = """Extract ONLY basic academic data from this analysis for form completion. Return valid JSON:
{
  "subjects": [{"name": "Subject Name", "score": 85}],
  "totalPercentage": 85.5,
  "cgpa": 8.5,
  "semester": 6
}

Extract actual grades/scores mentioned in the analysis. If specific scores aren't clear, use reasonable estimates based on the grade letters (A=90-100, B=80-89, C=70-79, etc.)."""


FALLBACK_PROMPT = """You are reading the text of a student's marks card. Return ONLY valid JSON:
{
  "subjects": [{"name": "Subject Name", "score": 85}],
  "totalPercentage": 85.5,
  "cgpa": 8.5,
  "semester": 6
}

Use null for anything the text does not state. Do not invent subjects."""


def basic_fallback(context: dict) -> dict:
    """Salvage a GPA from the detailed analysis when structuring failed."""
    gpa = None
    match = GPA_PATTERN.search(context.get("detailedAnalysis") or "")
    if match:
        gpa = float(match.group(1))

    return {
        "subjects": [{"name": "Analysis completed", "score": 0}],
        "totalPercentage": gpa * 10 if gpa is not None else None,
        "cgpa": gpa,
        "semester": None,
        "detailedAnalysis": context.get("detailedAnalysis"),
        "extractedTextLength": context.get("extractedTextLength", 0),
    }


def error_fallback(context: dict) -> dict:
    return {
        "subjects": [],
        "totalPercentage": None,
        "cgpa": None,
        "semester": None,
        "detailedAnalysis": context.get("detailedAnalysis"),
        "extractedTextLength": context.get("extractedTextLength", 0),
    }


class MarksAnalyzer:
    def __init__(self, llm: GroqClient, extraction: ExtractionServiceClient, store: StudentStore):
        self.ladder = FallbackLadder(llm)
        self.extraction = extraction
        self.store = store

    def build_plan(self, staged: StagedUpload) -> EnrichmentPlan:
        async def pre_analysis() -> dict:
            return await self.extraction.analyze(MARKS_CARD_ENDPOINT, staged)

        def build_request(context: dict) -> AnalysisRequest:
            return AnalysisRequest(
                system_prompt=STRUCTURE_PROMPT,
                user_content=f"Extract basic academic data from this analysis:\n{context['detailedAnalysis']}",
                temperature=0,
                max_tokens=800
            )

        def build_fallback_request(context: dict) -> AnalysisRequest:
            text = extract_text_from_path(staged.path, staged.filename)
            context["extractedTextLength"] = len(text)
            if not text.strip():
                text = f"Marks card file: {staged.filename} ({staged.size} bytes). No readable text."
            return AnalysisRequest(
                system_prompt=FALLBACK_PROMPT,
                user_content=f"Extract basic academic data from this marks card:\n{text[:LOCAL_TEXT_CHAR_LIMIT]}",
                temperature=0,
                max_tokens=800
            )

        def decorate(result: dict, context: dict) -> dict:
            result["detailedAnalysis"] = context.get("detailedAnalysis")
            if "extractedTextLength" in context:
                result["extractedTextLength"] = MARKS_SCHEMA.fields["extractedTextLength"].coerce(context["extractedTextLength"])
            result["filename"] = context.get("filename") or staged.filename
            return result

        return EnrichmentPlan(
            name="marks",
            schema=MARKS_SCHEMA,
            build_request=build_request,
            fallbacks={
                FallbackTier.basic_fallback: basic_fallback,
                FallbackTier.error_fallback: error_fallback,
            },
            pre_analysis=pre_analysis,
            build_fallback_request=build_fallback_request,
            decorate=decorate,
            context={"filename": staged.filename}
        )

    async def analyze(self, staged: StagedUpload,
                      student_id: Optional[str] = None) -> Tuple[dict, FallbackTier]:
        logger.info("📊 Processing marks card: %s", staged.filename)
        result, tier = await self.ladder.run(self.build_plan(staged))

        if student_id and not tier.degraded:
            persist_result(self.store, student_id, "marks", result)
        return result, tier
