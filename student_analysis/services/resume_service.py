"""
Resume Analysis Service

PRIMARY:      extraction service analyses the file, Groq structures the analysis
LLM FALLBACK: Groq alone, on text read locally from the file (or just its name)
BASIC/ERROR:  placeholder structure asking for manual review

The result always carries skills, projects, experience, education,
detailedAnalysis, filename, extractedTextLength and source.
"""

import logging
from typing import Optional, Tuple

from student_analysis.services.extraction_client import ExtractionServiceClient, RESUME_ENDPOINT
from student_analysis.services.fallback_ladder import EnrichmentPlan, FallbackLadder, FallbackTier
from student_analysis.services.llm_client import AnalysisRequest, GroqClient
from student_analysis.services.normalizer import Array, Number, Obj, Text
from student_analysis.services.persistence import persist_result
from student_analysis.services.student_store import StudentStore
from student_analysis.utils.file_upload import StagedUpload, extract_text_from_path

logger = logging.getLogger(__name__)

# Prompt size caps
ANALYSIS_CHAR_LIMIT = 2000
LOCAL_TEXT_CHAR_LIMIT = 1000


RESUME_SCHEMA = Obj({
    "skills": Array(Text()),
    "projects": Array(Obj({
        "title": Text("Untitled Project"),
        "description": Text(""),
        "technologies": Array(Text()),
    })),
    "experience": Array(Obj({
        "company": Text(""),
        "position": Text(""),
        "duration": Text(""),
        "description": Text(""),
    })),
    "education": Array(Obj({
        "degree": Text(""),
        "institution": Text(""),
        "year": Text(""),
    })),
    "detailedAnalysis": Text("Resume uploaded successfully. Manual review recommended for detailed analysis."),
    "extractedTextLength": Number(0, integer=True, minimum=0),
})


STRUCTURE_PROMPT = """Extract resume information from this analysis and return ONLY valid JSON:
{
  "skills": ["Programming Language", "Framework", "Tool"],
  "projects": [{"title": "Project Name", "description": "Brief description", "technologies": ["Tech"]}],
  "experience": [{"company": "Company Name", "position": "Job Title", "duration": "Time Period"}],
  "education": [{"degree": "Degree Type", "institution": "School Name", "year": "Year"}]
}

Extract actual information mentioned in the analysis. If sections are empty, use empty arrays."""


FALLBACK_PROMPT = """You are analyzing a resume. Based on the filename and any available content, provide a structured analysis. Return ONLY valid JSON:
{
  "skills": ["JavaScript", "Python", "React"],
  "projects": [{"title": "Web Application", "description": "Full-stack web application"}],
  "experience": [{"company": "Tech Company", "position": "Developer", "duration": "2022-2023"}],
  "education": [{"degree": "Computer Science", "institution": "University", "year": "2021"}],
  "detailedAnalysis": "Based on the resume file..."
}

If you cannot extract specific information, use empty arrays and mention the limitation in detailedAnalysis."""


def basic_fallback(context: dict) -> dict:
    return {
        "skills": ["Resume uploaded successfully"],
        "projects": [{
            "title": "Resume Analysis",
            "description": "Resume has been uploaded. Please review the file manually for detailed information."
        }],
        "experience": [{"company": "Analysis pending", "position": "Manual review required", "duration": "N/A"}],
        "education": [{"degree": "Analysis pending", "institution": "Manual review required", "year": "N/A"}],
        "detailedAnalysis": context.get("detailedAnalysis") or (
            "Resume uploaded successfully. The file is saved and can be reviewed manually. "
            "Automated analysis was not available."
        ),
        "extractedTextLength": context.get("extractedTextLength", 0),
    }


def error_fallback(context: dict) -> dict:
    return {
        "skills": ["Resume uploaded"],
        "projects": [{"title": "Resume Upload", "description": "Your resume has been uploaded successfully"}],
        "experience": [{"company": "Upload completed", "position": "Ready for manual review", "duration": "N/A"}],
        "education": [{"degree": "Upload completed", "institution": "Ready for manual review", "year": "N/A"}],
        "detailedAnalysis": context.get("detailedAnalysis") or (
            "Resume uploaded successfully. Automated analysis is temporarily unavailable, "
            "but your file is available for manual review."
        ),
        "extractedTextLength": context.get("extractedTextLength", 0),
    }


def read_local_content(staged: StagedUpload) -> str:
    """Text for the LLM-only tier: the file's own text, or a description of it."""
    text = extract_text_from_path(staged.path, staged.filename)
    if text.strip():
        return text
    return f"Resume file: {staged.filename} ({staged.size} bytes)"


class ResumeAnalyzer:
    def __init__(self, llm: GroqClient, extraction: ExtractionServiceClient, store: StudentStore):
        self.ladder = FallbackLadder(llm)
        self.extraction = extraction
        self.store = store

    def build_plan(self, staged: StagedUpload) -> EnrichmentPlan:
        async def pre_analysis() -> dict:
            return await self.extraction.analyze(RESUME_ENDPOINT, staged)

        def build_request(context: dict) -> AnalysisRequest:
            analysis = context["detailedAnalysis"][:ANALYSIS_CHAR_LIMIT]
            return AnalysisRequest(
                system_prompt=STRUCTURE_PROMPT,
                user_content=f"Extract resume data from: {analysis}",
                temperature=0,
                max_tokens=1000
            )

        def build_fallback_request(context: dict) -> AnalysisRequest:
            content = read_local_content(staged)
            context["extractedTextLength"] = len(content)
            return AnalysisRequest(
                system_prompt=FALLBACK_PROMPT,
                user_content=f"Analyze this resume content: {content[:LOCAL_TEXT_CHAR_LIMIT]}",
                temperature=0.3,
                max_tokens=1500
            )

        def decorate(result: dict, context: dict) -> dict:
            # The extraction service's analysis beats anything the structuring call wrote
            if context.get("detailedAnalysis"):
                result["detailedAnalysis"] = context["detailedAnalysis"]
            if "extractedTextLength" in context:
                result["extractedTextLength"] = RESUME_SCHEMA.fields["extractedTextLength"].coerce(context["extractedTextLength"])
            result["filename"] = context.get("filename") or staged.filename
            return result

        return EnrichmentPlan(
            name="resume",
            schema=RESUME_SCHEMA,
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
        logger.info("📄 Processing resume: %s (%d bytes)", staged.filename, staged.size)
        result, tier = await self.ladder.run(self.build_plan(staged))

        if student_id and not tier.degraded:
            persist_result(self.store, student_id, "resume", result)
        return result, tier
