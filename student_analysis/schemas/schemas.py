"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional, List, Dict, Any


# ============================================================
# SOFT SKILLS SCHEMAS
# ============================================================

class SoftSkillsQuestion(BaseModel):
    id: int
    question: str
    category: str
    skills: List[str]

class SoftSkillsQuestionsResponse(BaseModel):
    success: bool = True
    questions: List[SoftSkillsQuestion]
    totalQuestions: int
    estimatedTime: str = "10-15 minutes"

class SoftSkillAnswer(BaseModel):
    model_config = ConfigDict(extra="ignore")

    answer: Optional[str] = ""

class SoftSkillsAnalyzeRequest(BaseModel):
    # Count is checked by the analyzer so a wrong count is a 400, not a 422
    responses: Optional[List[SoftSkillAnswer]] = None
    studentId: Optional[str] = None

class EnrichmentResponse(BaseModel):
    success: bool
    data: Dict[str, Any]
    message: str

class StudentInfo(BaseModel):
    name: Optional[str] = None
    usn: Optional[str] = None
    semester: Optional[int] = None

class SoftSkillsRecordResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any]
    studentInfo: StudentInfo


# ============================================================
# MARKS SCHEMAS
# ============================================================

class MarksAnalysisResponse(EnrichmentResponse):
    nextEnabled: bool = True


# ============================================================
# INTEGRATION SCHEMAS
# ============================================================

class GitHubRequest(BaseModel):
    githubUrl: Optional[str] = None

class LeetCodeRequest(BaseModel):
    leetcodeUrl: Optional[str] = None
    username: Optional[str] = None

class PhotoUploadResponse(BaseModel):
    url: str


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[str] = None
