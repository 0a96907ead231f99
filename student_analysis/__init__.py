"""
Student Analysis Backend
Aggregates a student's academic, coding-platform, resume and soft-skills data.

Architecture:
- MongoDB: Student records and the AI analyses attached to them
- Extraction service: Document OCR/analysis for resumes and marks cards
- Groq (OpenAI-compatible): Structuring and analysis, behind a fallback ladder
"""

__version__ = "2.0.0"
