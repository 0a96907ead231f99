"""
Document Extraction Service Client

The extraction service is a separate OCR/analysis microservice:
- GET  /health             -> {"status": "healthy"}
- POST /upload-resume      -> {"success": true, "analysis": "...", "filename": "...", "extracted_text_length": 1234}
- POST /upload-marks-card  -> same shape, or {"success": false, "error": "..."}

Anything other than a successful payload raises TransportError, which the
fallback ladder turns into the LLM-only tier.
"""
import logging
from typing import Dict, Any

import httpx

from student_analysis.core.config import Settings, get_settings
from student_analysis.core.errors import TransportError
from student_analysis.utils.file_upload import StagedUpload

logger = logging.getLogger(__name__)

RESUME_ENDPOINT = "/upload-resume"
MARKS_CARD_ENDPOINT = "/upload-marks-card"


class ExtractionServiceClient:
    def __init__(self, settings: Settings):
        self.base_url = settings.extraction_service_url.rstrip("/")
        self.health_timeout = settings.health_timeout_seconds
        self.analysis_timeout = settings.analysis_timeout_seconds

    async def is_healthy(self) -> bool:
        """Probe /health with the short timeout."""
        try:
            async with httpx.AsyncClient(timeout=self.health_timeout) as client:
                response = await client.get(f"{self.base_url}/health")
            return response.status_code == 200 and response.json().get("status") == "healthy"
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Extraction service health check failed: %s", e)
            return False

    async def analyze(self, endpoint: str, staged: StagedUpload) -> Dict[str, Any]:
        """
        Upload a staged document for analysis.

        Returns:
            {"detailedAnalysis": str, "filename": str, "extractedTextLength": int}

        Raises:
            TransportError on network failure, timeout, non-2xx or success=false
        """
        if not await self.is_healthy():
            raise TransportError("Extraction service unavailable")

        try:
            with open(staged.path, "rb") as fh:
                files = {"file": (staged.filename, fh.read(), staged.content_type)}
            async with httpx.AsyncClient(timeout=self.analysis_timeout) as client:
                logger.info("Sending %s to extraction service %s", staged.filename, endpoint)
                response = await client.post(f"{self.base_url}{endpoint}", files=files)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise TransportError(f"Extraction service returned {e.response.status_code}", e.response.status_code)
        except httpx.HTTPError as e:
            raise TransportError(f"Extraction service request failed: {e}")
        except ValueError:
            raise TransportError("Extraction service returned invalid JSON")
        except OSError as e:
            raise TransportError(f"Could not read staged file {staged.filename}: {e}")

        if not isinstance(data, dict) or not data.get("success"):
            error = data.get("error") if isinstance(data, dict) else None
            raise TransportError(error or "Extraction service analysis failed")

        analysis = data.get("analysis")
        if not isinstance(analysis, str) or not analysis.strip():
            raise TransportError("Extraction service returned an empty analysis")

        return {
            "detailedAnalysis": analysis,
            "filename": data.get("filename") or staged.filename,
            "extractedTextLength": data.get("extracted_text_length") or 0,
        }


# Singleton instance
_extraction_client: ExtractionServiceClient = None


def get_extraction_client() -> ExtractionServiceClient:
    """Get or create extraction service client (singleton pattern)"""
    global _extraction_client
    if _extraction_client is None:
        _extraction_client = ExtractionServiceClient(get_settings())
    return _extraction_client
