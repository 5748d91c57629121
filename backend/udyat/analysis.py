"""
Resume analysis: PDF extraction plus one fixed prompt to the generation
gateway. A failed or unparseable model reply never raises; it degrades to
an AnalysisResult whose summary carries the error and whose lists are empty.
"""
import json
import logging
import re

from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from .ai_services import GenerationError, GenerationGateway
from .ingest import ExtractedResume, extract_resume
from .prompts import RESUME_ANALYSIS_PROMPT
from .schemas import AnalysisResult, UploadAnalysis

logger = logging.getLogger(__name__)

CODE_FENCE_RX = re.compile(r"```json|```")


def strip_code_fences(text: str) -> str:
    return CODE_FENCE_RX.sub("", text).strip()


def build_analysis_prompt(extracted: ExtractedResume) -> str:
    return RESUME_ANALYSIS_PROMPT.format(
        pdf_json=json.dumps(extracted.pdf_data(), indent=2),
        raw_text=extracted.raw_text,
    )


def parse_analysis(reply: str) -> AnalysisResult:
    """Parse the model's JSON reply, degrading instead of raising."""
    try:
        data = json.loads(strip_code_fences(reply))
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
        return AnalysisResult.model_validate(data)
    except (ValueError, ValidationError) as e:
        # json.JSONDecodeError is a ValueError
        logger.error(f"Resume analysis reply could not be parsed: {e}")
        return degraded_analysis(str(e))


def degraded_analysis(error: str) -> AnalysisResult:
    return AnalysisResult(summary=error or "AI analysis failed.")


class ResumeAnalyzer:
    def __init__(self, gateway: GenerationGateway):
        self.gateway = gateway

    async def analyze(self, pdf_bytes: bytes) -> UploadAnalysis:
        """Extract and analyse an uploaded resume.

        ExtractionError propagates; generation and parse failures degrade.
        """
        extracted = await run_in_threadpool(extract_resume, pdf_bytes)
        logger.info(f"Extracted {len(extracted.pages)} pages ({len(extracted.raw_text)} chars)")

        try:
            reply = await self.gateway.generate(build_analysis_prompt(extracted))
            analysis = parse_analysis(reply)
        except GenerationError as e:
            logger.error(f"Resume analysis failed: {e}")
            analysis = degraded_analysis(str(e))

        return UploadAnalysis(
            **analysis.model_dump(),
            rawText=extracted.raw_text,
            pdfData=extracted.pdf_data(),
        )
