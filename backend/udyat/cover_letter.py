from typing import Optional

from .ai_services import GenerationGateway
from .prompts import COVER_LETTER_GENERIC, COVER_LETTER_PROMPT, COVER_LETTER_WITH_JD
from .schemas import AnalysisResult


def build_cover_letter_prompt(
    analysis: AnalysisResult, company: str, role: str, job_description: Optional[str] = None
) -> str:
    if job_description and job_description.strip():
        job_instructions = COVER_LETTER_WITH_JD.format(job_description=job_description.strip())
    else:
        job_instructions = COVER_LETTER_GENERIC
    return COVER_LETTER_PROMPT.format(
        summary=analysis.summary,
        value_proposition=analysis.valueProposition,
        highlights=", ".join(analysis.highlights),
        skills=", ".join(analysis.skill_names()),
        role=role,
        company=company,
        job_instructions=job_instructions,
    )


class CoverLetterComposer:
    def __init__(self, gateway: GenerationGateway):
        self.gateway = gateway

    async def compose(
        self, analysis: AnalysisResult, company: str, role: str, job_description: Optional[str] = None
    ) -> str:
        """Return the model's letter verbatim."""
        return await self.gateway.generate(
            build_cover_letter_prompt(analysis, company, role, job_description)
        )
