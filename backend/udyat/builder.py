"""
Conversational resume builder.

Each user message is classified by an ordered list of rules (greeting,
resume request, known question, field answer, generate); the first rule
whose predicate matches handles the turn. Predicates are pure functions of
the message text and the current context.
"""
import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from .ai_services import ConfigurationError, GenerationError, GenerationGateway
from .prompts import (
    FIELD_PROMPTS, GENERATION_ERROR, GREETING, QUESTION_ANSWERS, SECTION_FORMAT_INSTRUCTIONS,
)
from .schemas import RESUME_FIELDS, Message, ResumeContext
from .session import ChatSession

logger = logging.getLogger(__name__)

GREETING_RX = re.compile(r"^(hi|hello|hey|greetings)", re.I)

_FIELD_ALTERNATION = "|".join(RESUME_FIELDS)
FIELD_RX = {
    field: re.compile(
        rf"{field}[:\s](.*?)(?=(?:{_FIELD_ALTERNATION})[:\s]|$)", re.I | re.S
    )
    for field in RESUME_FIELDS
}

# achievements/objective have no section of their own
SECTION_TYPE_FOR_FIELD = {
    "experience": "experience",
    "education": "education",
    "skills": "skills",
    "achievements": "summary",
    "objective": "summary",
}


# ----- pure helpers -----
def extract_fields(text: str) -> Tuple[Dict[str, List[str]], List[str]]:
    """Split an inline, label-separated message into field lines.

    Returns (found, missing) with missing in field order.
    """
    found: Dict[str, List[str]] = {}
    missing: List[str] = []
    for field in RESUME_FIELDS:
        m = FIELD_RX[field].search(text)
        lines = [ln for ln in m.group(1).strip().split("\n") if ln.strip()] if m else []
        if lines:
            found[field] = lines
        else:
            missing.append(field)
    return found, missing


def detect_section(text: str) -> Optional[str]:
    lowered = text.lower()
    return next((f for f in RESUME_FIELDS if f in lowered), None)


def match_question(text: str) -> Optional[str]:
    lowered = text.lower()
    return next((k for k in QUESTION_ANSWERS if k in lowered), None)


def _bullets(lines: Optional[List[str]]) -> str:
    return "\n".join(f"- {ln}" for ln in lines) if lines else ""


def render_resume(data: Dict[str, List[str]]) -> str:
    """Render collected fields as a markdown resume.

    Headings of absent fields are kept with an empty body.
    """
    objective = data.get("objective")
    summary = "## Professional Summary\n" + "\n".join(objective) if objective else ""
    return f"""# Professional Resume

{summary}

## Professional Experience
{_bullets(data.get("experience"))}

## Education
{_bullets(data.get("education"))}

## Skills & Expertise
{_bullets(data.get("skills"))}

## Key Achievements
{_bullets(data.get("achievements"))}"""


def field_request(field: str) -> str:
    return f"- {field}:\n{FIELD_PROMPTS[field]}"


def build_generation_prompt(text: str, context: ResumeContext) -> str:
    if context.currentSection:
        head = f"Create a professional {context.currentSection} section for: {text}"
    else:
        head = f"Create a professional resume section for: {text}"
    return f"{head}\n{SECTION_FORMAT_INSTRUCTIONS}"


# ----- classification rules -----
def is_greeting(text: str, context: ResumeContext) -> bool:
    return GREETING_RX.match(text) is not None


def is_resume_request(text: str, context: ResumeContext) -> bool:
    lowered = text.lower()
    return "create" in lowered and "resume" in lowered


def is_known_question(text: str, context: ResumeContext) -> bool:
    return "?" in text and match_question(text) is not None


def is_field_answer(text: str, context: ResumeContext) -> bool:
    return context.type == "resume" and context.currentSection is not None


def always(text: str, context: ResumeContext) -> bool:
    return True


@dataclass(frozen=True)
class Rule:
    intent: str
    matches: Callable[[str, ResumeContext], bool]


RULES = (
    Rule("greeting", is_greeting),
    Rule("resume_request", is_resume_request),
    Rule("question", is_known_question),
    Rule("field_answer", is_field_answer),
    Rule("generate", always),
)


def classify(text: str, context: ResumeContext) -> str:
    return next(r.intent for r in RULES if r.matches(text, context))


class ResumeBuilder:
    """Drives one conversation turn against a ChatSession."""

    def __init__(self, session: ChatSession, gateway: GenerationGateway):
        self.session = session
        self.gateway = gateway
        self._handlers = {
            "greeting": self._handle_greeting,
            "resume_request": self._handle_resume_request,
            "question": self._handle_question,
            "field_answer": self._handle_field_answer,
            "generate": self._handle_generate,
        }

    async def handle(self, text: str) -> Message:
        """Record the user's message and return the assistant reply."""
        self.session.add_message("user", text)
        intent = classify(text, self.session.context)
        logger.info(f"Chat turn classified as {intent}")
        return await self._handlers[intent](text)

    async def _handle_greeting(self, text: str) -> Message:
        self.session.context.type = "greeting"
        return self.session.add_message("assistant", GREETING)

    async def _handle_question(self, text: str) -> Message:
        self.session.context.type = "question"
        return self.session.add_message("assistant", QUESTION_ANSWERS[match_question(text)])

    async def _handle_resume_request(self, text: str) -> Message:
        found, missing = extract_fields(text)
        ctx = self.session.context
        self.session.merge_collected_fields(found)
        ctx.type = "resume"
        ctx.missingFields = missing
        ctx.currentSection = missing[0] if missing else None
        ctx.isComplete = not missing

        if not missing:
            resume = render_resume(found)
            self.session.upsert_section("complete", resume)
            return self.session.add_message(
                "assistant",
                f"Great! I've created a complete resume based on your information:\n\n"
                f"{resume}\n\nWould you like me to refine any section?",
            )

        got = "\n".join(f"✓ {field}" for field in found)
        needed = "\n\n".join(field_request(field) for field in missing)
        return self.session.add_message(
            "assistant",
            f"I'll help you create a professional resume. Here's what I've got so far:\n\n"
            f"{got}\n\nI still need information about:\n{needed}\n\n"
            f"Let's start with your {missing[0]}. Please provide the details.",
        )

    async def _handle_field_answer(self, text: str) -> Message:
        ctx = self.session.context
        self.session.append_field_line(ctx.currentSection, text)

        if len(ctx.missingFields) == 1:
            resume = render_resume(ctx.collectedData)
            self.session.upsert_section("complete", resume)
            ctx.isComplete = True
            ctx.missingFields = []
            ctx.currentSection = None
            return self.session.add_message(
                "assistant",
                f"Perfect! I've collected all the information. Here's your complete resume:\n\n"
                f"{resume}\n\nWould you like me to refine any section?",
            )

        ctx.missingFields = ctx.missingFields[1:]
        ctx.currentSection = ctx.missingFields[0]
        return self.session.add_message(
            "assistant",
            f"Great! Now, let's work on your {ctx.currentSection}:\n"
            f"{FIELD_PROMPTS[ctx.currentSection]}",
        )

    async def _handle_generate(self, text: str) -> Message:
        section = detect_section(text)
        prompt = build_generation_prompt(text, self.session.context)
        try:
            content = await self.gateway.generate(prompt)
        except (ConfigurationError, GenerationError) as e:
            logger.error(f"Resume content generation failed: {e}")
            return self.session.add_message("assistant", GENERATION_ERROR)

        reply = self.session.add_message("assistant", content)
        if section:
            self.session.upsert_section(SECTION_TYPE_FOR_FIELD[section], content)
        return reply
