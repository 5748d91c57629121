from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import List, Optional, Dict, Any, Literal
import time
import uuid

RESUME_FIELDS = ("experience", "education", "skills", "achievements", "objective")

ResumeField = Literal["experience", "education", "skills", "achievements", "objective"]
SectionType = Literal["experience", "education", "skills", "summary", "complete"]
ContextType = Optional[Literal["greeting", "question", "resume"]]


def uid() -> str:
    return uuid.uuid4().hex


def now_ms() -> int:
    return int(time.time() * 1000)


# ----- Conversation -----
class Message(BaseModel):
    id: str = Field(default_factory=uid)
    role: Literal["user", "assistant"]
    content: str
    timestamp: int = Field(default_factory=now_ms)
    isStreaming: bool = False


class ResumeSection(BaseModel):
    id: str = Field(default_factory=uid)
    type: SectionType
    content: str


class ResumeVersion(BaseModel):
    id: str = Field(default_factory=uid)
    sections: List[ResumeSection]
    timestamp: int = Field(default_factory=now_ms)


class ResumeContext(BaseModel):
    type: ContextType = None
    missingFields: List[ResumeField] = []
    currentSection: Optional[ResumeField] = None
    collectedData: Dict[ResumeField, List[str]] = {}
    isComplete: bool = False


# ----- Analysis -----
def clamp_score(v) -> int:
    try:
        v = int(round(float(v)))
    except (TypeError, ValueError):
        return 0
    return max(0, min(100, v))


class ModelReply(BaseModel):
    """Record parsed out of a model reply; null fields fall back to their defaults."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class SkillScore(ModelReply):
    name: str = ""
    percentage: int = 0
    reason: str = ""

    @field_validator("percentage", mode="before")
    @classmethod
    def _clamp(cls, v):
        return clamp_score(v)


class ResumeSegment(ModelReply):
    name: str = ""
    content: str = ""


class ExperienceEntry(ModelReply):
    title: str = ""
    company: str = ""
    duration: str = ""
    highlights: List[str] = []


class EducationEntry(ModelReply):
    degree: str = ""
    institution: str = ""
    year: str = ""

    @field_validator("year", mode="before")
    @classmethod
    def _year_as_text(cls, v):
        return "" if v is None else str(v)


class FormattingAssessment(ModelReply):
    score: int = 0
    feedback: List[str] = []

    @field_validator("score", mode="before")
    @classmethod
    def _clamp(cls, v):
        return clamp_score(v)


class AnalysisResult(ModelReply):
    summary: str = ""
    valueProposition: str = ""
    highlights: List[str] = []
    skills: List[SkillScore] = []
    segments: List[ResumeSegment] = []
    experience: List[ExperienceEntry] = []
    education: List[EducationEntry] = []
    formatting: FormattingAssessment = Field(default_factory=FormattingAssessment)
    missingKeywords: List[str] = []
    improvementSuggestions: List[str] = []

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_keys(cls, data):
        # Older prompts answered with "value" instead of "valueProposition"
        if isinstance(data, dict) and data.get("valueProposition") is None and data.get("value") is not None:
            data = {**data, "valueProposition": data["value"]}
        return data

    @field_validator("highlights", mode="before")
    @classmethod
    def _highlights_as_list(cls, v):
        if isinstance(v, str):
            return [v] if v.strip() else []
        return v

    @field_validator("skills", mode="before")
    @classmethod
    def _skills_from_names(cls, v):
        if isinstance(v, list):
            return [{"name": s} if isinstance(s, str) else s for s in v if s is not None]
        return v

    def skill_names(self) -> List[str]:
        return [s.name for s in self.skills]


class UploadAnalysis(AnalysisResult):
    rawText: str = ""
    pdfData: Dict[str, Any] = {}


# ----- Requests / responses -----
class GenerateRequest(BaseModel):
    prompt: str = Field(min_length=1)


class GenerateResponse(BaseModel):
    message: str


class ChatRequest(BaseModel):
    message: str


class ChatResponse(BaseModel):
    reply: Message
    context: ResumeContext
    sections: List[ResumeSection]


class SessionOut(BaseModel):
    messages: List[Message]
    context: ResumeContext
    sections: List[ResumeSection]
    versions: List[ResumeVersion]
    hasAnalysis: bool


class CoverLetterRequest(BaseModel):
    company: str = Field(min_length=1)
    role: str = Field(min_length=1)
    jobDescription: Optional[str] = None
    analysis: Optional[AnalysisResult] = None  # defaults to the session's latest upload


class CoverLetterResponse(BaseModel):
    coverLetter: str
