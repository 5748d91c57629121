from typing import Dict, List, Optional
import logging

from fastapi import Request

from .schemas import (
    AnalysisResult, Message, ResumeContext, ResumeSection, ResumeVersion, SectionType,
)

logger = logging.getLogger(__name__)


class RequestPending(RuntimeError):
    """Raised when a chat submission arrives while another is in flight."""


class ChatSession:
    """State for the single active conversation.

    Mutated only by the handler processing the current submission; the
    pending flag rejects overlapping submissions instead of locking.
    """

    def __init__(self):
        self.messages: List[Message] = []
        self.context = ResumeContext()
        self.sections: List[ResumeSection] = []
        self.versions: List[ResumeVersion] = []
        self.analysis: Optional[AnalysisResult] = None
        self.pending = False

    # ----- messages -----
    def add_message(self, role: str, content: str) -> Message:
        msg = Message(role=role, content=content, isStreaming=role == "assistant")
        self.messages.append(msg)
        return msg

    def get_message(self, message_id: str) -> Optional[Message]:
        return next((m for m in self.messages if m.id == message_id), None)

    def set_streaming(self, message_id: str, is_streaming: bool) -> None:
        msg = self.get_message(message_id)
        if msg is None:
            raise KeyError(message_id)
        msg.isStreaming = is_streaming

    # ----- resume sections -----
    def upsert_section(self, section_type: SectionType, content: str) -> ResumeSection:
        section = ResumeSection(type=section_type, content=content)
        for i, existing in enumerate(self.sections):
            if existing.type == section_type:
                self.sections[i] = section
                break
        else:
            self.sections.append(section)
        return section

    def save_version(self) -> ResumeVersion:
        version = ResumeVersion(sections=[s.model_copy() for s in self.sections])
        self.versions.append(version)
        logger.info(f"Saved resume version {version.id} with {len(version.sections)} sections")
        return version

    # ----- collected fields -----
    def merge_collected_fields(self, data: Dict[str, List[str]]) -> None:
        """Last write wins per field; lists are replaced, never unioned."""
        self.context.collectedData = {**self.context.collectedData, **data}

    def append_field_line(self, field: str, line: str) -> None:
        lines = list(self.context.collectedData.get(field, []))
        lines.append(line)
        self.context.collectedData = {**self.context.collectedData, field: lines}

    # ----- pending-request guard -----
    def begin_request(self) -> None:
        if self.pending:
            raise RequestPending("A previous message is still being processed")
        self.pending = True

    def end_request(self) -> None:
        self.pending = False


def get_session(request: Request) -> ChatSession:
    """FastAPI dependency returning the application's single session."""
    return request.app.state.session
