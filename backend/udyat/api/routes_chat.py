from typing import List
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from ..ai_services import get_generation_gateway
from ..builder import ResumeBuilder
from ..schemas import ChatRequest, ChatResponse, ResumeVersion, SessionOut
from ..session import ChatSession, RequestPending, get_session
from ..streaming import chunk_delay, stream_words

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(body: ChatRequest, session: ChatSession = Depends(get_session)):
    if not body.message.strip():
        raise HTTPException(400, "message required")
    try:
        session.begin_request()
    except RequestPending as e:
        raise HTTPException(409, str(e))
    try:
        reply = await ResumeBuilder(session, get_generation_gateway()).handle(body.message)
    finally:
        session.end_request()
    return ChatResponse(reply=reply, context=session.context, sections=session.sections)


@router.get("/session", response_model=SessionOut)
def get_session_state(session: ChatSession = Depends(get_session)):
    return SessionOut(
        messages=session.messages,
        context=session.context,
        sections=session.sections,
        versions=session.versions,
        hasAnalysis=session.analysis is not None,
    )


@router.get("/session/messages/{message_id}/stream")
async def stream_message(message_id: str, session: ChatSession = Depends(get_session)):
    msg = session.get_message(message_id)
    if not msg:
        raise HTTPException(404, "message not found")
    delay = chunk_delay()

    async def chunks():
        async for chunk in stream_words(msg.content, delay):
            yield chunk
        session.set_streaming(msg.id, False)

    return StreamingResponse(chunks(), media_type="text/plain")


@router.post("/session/versions", response_model=ResumeVersion)
def save_version(session: ChatSession = Depends(get_session)):
    return session.save_version()


@router.get("/session/versions", response_model=List[ResumeVersion])
def list_versions(session: ChatSession = Depends(get_session)):
    return session.versions
