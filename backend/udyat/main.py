import os
import logging
from typing import Optional
from fastapi import FastAPI, Depends, UploadFile, File, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

from .ai_services import ConfigurationError, GenerationError, get_generation_gateway
from .analysis import ResumeAnalyzer
from .cover_letter import CoverLetterComposer
from .ingest import ExtractionError
from .schemas import (
    CoverLetterRequest, CoverLetterResponse, GenerateRequest, GenerateResponse, UploadAnalysis,
)
from .session import ChatSession, get_session
from .streaming import chunk_delay, stream_words

load_dotenv()
logger = logging.getLogger(__name__)
app = FastAPI(title="UdyatAI Resume Coach Backend")

origins_env = os.getenv("CORS_ORIGINS")
origins = [o.strip() for o in (origins_env or "").split(",") if o.strip()]
if not origins:
    # Sensible default for local dev (Next.js 3000, Vite 5173)
    origins = ["http://localhost:3000", "http://localhost:5173"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# One conversation per running instance
app.state.session = ChatSession()

MISSING_KEY = "API key not configured"


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())[1:])
        problems.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg", ""))
    return JSONResponse({"error": "; ".join(problems) or "Invalid request"}, status_code=400)


@app.get("/health")
def health():
    return {"ok": True}


from .api.routes_chat import router as chat_router
app.include_router(chat_router)


# ----- Generation -----
async def _generate_or_raise(prompt: str) -> str:
    gateway = get_generation_gateway()
    try:
        return await gateway.generate(prompt)
    except ConfigurationError:
        raise HTTPException(500, MISSING_KEY)
    except GenerationError as e:
        logger.error(f"API Error: {e}")
        raise HTTPException(500, str(e) or "Failed to generate response")


@app.post("/api/generate", response_model=GenerateResponse)
async def generate(body: GenerateRequest):
    """Prompt in, generated text out"""
    return GenerateResponse(message=await _generate_or_raise(body.prompt))


@app.post("/api/generate/stream")
async def generate_stream(body: GenerateRequest):
    """Same as /api/generate but delivers the text as a word stream"""
    text = await _generate_or_raise(body.prompt)
    return StreamingResponse(stream_words(text, chunk_delay()), media_type="text/plain")


# ----- Resume upload + analysis -----
@app.post("/api/upload-resume", response_model=UploadAnalysis)
async def upload_resume(resume: Optional[UploadFile] = File(None),
                        session: ChatSession = Depends(get_session)):
    """Analyse an uploaded PDF resume (multipart field `resume`)"""
    gateway = get_generation_gateway()
    if not gateway.configured:
        raise HTTPException(500, MISSING_KEY)
    if resume is None or not resume.filename:
        raise HTTPException(400, "No file uploaded")

    # A new upload always replaces the previous analysis
    session.analysis = None
    contents = await resume.read()
    try:
        result = await ResumeAnalyzer(gateway).analyze(contents)
    except ExtractionError as e:
        raise HTTPException(500, str(e))

    session.analysis = result
    logger.info(f"Analysed resume {resume.filename}: {len(result.skills)} skills")
    return result


# ----- Cover letter -----
@app.post("/api/cover-letter", response_model=CoverLetterResponse)
async def cover_letter(body: CoverLetterRequest, session: ChatSession = Depends(get_session)):
    """Draft a cover letter from the latest (or supplied) resume analysis"""
    gateway = get_generation_gateway()
    if not gateway.configured:
        raise HTTPException(500, MISSING_KEY)
    analysis = body.analysis or session.analysis
    if analysis is None:
        raise HTTPException(400, "Resume analysis is missing. Please upload your resume first.")

    try:
        letter = await CoverLetterComposer(gateway).compose(
            analysis, body.company, body.role, body.jobDescription
        )
    except GenerationError as e:
        logger.error(f"Cover letter generation failed: {e}")
        letter = "Could not generate cover letter."
    return CoverLetterResponse(coverLetter=letter)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
