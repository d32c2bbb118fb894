"""
Policy RAG - FastAPI application for insurance policy Q&A

Endpoints:
- Upload policy documents (PDF/TXT) -> metadata + titled, keyword-annotated sections
- List stored policies
- Lexical section search (keyword overlap, title, context, position)
- Chat: ranked sections forwarded to Gemini as answer context

Collaborators (store, text extractor, generator) are created once in the
lifespan handler, kept on app.state and reached through dependency functions.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Literal, Optional

from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .chat import ChatService
from .config import Settings, load_env_files, load_settings
from .document_processor import DocumentProcessor
from .exceptions import EmptyDocumentError, GenerationError, TextExtractionError
from .file_validator import FileValidator
from .generation import GeminiGenerator
from .ingestion import PolicyIngestor
from .lexical import RelevanceRanker
from .logging_config import setup_logging
from .models import ChatMessage, PolicyDocument, QueryMatch
from .store import PolicyStore, create_store

# .env.local / .env before anything reads the environment
load_env_files()

logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"
APP_START_TIME = datetime.utcnow()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup resources"""
    settings = load_settings()
    setup_logging(
        log_file=settings.log_file,
        console_level=getattr(logging, settings.log_level, logging.INFO),
        file_level=logging.DEBUG,  # Always DEBUG in file for troubleshooting
    )

    logger.info(f"Connecting to policy store ({settings.store_backend})...")
    store = create_store(settings)
    await store.connect()

    processor = DocumentProcessor(
        ocr_min_chars=settings.ocr_min_chars,
        ocr_language=settings.ocr_language,
    )

    generator = None
    if settings.project_id:
        generator = GeminiGenerator(
            model_name=settings.generation_model,
            project_id=settings.project_id,
            location=settings.location,
            temperature=settings.generation_temperature,
            max_output_tokens=settings.generation_max_tokens,
        )
    else:
        logger.warning("GCP_PROJECT_ID not set - chat endpoint disabled")

    app.state.settings = settings
    app.state.store = store
    app.state.ingestor = PolicyIngestor(processor, store)
    app.state.ranker = RelevanceRanker()
    app.state.chat_service = (
        ChatService(
            store,
            generator,
            ranker=app.state.ranker,
            context_sections=settings.context_sections,
            history_messages=settings.history_messages,
        )
        if generator is not None
        else None
    )
    logger.info("Policy RAG initialized")

    yield

    logger.info("Shutting down...")
    if generator is not None:
        generator.close()
    await store.disconnect()


app = FastAPI(
    title="Policy RAG API",
    description="Insurance policy ingestion and retrieval-augmented Q&A",
    version=APP_VERSION,
    lifespan=lifespan,
)

# CORS middleware for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

file_validator = FileValidator()


# Dependencies
def get_store(request: Request) -> PolicyStore:
    return request.app.state.store


def get_ingestor(request: Request) -> PolicyIngestor:
    return request.app.state.ingestor


def get_ranker(request: Request) -> RelevanceRanker:
    return getattr(request.app.state, "ranker", None) or RelevanceRanker()


def get_chat_service(request: Request) -> ChatService:
    service = getattr(request.app.state, "chat_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Answer generation not configured (set GCP_PROJECT_ID)",
        )
    return service


# Request/Response models
class HealthResponse(BaseModel):
    status: str
    version: str
    started_at: str
    uptime_seconds: float


class PolicyInfo(BaseModel):
    id: Optional[int]
    title: str
    version: str
    effective_date: datetime
    created_at: Optional[datetime] = None

    @classmethod
    def from_policy(cls, policy: PolicyDocument) -> "PolicyInfo":
        return cls(
            id=policy.id,
            title=policy.title,
            version=policy.version,
            effective_date=policy.effective_date,
            created_at=policy.created_at,
        )


class PolicyUploadResponse(BaseModel):
    success: bool
    message: str
    policy: PolicyInfo
    section_count: int
    stored_sections: int
    failed_sections: List[str] = []


class PolicyListResponse(BaseModel):
    policies: List[PolicyInfo]
    message: str


class SearchRequest(BaseModel):
    query: str = Field(..., description="User question", min_length=1)


class SectionMatchResponse(BaseModel):
    title: str
    score: float
    matched_keywords: List[str]
    section_order: int
    policy_id: Optional[int] = None
    content: str

    @classmethod
    def from_match(cls, match: QueryMatch) -> "SectionMatchResponse":
        return cls(
            title=match.section.title,
            score=match.score,
            matched_keywords=match.matched_keywords,
            section_order=match.section.order,
            policy_id=match.section.policy_id,
            content=match.section.content,
        )


class SearchResponse(BaseModel):
    query: str
    results: List[SectionMatchResponse]


class ChatMessageModel(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    messages: List[ChatMessageModel]


class ChatSource(BaseModel):
    title: str
    score: float
    matched_keywords: List[str]


class ChatResponse(BaseModel):
    role: Literal["assistant"] = "assistant"
    content: str
    sources: List[ChatSource] = []


@app.get("/", response_model=dict)
async def root():
    return {
        "service": "Policy RAG API",
        "version": APP_VERSION,
        "docs": "/docs",
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    now = datetime.utcnow()
    return HealthResponse(
        status="healthy",
        version=APP_VERSION,
        started_at=APP_START_TIME.isoformat() + "Z",
        uptime_seconds=(now - APP_START_TIME).total_seconds(),
    )


@app.post("/v1/policies/upload", response_model=PolicyUploadResponse)
async def upload_policy(
    file: UploadFile = File(...),
    ingestor: PolicyIngestor = Depends(get_ingestor),
):
    """
    Upload a policy document (PDF, TXT or MD)

    Pipeline: validate -> extract text (OCR fallback for scanned PDFs) ->
    metadata -> store policy -> segment into sections -> store sections.
    Sections that fail to store are skipped and listed in failed_sections.
    """
    file_content = await file.read()
    file_validator.validate(file.filename, file_content)

    try:
        result = await ingestor.ingest(file_content, file.filename)
    except (EmptyDocumentError, TextExtractionError) as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except Exception as e:
        logger.error(f"Policy processing failed for {file.filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to process policy: {e}",
        )

    return PolicyUploadResponse(
        success=True,
        message="Policy successfully processed",
        policy=PolicyInfo.from_policy(result.policy),
        section_count=result.section_count,
        stored_sections=result.stored_sections,
        failed_sections=result.failed_sections,
    )


@app.get("/v1/policies", response_model=PolicyListResponse)
async def list_policies(store: PolicyStore = Depends(get_store)):
    """List stored policies, newest first"""
    try:
        policies = await store.list_policies()
    except Exception as e:
        logger.error(f"Policy listing failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Query failed: {e}",
        )

    return PolicyListResponse(
        policies=[PolicyInfo.from_policy(policy) for policy in policies],
        message=f"Found {len(policies)} policies",
    )


@app.post("/v1/sections/search", response_model=SearchResponse)
async def search_sections(
    request: SearchRequest,
    store: PolicyStore = Depends(get_store),
    ranker: RelevanceRanker = Depends(get_ranker),
):
    """Rank all stored sections against a query (top 3)"""
    try:
        matches = await ranker.rank_from_store(request.query, store)
    except Exception as e:
        logger.error(f"Section search failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Section search failed: {e}",
        )

    return SearchResponse(
        query=request.query,
        results=[SectionMatchResponse.from_match(match) for match in matches],
    )


@app.post("/v1/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
):
    """Answer the last user message using ranked policy sections as context"""
    messages = [ChatMessage(role=m.role, content=m.content) for m in request.messages]

    try:
        answer = await chat_service.answer(messages)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except GenerationError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except Exception as e:
        logger.error(f"Chat failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate answer: {e}",
        )

    return ChatResponse(
        content=answer.content,
        sources=[
            ChatSource(
                title=match.section.title,
                score=match.score,
                matched_keywords=match.matched_keywords,
            )
            for match in answer.matches
        ],
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": str(exc),
        },
    )


def run(settings: Optional[Settings] = None):
    """Run the API with uvicorn (console entry point)"""
    import uvicorn

    settings = settings or load_settings()
    uvicorn.run("policy_rag.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
