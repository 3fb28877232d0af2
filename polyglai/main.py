import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from polyglai.config import settings
from polyglai.db.supabase_client import get_store
from polyglai.logging_config import setup_logging
from polyglai.moderation.gate import content_validator
from polyglai.moderation.recorder import UsageRecorder
from polyglai.routes.extract import router as extract_router
from polyglai.routes.health import router as health_router
from polyglai.routes.moderation import router as moderation_router
from polyglai.routes.translate import router as translate_router

setup_logging(
    log_level=settings.log_level,
    log_dir=settings.log_dir,
    max_bytes=settings.log_max_bytes,
    backup_count=settings.log_backup_count,
)
logger = logging.getLogger("polyglai")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "PolyglAI server starting on %s:%s (moderation=%s)",
        settings.server_host,
        settings.server_port,
        settings.moderation_enabled,
    )
    recorder = UsageRecorder(get_store(), max_pending=settings.recorder_queue_size)
    content_validator.recorder = recorder
    await recorder.start()
    yield
    # Graceful shutdown: 대기 중인 위반 기록을 flush
    await recorder.stop(timeout=settings.recorder_shutdown_timeout_s)
    content_validator.recorder = None


app = FastAPI(
    title="PolyglAI Server",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(translate_router)
app.include_router(extract_router)
app.include_router(moderation_router, prefix="/admin/moderation")
