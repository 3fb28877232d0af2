"""Health Check 엔드포인트."""

import time

from fastapi import APIRouter

from polyglai.moderation.gate import content_validator

router = APIRouter(tags=["health"])

_start_time = time.time()


@router.get("/health")
async def health_check():
    recorder = content_validator.recorder
    return {
        "status": "ok",
        "recorder_running": bool(recorder and recorder.is_running),
        "pending_records": recorder.pending if recorder else 0,
        "uptime": round(time.time() - _start_time),
    }
