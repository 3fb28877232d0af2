"""관리자 모더레이션 API.

  GET    /admin/moderation/records          — 위반 기록 (최신순, keyset 페이지)
  GET    /admin/moderation/stats            — 언어/컨텍스트별 집계
  GET    /admin/moderation/daily            — 일별 건수
  GET    /admin/moderation/trends           — 일/주/월 추이
  GET    /admin/moderation/users/{user_id}  — 사용자별 통계
  GET    /admin/moderation/high-risk        — 임계값 이상 사용자
  DELETE /admin/moderation/records          — 전체 초기화

집계는 매 요청마다 최근 N개(stats_scan_limit) 레코드를 다시 스캔한다.
"""

import datetime
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from polyglai.config import settings
from polyglai.db.supabase_client import ModerationStore, get_store
from polyglai.middleware.auth import require_admin
from polyglai.moderation import stats
from polyglai.types import (
    DailyCount,
    GlobalStats,
    HighRiskUser,
    RecordsPage,
    Trends,
    UsageRecord,
    UserStats,
)

router = APIRouter(tags=["moderation"], dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)


async def _recent(store: ModerationStore) -> list[UsageRecord]:
    try:
        return await store.recent_records(settings.stats_scan_limit)
    except Exception:
        logger.exception("Failed to load moderation records")
        raise HTTPException(status_code=502, detail="Moderation store unavailable")


@router.get("/records", response_model=RecordsPage)
async def list_records(
    limit: int = Query(50, ge=1, le=500),
    before: datetime.datetime | None = None,
    before_id: str | None = None,
    store: ModerationStore = Depends(get_store),
):
    """다음 페이지는 응답의 (next_before, next_before_id)를 그대로 넘긴다."""
    try:
        records = await store.list_records(limit=limit, before=before, before_id=before_id)
    except Exception:
        logger.exception("Failed to list moderation records")
        raise HTTPException(status_code=502, detail="Moderation store unavailable")

    if len(records) < limit:
        return RecordsPage(records=records)
    last = records[-1]
    return RecordsPage(records=records, next_before=last.timestamp, next_before_id=last.id)


@router.get("/stats", response_model=GlobalStats)
async def global_stats(store: ModerationStore = Depends(get_store)):
    records = await _recent(store)
    try:
        total = await store.count_records()
    except Exception:
        logger.warning("Record count unavailable, using scanned count", exc_info=True)
        total = None
    return stats.global_stats(records, total_count=total)


@router.get("/daily", response_model=list[DailyCount])
async def daily(
    days: int = Query(30, ge=1, le=365),
    store: ModerationStore = Depends(get_store),
):
    return stats.daily_counts(await _recent(store), days=days)


@router.get("/trends", response_model=Trends)
async def trends(
    days: int = Query(30, ge=1, le=365),
    store: ModerationStore = Depends(get_store),
):
    return stats.trends(await _recent(store), days=days)


@router.get("/users/{user_id}", response_model=UserStats)
async def user_stats(user_id: str, store: ModerationStore = Depends(get_store)):
    return stats.user_stats(await _recent(store), user_id)


@router.get("/high-risk", response_model=list[HighRiskUser])
async def high_risk(
    threshold: int | None = Query(None, ge=1),
    store: ModerationStore = Depends(get_store),
):
    return stats.high_risk_users(
        await _recent(store),
        threshold=threshold or settings.high_risk_threshold,
    )


@router.delete("/records")
async def reset_records(store: ModerationStore = Depends(get_store)):
    try:
        await store.delete_all_records()
    except Exception:
        logger.exception("Failed to reset moderation records")
        raise HTTPException(status_code=502, detail="Moderation store unavailable")
    return {"status": "reset"}
