"""Supabase DB Client: moderation record 영속화.

profanity_records 테이블에 위반 기록을 append 하고,
관리자 화면의 집계를 위해 최근 N개 레코드를 조회한다.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any

from supabase import AsyncClient, acreate_client

from polyglai.config import settings
from polyglai.types import UsageRecord

logger = logging.getLogger(__name__)

_client: AsyncClient | None = None

_EPOCH = "1970-01-01T00:00:00+00:00"


async def get_client() -> AsyncClient:
    """Supabase async client 싱글톤."""
    global _client
    if _client is None:
        _client = await acreate_client(
            settings.supabase_url,
            settings.supabase_service_key,
        )
    return _client


class ModerationStore:
    """profanity_records 테이블 접근 계층.

    Records are append-only; the only delete path is the admin reset.
    """

    def __init__(self, client: AsyncClient | None = None, table: str | None = None):
        self._client = client
        self._table = table or settings.moderation_table

    async def _get_client(self) -> AsyncClient:
        if self._client is None:
            self._client = await get_client()
        return self._client

    async def insert_record(self, record: UsageRecord) -> None:
        client = await self._get_client()
        await client.table(self._table).insert(record.to_row()).execute()

    async def list_records(
        self,
        limit: int = 50,
        before: datetime.datetime | None = None,
        before_id: Any = None,
    ) -> list[UsageRecord]:
        """최신순 페이지 조회 (keyset pagination on (timestamp, id)).

        With ``before_id``, rows sharing the ``before`` timestamp but with a
        smaller id are kept, so equal timestamps are not skipped at a page edge.
        """
        client = await self._get_client()
        query = client.table(self._table).select("*")
        if before is not None:
            ts = before.isoformat()
            if before_id is not None:
                query = query.or_(f'timestamp.lt."{ts}",and(timestamp.eq."{ts}",id.lt.{before_id})')
            else:
                query = query.lt("timestamp", ts)
        result = await (
            query.order("timestamp", desc=True)
            .order("id", desc=True)
            .limit(limit)
            .execute()
        )
        return [_to_record(row) for row in result.data or []]

    async def recent_records(self, limit: int | None = None) -> list[UsageRecord]:
        return await self.list_records(limit=limit or settings.stats_scan_limit)

    async def count_records(self) -> int:
        client = await self._get_client()
        result = (
            await client.table(self._table)
            .select("id", count="exact")
            .limit(1)
            .execute()
        )
        return result.count or 0

    async def delete_all_records(self) -> None:
        # PostgREST는 필터 없는 DELETE를 거부하므로 전체 범위 필터를 건다
        client = await self._get_client()
        await client.table(self._table).delete().gte("timestamp", _EPOCH).execute()
        logger.warning("All moderation records deleted from %s", self._table)


def _to_record(row: dict[str, Any]) -> UsageRecord:
    return UsageRecord.model_validate(row)


_store: ModerationStore | None = None


def get_store() -> ModerationStore:
    """ModerationStore 싱글톤 (FastAPI dependency)."""
    global _store
    if _store is None:
        _store = ModerationStore()
    return _store
