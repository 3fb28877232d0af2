"""ModerationStore tests against a mocked supabase query builder."""

import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from polyglai.db.supabase_client import ModerationStore
from polyglai.types import UsageRecord

ROW = {
    "id": 1,
    "user_id": "user-1",
    "text": "puta",
    "context": "translation",
    "language": "es",
    "detected_words": ["puta"],
    "word_count": 1,
    "date": "2026-10-18",
    "timestamp": "2026-10-18T09:00:00+00:00",
}


def _mock_client(data=None, count=None):
    """supabase AsyncClient double: every builder method chains, execute() is awaited."""
    builder = MagicMock()
    for name in ("select", "insert", "delete", "order", "limit", "lt", "gte", "or_"):
        getattr(builder, name).return_value = builder
    builder.execute = AsyncMock(return_value=MagicMock(data=data, count=count))

    client = MagicMock()
    client.table.return_value = builder
    return client, builder


@pytest.mark.asyncio
async def test_insert_record_sends_row():
    client, builder = _mock_client(data=[ROW])
    store = ModerationStore(client=client, table="profanity_records")
    record = UsageRecord.create(user_id="user-1", text="puta", detected_words=["puta"])

    await store.insert_record(record)

    client.table.assert_called_with("profanity_records")
    builder.insert.assert_called_once_with(record.to_row())
    builder.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_list_records_newest_first():
    client, builder = _mock_client(data=[ROW])
    store = ModerationStore(client=client)

    records = await store.list_records(limit=10)

    assert [c.args[0] for c in builder.order.call_args_list] == ["timestamp", "id"]
    assert all(c.kwargs == {"desc": True} for c in builder.order.call_args_list)
    builder.limit.assert_called_once_with(10)
    builder.lt.assert_not_called()
    assert len(records) == 1
    assert records[0].user_id == "user-1"
    assert records[0].detected_words == ["puta"]


@pytest.mark.asyncio
async def test_list_records_before_cursor():
    client, builder = _mock_client(data=[])
    store = ModerationStore(client=client)
    cursor = datetime.datetime(2026, 10, 18, tzinfo=datetime.timezone.utc)

    assert await store.list_records(limit=5, before=cursor) == []
    builder.lt.assert_called_once_with("timestamp", cursor.isoformat())
    builder.or_.assert_not_called()


@pytest.mark.asyncio
async def test_list_records_cursor_with_id_tiebreaker():
    client, builder = _mock_client(data=[])
    store = ModerationStore(client=client)
    cursor = datetime.datetime(2026, 10, 18, 9, 0, tzinfo=datetime.timezone.utc)

    await store.list_records(limit=5, before=cursor, before_id=41)

    builder.lt.assert_not_called()
    builder.or_.assert_called_once_with(
        'timestamp.lt."2026-10-18T09:00:00+00:00",'
        'and(timestamp.eq."2026-10-18T09:00:00+00:00",id.lt.41)'
    )


@pytest.mark.asyncio
async def test_list_records_handles_null_data():
    client, _ = _mock_client(data=None)
    assert await ModerationStore(client=client).list_records() == []


@pytest.mark.asyncio
async def test_recent_records_uses_limit():
    client, builder = _mock_client(data=[])
    await ModerationStore(client=client).recent_records(limit=250)
    builder.limit.assert_called_once_with(250)


@pytest.mark.asyncio
async def test_count_records():
    client, builder = _mock_client(data=[], count=42)
    assert await ModerationStore(client=client).count_records() == 42
    builder.select.assert_called_once_with("id", count="exact")


@pytest.mark.asyncio
async def test_delete_all_records_filters_full_range():
    client, builder = _mock_client()
    await ModerationStore(client=client).delete_all_records()
    builder.delete.assert_called_once_with()
    builder.gte.assert_called_once()
    builder.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_store_errors_propagate():
    client, builder = _mock_client()
    builder.execute.side_effect = RuntimeError("connection refused")
    with pytest.raises(RuntimeError):
        await ModerationStore(client=client).count_records()
