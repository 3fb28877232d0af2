"""Admin aggregations over recorded violations.

Every function takes the most recent N records (newest first, as returned
by ModerationStore.recent_records) and recomputes from scratch; there is
no incremental counter state.
"""

from __future__ import annotations

import datetime
from collections import Counter, defaultdict

from polyglai.types import (
    DailyCount,
    GlobalStats,
    HighRiskUser,
    MonthlyCount,
    Trends,
    UsageRecord,
    UserStats,
    WeeklyCount,
)


def _record_date(record: UsageRecord) -> datetime.date:
    if record.date:
        return datetime.date.fromisoformat(record.date)
    return record.timestamp.date()


def _today() -> datetime.date:
    return datetime.datetime.now(datetime.timezone.utc).date()


def global_stats(records: list[UsageRecord], total_count: int | None = None) -> GlobalStats:
    language_stats: Counter[str] = Counter()
    context_stats: Counter[str] = Counter()
    for r in records:
        language_stats[r.language or "unknown"] += 1
        context_stats[r.context or "unknown"] += 1

    return GlobalStats(
        total_profanity_count=total_count if total_count is not None else len(records),
        users_with_profanity=len({r.user_id for r in records}),
        language_stats=dict(language_stats),
        context_stats=dict(context_stats),
        recent_records_count=len(records),
    )


def daily_counts(
    records: list[UsageRecord],
    days: int = 30,
    today: datetime.date | None = None,
) -> list[DailyCount]:
    """Incident count per day for the last ``days`` days, oldest first."""
    start = (today or _today()) - datetime.timedelta(days=days)
    counts: Counter[datetime.date] = Counter()
    for r in records:
        d = _record_date(r)
        if d >= start:
            counts[d] += 1
    return [DailyCount(date=d.isoformat(), count=c) for d, c in sorted(counts.items())]


def trends(
    records: list[UsageRecord],
    days: int = 30,
    today: datetime.date | None = None,
) -> Trends:
    """Daily counts rolled up into Sunday-start weeks and calendar months."""
    daily = daily_counts(records, days=days, today=today)

    weekly: dict[str, int] = defaultdict(int)
    monthly: dict[str, int] = defaultdict(int)
    for day in daily:
        d = datetime.date.fromisoformat(day.date)
        # isoweekday: Mon=1 .. Sun=7 → 일요일 시작 주
        week_start = d - datetime.timedelta(days=d.isoweekday() % 7)
        weekly[week_start.isoformat()] += day.count
        monthly[f"{d.year}-{d.month:02d}"] += day.count

    return Trends(
        daily=daily,
        weekly=[WeeklyCount(week=w, count=c) for w, c in sorted(weekly.items())],
        monthly=[MonthlyCount(month=m, count=c) for m, c in sorted(monthly.items())],
    )


def user_stats(
    records: list[UsageRecord],
    user_id: str,
    today: datetime.date | None = None,
) -> UserStats:
    today = today or _today()
    mine = [r for r in records if r.user_id == user_id]

    language_counts: Counter[str] = Counter(r.language.lower() for r in mine if r.language)
    return UserStats(
        user_id=user_id,
        total_count=len(mine),
        daily_count=sum(1 for r in mine if _record_date(r) == today),
        language_counts=dict(language_counts),
        last_detected=max((r.timestamp for r in mine), default=None),
    )


def high_risk_users(records: list[UsageRecord], threshold: int = 10) -> list[HighRiskUser]:
    """Users with at least ``threshold`` incidents, most incidents first."""
    counts: Counter[str] = Counter()
    last_seen: dict[str, datetime.datetime] = {}
    for r in records:
        counts[r.user_id] += 1
        if r.user_id not in last_seen or r.timestamp > last_seen[r.user_id]:
            last_seen[r.user_id] = r.timestamp

    flagged = [
        HighRiskUser(user_id=uid, count=c, last_detected=last_seen.get(uid))
        for uid, c in counts.items()
        if c >= threshold
    ]
    flagged.sort(key=lambda u: (-u.count, u.user_id))
    return flagged
