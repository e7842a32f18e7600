from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from influencer_admin.enums import ContentStatusEnum, InfluencerStatusEnum, OrderStatusEnum
from influencer_admin.schemas import Stats


def _status(record: Any) -> str | None:
    if isinstance(record, dict):
        return record.get("status")
    return getattr(record, "status", None)


def compute_stats(influencers: Iterable[Any], orders: Iterable[Any], content: Iterable[Any]) -> Stats:
    """Dashboard aggregates over records given either as dicts or as schema models."""
    influencer_statuses = [_status(record) for record in influencers]
    total = len(influencer_statuses)
    completed = sum(1 for status in influencer_statuses if status == InfluencerStatusEnum.Completed.value)
    completion_rate = f"{round(completed * 100 / total)}%" if total else "0%"
    return Stats(
        totalInfluencers=total,
        activeOrders=sum(1 for record in orders if _status(record) != OrderStatusEnum.Completed.value),
        pendingContent=sum(1 for record in content if _status(record) == ContentStatusEnum.PendingReview.value),
        completionRate=completion_rate,
    )
