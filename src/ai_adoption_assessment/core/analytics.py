"""Aggregation helpers behind the analytics dashboards.

Items are dicts carrying a ``created_date`` (datetime or ISO-8601 string).
Naive datetimes are treated as UTC.
"""

from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone
from typing import Any

from ai_adoption_assessment.core.reference_data import PLATFORMS_BY_ID
from ai_adoption_assessment.core.scheduling import add_months

TIME_RANGES: tuple[str, ...] = ("all", "30d", "90d", "6m", "1y")


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def time_range_cutoff(time_range: str, now: datetime | None = None) -> datetime | None:
    """Return the earliest created_date inside the range, or None for no cutoff."""
    now = _as_datetime(now or datetime.now(tz=timezone.utc))
    if time_range == "30d":
        return now - timedelta(days=30)
    if time_range == "90d":
        return now - timedelta(days=90)
    if time_range == "6m":
        return add_months(now, -6)
    if time_range == "1y":
        return add_months(now, -12)
    return None


def filter_by_time_range(
    items: list[dict[str, Any]],
    time_range: str,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """Keep items created on or after the range cutoff.

    ``all`` and unrecognised ranges return the items unchanged.
    """
    cutoff = time_range_cutoff(time_range, now)
    if cutoff is None:
        return items
    return [item for item in items if _as_datetime(item["created_date"]) >= cutoff]


def group_by_month(
    items: list[dict[str, Any]],
    get_value: Callable[[dict[str, Any]], Any] | None = None,
) -> list[dict[str, Any]]:
    """Bucket items by ``YYYY-MM`` of created_date, oldest month first.

    Returns:
        List of {"month": "YYYY-MM", "items": [...]} where each item is
        passed through get_value when given.
    """
    grouped: dict[str, dict[str, Any]] = {}
    for item in items:
        created = _as_datetime(item["created_date"])
        month_key = f"{created.year}-{created.month:02d}"
        bucket = grouped.setdefault(month_key, {"month": month_key, "items": []})
        bucket["items"].append(get_value(item) if get_value else item)
    return [grouped[key] for key in sorted(grouped)]


def calculate_percentage(value: float, total: float, decimals: int = 0) -> float:
    if total == 0:
        return 0
    return round((value / total) * 100, decimals)


def aggregate_counts(
    items: Iterable[Any],
    get_key: Callable[[Any], Any],
    filter_fn: Callable[[Any], bool] | None = None,
) -> dict[Any, int]:
    counts: dict[Any, int] = {}
    for item in items:
        if filter_fn is not None and not filter_fn(item):
            continue
        key = get_key(item)
        counts[key] = counts.get(key, 0) + 1
    return counts


def sort_by_frequency(count_map: dict[Any, int], limit: int | None = None) -> list[dict[str, Any]]:
    """Convert a count map to [{name, value}] sorted by value descending.

    Ties keep insertion order.
    """
    ranked = sorted(
        ({"name": key, "value": count} for key, count in count_map.items()),
        key=lambda entry: entry["value"],
        reverse=True,
    )
    return ranked[:limit] if limit else ranked


def _top_recommendation(assessment: dict[str, Any]) -> dict[str, Any] | None:
    recommendations = assessment.get("recommended_platforms") or []
    return recommendations[0] if recommendations else None


def build_dashboard_metrics(
    assessments: list[dict[str, Any]],
    strategies: list[dict[str, Any]],
    time_range: str = "all",
    now: datetime | None = None,
) -> dict[str, Any]:
    """Compute the headline metrics for the analytics overview.

    Args:
        assessments: Assessment dicts.
        strategies: AdoptionStrategy dicts.
        time_range: One of TIME_RANGES; unknown values mean no filtering.
        now: Reference time for the range cutoff.

    Returns:
        Dict with total/completed counts, completion rate, average one-year
        ROI of the top recommendation, top platforms, pain point frequency,
        monthly assessment trend, and average strategy progress.
    """
    scoped = filter_by_time_range(assessments, time_range, now)
    scoped_strategies = filter_by_time_range(strategies, time_range, now)
    completed = [a for a in scoped if a.get("status") == "completed"]

    top_rois: list[float] = []
    for assessment in completed:
        top = _top_recommendation(assessment)
        roi = (assessment.get("roi_calculations") or {}).get(top["platform"]) if top else None
        if roi:
            top_rois.append(roi.get("one_year_roi") or 0)

    platform_counts = aggregate_counts(
        completed,
        lambda a: _top_recommendation(a)["platform"],
        filter_fn=lambda a: _top_recommendation(a) is not None,
    )
    top_platforms = [
        {
            **entry,
            "platform_name": PLATFORMS_BY_ID[entry["name"]].name
            if entry["name"] in PLATFORMS_BY_ID
            else entry["name"],
        }
        for entry in sort_by_frequency(platform_counts)
    ]

    pain_counts: dict[str, int] = {}
    for assessment in scoped:
        for pain_point in assessment.get("pain_points") or []:
            pain_counts[pain_point] = pain_counts.get(pain_point, 0) + 1

    monthly_trend = [
        {
            "month": bucket["month"],
            "total": len(bucket["items"]),
            "completed": sum(1 for status in bucket["items"] if status == "completed"),
        }
        for bucket in group_by_month(scoped, lambda a: a.get("status"))
    ]

    progress_values = [
        (s.get("progress_tracking") or {}).get("overall_progress") or 0
        for s in scoped_strategies
    ]

    return {
        "time_range": time_range,
        "total_assessments": len(scoped),
        "completed_assessments": len(completed),
        "completion_rate": calculate_percentage(len(completed), len(scoped)),
        "average_roi": sum(top_rois) / len(top_rois) if top_rois else 0.0,
        "top_platforms": top_platforms,
        "pain_point_frequency": sort_by_frequency(pain_counts, limit=10),
        "monthly_trend": monthly_trend,
        "total_strategies": len(scoped_strategies),
        "active_strategies": sum(1 for s in scoped_strategies if s.get("status") == "active"),
        "average_strategy_progress": (
            sum(progress_values) / len(progress_values) if progress_values else 0.0
        ),
    }
