"""Widget layout operations for custom dashboards.

Every operation returns a new widget list whose ``position`` values are
renumbered 0..n-1 in list order. Inputs are never mutated.
"""

import uuid
from typing import Any

from ai_adoption_assessment.errors import NotFoundError, ValidationError

# widget type -> (display title, category)
WIDGET_CATALOG: dict[str, tuple[str, str]] = {
    "assessment-stats": ("Assessment Statistics", "Assessment"),
    "readiness-score": ("AI Readiness Score", "Assessment"),
    "roi-overview": ("ROI Overview", "Financial"),
    "governance-summary": ("Governance Summary", "Governance"),
    "bias-alerts": ("Bias Alerts", "Governance"),
    "training-progress": ("Training Progress", "Training"),
    "certificates": ("Certificates Earned", "Training"),
    "performance-metrics": ("AI Performance", "Governance"),
    "risk-summary": ("Risk Summary", "Risk"),
    "strategy-progress": ("Strategy Progress", "Strategy"),
    "team-size": ("Team Size", "Organization"),
    "completion-rate": ("Completion Rate", "Training"),
    "anomaly-alerts": ("Anomaly Alerts", "Risk"),
}

MOVE_DIRECTIONS: tuple[str, ...] = ("up", "down")


def _renumber(widgets: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [{**widget, "position": index} for index, widget in enumerate(widgets)]


def _index_of(widgets: list[dict[str, Any]], widget_id: str) -> int:
    for index, widget in enumerate(widgets):
        if widget.get("id") == widget_id:
            return index
    raise NotFoundError(message=f"Widget {widget_id} not found on dashboard.")


def add_widget(
    widgets: list[dict[str, Any]],
    widget_type: str,
    title: str | None = None,
    config: dict[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """Append a widget of a catalogue type at the next position.

    Raises:
        ValidationError: If widget_type is not in WIDGET_CATALOG.
    """
    if widget_type not in WIDGET_CATALOG:
        raise ValidationError(f"Unknown widget type: {widget_type}")

    widget = {
        "id": f"{widget_type}-{uuid.uuid4().hex[:12]}",
        "type": widget_type,
        "title": title or WIDGET_CATALOG[widget_type][0],
        "config": config or {},
    }
    return _renumber([*widgets, widget])


def remove_widget(widgets: list[dict[str, Any]], widget_id: str) -> list[dict[str, Any]]:
    """Remove a widget by id. Raises NotFoundError when absent."""
    index = _index_of(widgets, widget_id)
    return _renumber(widgets[:index] + widgets[index + 1 :])


def move_widget(
    widgets: list[dict[str, Any]],
    widget_id: str,
    direction: str,
) -> list[dict[str, Any]]:
    """Swap a widget with its neighbour. Moving past either end is a no-op.

    Raises:
        NotFoundError: If widget_id is not on the dashboard.
        ValidationError: If direction is not 'up' or 'down'.
    """
    if direction not in MOVE_DIRECTIONS:
        raise ValidationError(f"Invalid move direction: {direction}")

    index = _index_of(widgets, widget_id)
    target = index - 1 if direction == "up" else index + 1
    reordered = list(widgets)
    if 0 <= target < len(reordered):
        reordered[index], reordered[target] = reordered[target], reordered[index]
    return _renumber(reordered)
