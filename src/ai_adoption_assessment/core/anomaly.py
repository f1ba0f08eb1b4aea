"""Statistical anomaly detection over completed assessment results.

Baselines are the population mean and standard deviation of every
platform's one-year ROI, total cost and compliance score across all
assessments. The most recent assessments are then checked value by value;
anything further than ``sigma_threshold`` standard deviations from the mean
is reported. Values beyond ``high_sigma_threshold`` are high severity.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from ai_adoption_assessment.observability import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Baseline:
    """Population mean and standard deviation of one metric."""

    mean: float
    std_dev: float

    @classmethod
    def from_values(cls, values: list[float]) -> "Baseline":
        if not values:
            return cls(mean=0.0, std_dev=0.0)
        mean = sum(values) / len(values)
        variance = sum((v - mean) ** 2 for v in values) / len(values)
        return cls(mean=mean, std_dev=math.sqrt(variance))

    def deviation_percent(self, value: float) -> float:
        if self.mean == 0:
            return 0.0
        return ((value - self.mean) / self.mean) * 100


def _compliance_value(score: dict[str, Any]) -> float:
    # Results written by calculation carry compliance_score; older records may use overall_score
    value = score.get("compliance_score")
    if value is None:
        value = score.get("overall_score")
    return value or 0.0


def build_baselines(assessments: list[dict[str, Any]]) -> dict[str, Baseline]:
    """Compute roi, cost and compliance baselines across all assessments."""
    roi_values: list[float] = []
    cost_values: list[float] = []
    compliance_values: list[float] = []

    for assessment in assessments:
        for roi in (assessment.get("roi_calculations") or {}).values():
            roi_values.append(roi.get("one_year_roi") or 0.0)
            cost_values.append(roi.get("total_cost") or 0.0)
        for score in (assessment.get("compliance_scores") or {}).values():
            compliance_values.append(_compliance_value(score))

    return {
        "roi": Baseline.from_values(roi_values),
        "cost": Baseline.from_values(cost_values),
        "compliance": Baseline.from_values(compliance_values),
    }


def detect_anomalies(
    assessments: list[dict[str, Any]],
    user_email: str | None,
    min_baseline: int = 5,
    recent_window: int = 3,
    sigma_threshold: float = 2.0,
    high_sigma_threshold: float = 3.0,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """Flag unusual ROI, cost and compliance values in recent assessments.

    Args:
        assessments: Assessment dicts, most recent first.
        user_email: Owner recorded on each anomaly.
        min_baseline: Minimum number of assessments needed for a baseline.
        recent_window: How many of the most recent assessments to check.
        sigma_threshold: Deviation, in standard deviations, that counts as anomalous.
        high_sigma_threshold: Deviation above which severity is high.
        now: Detection timestamp; defaults to the current UTC time.

    Returns:
        MetricAnomaly field dicts with status 'new'. Empty when there are
        fewer than min_baseline assessments.
    """
    if len(assessments) < min_baseline:
        logger.debug(
            "Not enough assessments for anomaly baseline",
            assessment_count=len(assessments),
            min_baseline=min_baseline,
        )
        return []

    baselines = build_baselines(assessments)
    detected_at = now or datetime.now(tz=timezone.utc)
    anomalies: list[dict[str, Any]] = []

    def check(metric_type: str, label: str, value: float, assessment_id: Any, platform: str) -> None:
        baseline = baselines[metric_type]
        deviation = abs(value - baseline.mean)
        # isclose guards zero-variance baselines against float rounding in the mean
        if deviation <= baseline.std_dev * sigma_threshold or math.isclose(
            value, baseline.mean, rel_tol=1e-9, abs_tol=1e-9
        ):
            return
        anomalies.append(
            {
                "user_email": user_email,
                "metric_type": metric_type,
                "metric_name": f"{platform} {label}",
                "current_value": value,
                "expected_value": baseline.mean,
                "deviation_percent": baseline.deviation_percent(value),
                "severity": "high" if deviation > baseline.std_dev * high_sigma_threshold else "medium",
                "status": "new",
                "detected_at": detected_at,
                "context": {
                    "assessment_id": str(assessment_id) if assessment_id is not None else None,
                    "platform": platform,
                },
            }
        )

    for assessment in assessments[:recent_window]:
        assessment_id = assessment.get("id")
        for platform, roi in (assessment.get("roi_calculations") or {}).items():
            check("roi", "ROI", roi.get("one_year_roi") or 0.0, assessment_id, platform)
            check("cost", "Cost", roi.get("total_cost") or 0.0, assessment_id, platform)
        for platform, score in (assessment.get("compliance_scores") or {}).items():
            check("compliance", "Compliance", _compliance_value(score), assessment_id, platform)

    return anomalies
