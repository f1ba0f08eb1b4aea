"""Metric anomaly detection over completed assessments."""

import uuid
from datetime import datetime

from ai_adoption_assessment.core.anomaly import detect_anomalies
from ai_adoption_assessment.core.interfaces import IEntityRepository
from ai_adoption_assessment.core.models import MetricAnomaly
from ai_adoption_assessment.errors import ValidationError
from ai_adoption_assessment.observability import get_logger

logger = get_logger(__name__)

VALID_ANOMALY_STATUSES: frozenset[str] = frozenset({"new", "acknowledged", "resolved"})


class AnomalyService:
    def __init__(
        self,
        anomaly_repo: IEntityRepository,
        assessment_repo: IEntityRepository,
        min_baseline: int = 5,
        recent_window: int = 3,
        sigma_threshold: float = 2.0,
        high_sigma_threshold: float = 3.0,
    ) -> None:
        self._anomalies = anomaly_repo
        self._assessments = assessment_repo
        self._min_baseline = min_baseline
        self._recent_window = recent_window
        self._sigma = sigma_threshold
        self._high_sigma = high_sigma_threshold

    async def detect(self, user_email: str | None, now: datetime | None = None) -> list[MetricAnomaly]:
        """Detect anomalies in the most recent completed assessments and persist them.

        Returns:
            The created MetricAnomaly rows; empty below the minimum baseline.
        """
        assessments = await self._assessments.filter(
            {"status": "completed"}, sort="-created_date"
        )
        found = detect_anomalies(
            [a.to_dict() for a in assessments],
            user_email,
            min_baseline=self._min_baseline,
            recent_window=self._recent_window,
            sigma_threshold=self._sigma,
            high_sigma_threshold=self._high_sigma,
            now=now,
        )
        created = await self._anomalies.bulk_create(
            [{**anomaly, "created_by": user_email} for anomaly in found]
        )
        logger.info(
            "Anomaly detection completed",
            assessment_count=len(assessments),
            anomaly_count=len(created),
        )
        return created

    async def list_anomalies(
        self,
        status: str | None = None,
        limit: int | None = None,
    ) -> list[MetricAnomaly]:
        if status is not None and status not in VALID_ANOMALY_STATUSES:
            raise ValidationError(f"Invalid anomaly status '{status}'.")
        criteria = {"status": status} if status else {}
        return await self._anomalies.filter(criteria, sort="-detected_at", limit=limit)

    async def acknowledge(self, anomaly_id: uuid.UUID) -> MetricAnomaly:
        await self._anomalies.get(anomaly_id)
        return await self._anomalies.update(anomaly_id, {"status": "acknowledged"})

    async def resolve(self, anomaly_id: uuid.UUID) -> MetricAnomaly:
        await self._anomalies.get(anomaly_id)
        return await self._anomalies.update(anomaly_id, {"status": "resolved"})
