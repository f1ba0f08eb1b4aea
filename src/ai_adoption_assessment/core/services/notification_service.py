"""Contextual notifications and the user's notification inbox."""

import uuid
from datetime import datetime, timezone

from ai_adoption_assessment.core import notifications as rules
from ai_adoption_assessment.core.engines.notifications import NotificationRecommendationEngine
from ai_adoption_assessment.core.identity import UserContext
from ai_adoption_assessment.core.interfaces import IEntityRepository
from ai_adoption_assessment.core.models import Notification, UserSettings
from ai_adoption_assessment.errors import NotFoundError, ValidationError
from ai_adoption_assessment.observability import get_logger

logger = get_logger(__name__)

# Strategies considered when building notifications, most recent first
_ACTIVE_STRATEGY_LIMIT = 5


class NotificationService:
    """Generates notifications from user context and manages read state."""

    def __init__(
        self,
        notification_repo: IEntityRepository,
        settings_repo: IEntityRepository,
        strategy_repo: IEntityRepository,
        onboarding_repo: IEntityRepository,
        engine: NotificationRecommendationEngine,
        default_types: list[str],
        default_min_priority: str = "medium",
    ) -> None:
        """Initialise with injected dependencies.

        Args:
            notification_repo: Notification persistence.
            settings_repo: UserSettings persistence.
            strategy_repo: AdoptionStrategy persistence.
            onboarding_repo: OnboardingFlow persistence.
            engine: LLM recommendation engine.
            default_types: Enabled notification types for new users.
            default_min_priority: Minimum priority for new users.
        """
        self._notifications = notification_repo
        self._settings = settings_repo
        self._strategies = strategy_repo
        self._onboarding = onboarding_repo
        self._engine = engine
        self._default_types = default_types
        self._default_min_priority = default_min_priority

    async def get_user_settings(self, user_email: str) -> UserSettings:
        """Load the user's settings, creating the defaults on first use."""
        existing = await self._settings.filter({"user_email": user_email}, limit=1)
        if existing:
            return existing[0]
        logger.info("Creating default user settings", user_email=user_email)
        return await self._settings.create(
            {
                "user_email": user_email,
                "enabled_notification_types": list(self._default_types),
                "minimum_priority": self._default_min_priority,
                "preferences": {},
                "created_by": user_email,
            }
        )

    async def update_user_settings(
        self,
        user_email: str,
        enabled_notification_types: list[str] | None = None,
        minimum_priority: str | None = None,
    ) -> UserSettings:
        if enabled_notification_types is not None:
            unknown = set(enabled_notification_types) - set(rules.NOTIFICATION_TYPES)
            if unknown:
                raise ValidationError(f"Unknown notification type(s): {', '.join(sorted(unknown))}")
        if minimum_priority is not None and minimum_priority not in rules.PRIORITY_RANK:
            raise ValidationError(f"Invalid minimum priority '{minimum_priority}'.")

        current = await self.get_user_settings(user_email)
        changes: dict = {}
        if enabled_notification_types is not None:
            changes["enabled_notification_types"] = enabled_notification_types
        if minimum_priority is not None:
            changes["minimum_priority"] = minimum_priority
        if not changes:
            return current
        return await self._settings.update(current.id, changes)

    async def generate_contextual_notifications(self, user: UserContext) -> list[Notification]:
        """Build, priority-filter and persist notifications for the user.

        Returns:
            The notifications that were created.
        """
        user_settings = await self.get_user_settings(user.email)
        enabled = list(user_settings.enabled_notification_types or [])

        strategies = [
            s.to_dict()
            for s in await self._strategies.filter({"status": "active"}, limit=_ACTIVE_STRATEGY_LIMIT)
        ]
        flows = [
            f.to_dict()
            for f in await self._onboarding.filter({"user_email": user.email, "status": "in_progress"})
        ]

        candidates = rules.build_rule_notifications(user.email, enabled, strategies, flows)
        if "recommendation" in enabled:
            candidates.extend(
                await self._engine.recommend(
                    user_email=user.email,
                    role=user.role,
                    active_strategies=len(strategies),
                    critical_risks=len(rules.critical_risks(strategies)),
                    onboarding_in_progress=len(flows),
                )
            )

        kept = rules.filter_by_priority(candidates, user_settings.minimum_priority)
        created = await self._notifications.bulk_create(
            [{**n, "created_by": user.email} for n in kept]
        )
        logger.info(
            "Contextual notifications generated",
            user_email=user.email,
            candidate_count=len(candidates),
            created_count=len(created),
        )
        return created

    async def list_notifications(
        self,
        user_email: str,
        unread_only: bool = False,
        limit: int | None = None,
    ) -> list[Notification]:
        criteria: dict = {"user_email": user_email}
        if unread_only:
            criteria["is_read"] = False
        return await self._notifications.filter(criteria, limit=limit)

    async def mark_read(self, notification_id: uuid.UUID, user_email: str) -> Notification:
        notification = await self._notifications.get(notification_id)
        if notification.user_email != user_email:
            raise NotFoundError(message=f"Notification {notification_id} not found.")
        if notification.is_read:
            return notification
        return await self._notifications.update(
            notification_id, {"is_read": True, "read_at": datetime.now(tz=timezone.utc)}
        )

    async def mark_all_read(self, user_email: str) -> int:
        """Mark every unread notification read. Returns how many changed."""
        unread = await self._notifications.filter({"user_email": user_email, "is_read": False})
        read_at = datetime.now(tz=timezone.utc)
        for notification in unread:
            await self._notifications.update(notification.id, {"is_read": True, "read_at": read_at})
        return len(unread)
