from __future__ import annotations

import logging
from typing import Mapping, Optional

from ..common.validators import require_non_negative_int
from ..core.constants import (
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_MINIMUM_WORKING_MINUTES,
    SETTING_LATE_GRACE_MINUTES,
    SETTING_LATE_HALF_DAY_THRESHOLD,
    SETTING_MINIMUM_WORKING_MINUTES,
    SETTING_SATURDAY_POLICY,
)
from ..core.enums import SaturdayPolicy
from ..core.exceptions import ValidationError
from .model import AttendanceSettings
from .repository import SettingsRepository

logger = logging.getLogger(__name__)


class AttendanceSettingsService:
    """Reads the settings store on every call; nothing is cached."""

    def __init__(self, repo: SettingsRepository):
        self._repo = repo

    def current(self) -> AttendanceSettings:
        raw = self._repo.get_all()

        grace = self._minutes(raw, SETTING_LATE_GRACE_MINUTES, DEFAULT_LATE_GRACE_MINUTES)
        # Unset threshold follows the grace period: any lateness past grace is a half-day.
        threshold = self._minutes(raw, SETTING_LATE_HALF_DAY_THRESHOLD, grace)
        minimum = self._minutes(raw, SETTING_MINIMUM_WORKING_MINUTES, DEFAULT_MINIMUM_WORKING_MINUTES)

        return AttendanceSettings(
            late_grace_minutes=grace,
            late_half_day_threshold_minutes=threshold,
            minimum_working_minutes=minimum,
            saturday_policy=self._saturday_policy(raw),
        )

    def update_grace_minutes(self, value) -> AttendanceSettings:
        minutes = require_non_negative_int(value, "Grace period")
        self._repo.set_value(SETTING_LATE_GRACE_MINUTES, str(minutes))
        logger.info("late grace period set to %s minutes", minutes)
        return self.current()

    @staticmethod
    def _minutes(raw: Mapping[str, str], key: str, default: int) -> int:
        value: Optional[str] = raw.get(key)
        if value is None or str(value).strip() == "":
            return default
        try:
            return require_non_negative_int(str(value).strip(), key)
        except ValidationError:
            logger.warning("invalid setting %s=%r, using default %s", key, value, default)
            return default

    @staticmethod
    def _saturday_policy(raw: Mapping[str, str]) -> SaturdayPolicy:
        value = raw.get(SETTING_SATURDAY_POLICY)
        if not value:
            return SaturdayPolicy.ALL_WORKING
        try:
            return SaturdayPolicy(value)
        except ValueError:
            logger.warning("invalid setting %s=%r, using default", SETTING_SATURDAY_POLICY, value)
            return SaturdayPolicy.ALL_WORKING
