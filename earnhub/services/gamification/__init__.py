"""
Gamification services package.

- badge_service: Milestone badges, awarded once per user
- level_service: Referral-point levels
"""

from earnhub.services.gamification.badge_service import BadgeService
from earnhub.services.gamification.level_service import LevelService

__all__ = ["BadgeService", "LevelService"]
