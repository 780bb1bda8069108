"""
Integration tests for registration and the referral cascade.

Covers:
- Three-level cap on a longer chain
- Points snapshot from referral settings
- Broken chains, loops and replays
- Registration guards (unknown / unverified referrer, duplicate email)
- Badge and level refresh for awarded referrers
"""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from earnhub.models import Badge, Level, Referral, ReferralSettings, User, UserBadge
from earnhub.services.referral.referral_cascade_processor import ReferralCascadeProcessor
from earnhub.services.referral.statistics import ReferralStatisticsService
from earnhub.services.user.registration_service import RegistrationService


async def _chain(make_user, length: int) -> list[User]:
    """Users U0 <- U1 <- ... each referred by the previous one."""
    users = []
    for index in range(length):
        referred_by = users[-1].referral_code if users else None
        users.append(
            await make_user(referral_code=f"CODE{index:04d}", referred_by=referred_by)
        )
    return users


async def _edges(session, referred_id: int) -> list[Referral]:
    result = await session.execute(
        select(Referral).where(Referral.referred_id == referred_id).order_by(Referral.level)
    )
    return list(result.scalars().all())


class TestCascadeDepth:
    """Awards stop after three levels."""

    @pytest.mark.asyncio
    async def test_chain_of_four_awards_three_levels(
        self, session, make_user, referral_settings
    ):
        """A <- B <- C <- D, E registers with D's code: D, C, B awarded, A not."""
        a, b, c, d = await _chain(make_user, 4)

        result = await RegistrationService(session).register_user(
            "Eve", "eve@example.com", "secret1", referral_code=d.referral_code
        )

        assert result.success is True
        new_user = result.user
        edges = await _edges(session, new_user.id)
        assert [(e.level, e.referrer_id, e.points_earned) for e in edges] == [
            (1, d.id, 100),
            (2, c.id, 50),
            (3, b.id, 25),
        ]
        assert result.cascade.total_points == 175

        for user in (a, b, c, d):
            await session.refresh(user)
        assert (d.referral_count, d.total_referral_points) == (1, 100)
        assert (c.referral_count, c.total_referral_points) == (1, 50)
        assert (b.referral_count, b.total_referral_points) == (1, 25)
        assert (a.referral_count, a.total_referral_points) == (0, 0)

        await session.refresh(new_user)
        assert new_user.referred_by == d.referral_code

    @pytest.mark.asyncio
    async def test_short_chain_awards_available_levels(
        self, session, make_user, referral_settings
    ):
        (root,) = await _chain(make_user, 1)
        newcomer = await make_user()

        result = await ReferralCascadeProcessor(session).process_referral(
            newcomer.id, root.referral_code
        )

        assert result.success is True
        assert [award.level for award in result.awards] == [1]
        assert result.level_errors == {}


class TestCascadePoints:
    """Points come from referral settings at the start of the run."""

    @pytest.mark.asyncio
    async def test_custom_points(self, session, make_user):
        session.add(ReferralSettings(id=1, level1_points=10, level2_points=5, level3_points=1))
        await session.commit()
        _, parent = await _chain(make_user, 2)
        newcomer = await make_user()

        result = await ReferralCascadeProcessor(session).process_referral(
            newcomer.id, parent.referral_code
        )

        assert [award.points for award in result.awards] == [10, 5]

    @pytest.mark.asyncio
    async def test_missing_settings(self, session, make_user):
        (root,) = await _chain(make_user, 1)
        newcomer = await make_user()

        result = await ReferralCascadeProcessor(session).process_referral(
            newcomer.id, root.referral_code
        )

        assert result.success is False
        assert result.error_code == "SETTINGS_MISSING"
        assert await _edges(session, newcomer.id) == []

    @pytest.mark.asyncio
    async def test_unknown_code(self, session, make_user, referral_settings):
        newcomer = await make_user()

        result = await ReferralCascadeProcessor(session).process_referral(newcomer.id, "NOPE0000")

        assert result.error_code == "REFERRER_NOT_FOUND"


class TestBrokenChains:
    """Chains that end early or loop."""

    @pytest.mark.asyncio
    async def test_missing_ancestor_keeps_lower_levels(
        self, session, make_user, referral_settings
    ):
        parent = await make_user(referral_code="PARENT01", referred_by="GHOST000")
        newcomer = await make_user()

        result = await ReferralCascadeProcessor(session).process_referral(
            newcomer.id, parent.referral_code
        )

        assert result.success is True
        assert [award.level for award in result.awards] == [1]
        assert 2 in result.level_errors

    @pytest.mark.asyncio
    async def test_loop_stops_cascade(self, session, make_user, referral_settings):
        """X and Y refer each other; a newcomer under X awards X then Y only."""
        x = await make_user(referral_code="XXXX0001", referred_by="YYYY0001")
        y = await make_user(referral_code="YYYY0001", referred_by="XXXX0001")
        newcomer = await make_user()

        result = await ReferralCascadeProcessor(session).process_referral(
            newcomer.id, x.referral_code
        )

        assert [(a.level, a.referrer_id) for a in result.awards] == [(1, x.id), (2, y.id)]
        assert 3 in result.level_errors
        assert result.success is True

    @pytest.mark.asyncio
    async def test_replay_creates_no_duplicates(self, session, make_user, referral_settings):
        _, parent = await _chain(make_user, 2)
        newcomer = await make_user()
        processor = ReferralCascadeProcessor(session)

        await processor.process_referral(newcomer.id, parent.referral_code)
        replay = await processor.process_referral(newcomer.id, parent.referral_code)

        await session.refresh(parent)
        assert replay.awards == []
        assert len(await _edges(session, newcomer.id)) == 2
        assert parent.total_referral_points == 100


class TestRegistrationGuards:
    """Registration refuses bad referral codes before writing anything."""

    async def _user_count(self, session) -> int:
        return (await session.execute(select(func.count()).select_from(User))).scalar()

    @pytest.mark.asyncio
    async def test_unknown_referral_code(self, session, referral_settings):
        result = await RegistrationService(session).register_user(
            "Eve", "eve@example.com", "secret1", referral_code="NOPE0000"
        )

        assert result.error_code == "INVALID_REFERRAL_CODE"
        assert await self._user_count(session) == 0

    @pytest.mark.asyncio
    async def test_unverified_referrer(self, session, make_user, referral_settings):
        await make_user(referral_code="UNVERIF1", is_verified=False)

        result = await RegistrationService(session).register_user(
            "Eve", "eve@example.com", "secret1", referral_code="unverif1"
        )

        assert result.error_code == "REFERRER_NOT_VERIFIED"
        assert await self._user_count(session) == 1

    @pytest.mark.asyncio
    async def test_duplicate_email(self, session, make_user):
        await make_user(email="eve@example.com")

        result = await RegistrationService(session).register_user(
            "Eve", "EVE@example.com", "secret1"
        )

        assert result.error_code == "EMAIL_TAKEN"

    @pytest.mark.asyncio
    async def test_without_code_no_cascade(self, session):
        result = await RegistrationService(session).register_user(
            "Eve", "eve@example.com", "secret1"
        )

        assert result.success is True
        assert result.cascade is None
        assert result.user.package == "basic"
        assert result.user.referred_by is None


class TestGamificationRefresh:
    """Awarded referrers get badges and levels."""

    @pytest.mark.asyncio
    async def test_badge_and_level_awarded(self, session, make_user, referral_settings):
        session.add(Badge(name="First referral", type="referral", requirement=1))
        session.add(Level(name="Bronze", requirement=100))
        session.add(Level(name="Silver", requirement=500))
        await session.commit()
        (parent,) = await _chain(make_user, 1)

        await RegistrationService(session).register_user(
            "Eve", "eve@example.com", "secret1", referral_code=parent.referral_code
        )

        await session.refresh(parent)
        assert parent.level == "Bronze"
        badges = (
            await session.execute(select(UserBadge).where(UserBadge.user_id == parent.id))
        ).scalars().all()
        assert len(badges) == 1


class TestReferralStatistics:
    """Per-level counts and the top referrers board."""

    @pytest.mark.asyncio
    async def test_user_stats(self, session, make_user, referral_settings):
        root, parent = await _chain(make_user, 2)
        for index in range(2):
            await RegistrationService(session).register_user(
                f"New {index}", f"new{index}@example.com", "secret1",
                referral_code=parent.referral_code,
            )

        stats = await ReferralStatisticsService(session).get_user_stats(root.id)

        assert stats["level_1"] == 1
        assert stats["level_2"] == 2
        assert stats["level_3"] == 0
        assert stats["total_points"] == 100 + 2 * 50

    @pytest.mark.asyncio
    async def test_top_referrers(self, session, make_user, referral_settings):
        root, parent = await _chain(make_user, 2)
        await RegistrationService(session).register_user(
            "Eve", "eve@example.com", "secret1", referral_code=parent.referral_code
        )

        top = await ReferralStatisticsService(session).get_top_referrers(10)

        assert [row["user_id"] for row in top] == [parent.id, root.id]
        assert top[0]["total_points"] == 150
        assert top[1]["total_points"] == 100

    @pytest.mark.asyncio
    async def test_stats_for_missing_user(self, session):
        assert await ReferralStatisticsService(session).get_user_stats(404) is None
