"""
Interaction service - contact history.

Logging a contact newer than the prospect's last one moves `last_contact_at`
forward and re-scores the prospect, so recency shows up immediately instead
of at the next score sync.
"""
import logging
import uuid
from typing import List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.core.clock import Clock, as_utc, system_clock
from estate_crm.core.permissions import Action, has_permission
from estate_crm.models.interaction import Interaction
from estate_crm.models.user import User
from estate_crm.repositories.interaction_repo import InteractionRepository
from estate_crm.repositories.prospect_repo import ProspectRepository
from estate_crm.schemas.interaction import InteractionCreate
from estate_crm.services.prospect_service import ProspectService
from estate_crm.services.scoring_service import calculate_score

logger = logging.getLogger(__name__)


class InteractionService:
    """Service for interaction operations."""

    def __init__(self, session: AsyncSession, clock: Optional[Clock] = None):
        self.session = session
        self.clock = clock or system_clock
        self.interaction_repo = InteractionRepository(session)
        self.prospect_repo = ProspectRepository(session)
        self.prospects = ProspectService(session, self.clock)

    async def log(self, user: User, data: InteractionCreate) -> Interaction:
        """Record a contact with a prospect the user can see."""
        prospect = await self.prospects.get(user, data.prospect_id)

        occurred_at = data.occurred_at or self.clock.now()
        interaction = await self.interaction_repo.create({
            "prospect_id": prospect.id,
            "user_id": user.id,
            "kind": data.kind.value,
            "direction": data.direction.value,
            "summary": data.summary,
            "outcome": data.outcome,
            "occurred_at": occurred_at,
        })

        last_contact = prospect.last_contact_at
        if last_contact is None or as_utc(last_contact) < as_utc(occurred_at):
            old_score = prospect.score
            prospect.last_contact_at = occurred_at
            prospect.score = calculate_score(prospect, clock=self.clock)
            await self.prospect_repo.save(prospect)
            logger.info(f"Prospect {prospect.id} contacted; score {old_score} -> {prospect.score}")

        return interaction

    async def list(self, user: User, prospect_id: Optional[uuid.UUID] = None) -> List[Interaction]:
        """
        Interactions newest first.

        With a prospect id, that prospect's history (if visible to the user).
        Without one, everything for users who may view all leads, otherwise
        the history of the user's own prospects.
        """
        if prospect_id:
            await self.prospects.get(user, prospect_id)
            return await self.interaction_repo.list_recent(prospect_id=prospect_id)
        if has_permission(user, Action.VIEW_ALL_LEADS):
            return await self.interaction_repo.list_recent()
        return await self.interaction_repo.list_recent(agent_id=user.id)
