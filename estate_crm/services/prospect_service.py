"""
Prospect service - prospect management with scoring.
"""
import logging
import uuid
from typing import Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.core.clock import Clock, system_clock
from estate_crm.core.exceptions import NotFoundError, ForbiddenError, ValidationError
from estate_crm.core.permissions import Action, has_permission
from estate_crm.models.prospect import Prospect
from estate_crm.models.user import User
from estate_crm.repositories.delivery_repo import DeliveryRepository
from estate_crm.repositories.interaction_repo import InteractionRepository
from estate_crm.repositories.prospect_repo import ProspectRepository
from estate_crm.schemas.prospect import ProspectCreate, ProspectUpdate
from estate_crm.services.scoring_service import calculate_score
from estate_crm.services.user_service import UserService

logger = logging.getLogger(__name__)

# Columns an update may not clear
NON_NULLABLE_FIELDS = {"agent_id", "status", "exclusive", "consent_given", "is_hot_lead"}


class ProspectService:
    """Service for prospect operations."""

    def __init__(self, session: AsyncSession, clock: Optional[Clock] = None):
        self.session = session
        self.clock = clock or system_clock
        self.prospect_repo = ProspectRepository(session)
        self.users = UserService(session)
        self.interaction_repo = InteractionRepository(session)
        self.delivery_repo = DeliveryRepository(session)

    def _ensure_visible(self, user: User, prospect: Optional[Prospect], prospect_id: uuid.UUID) -> Prospect:
        # Other agents' prospects look missing rather than forbidden
        if not prospect:
            raise NotFoundError("Prospect", str(prospect_id))
        if prospect.agent_id != user.id and not has_permission(user, Action.VIEW_ALL_LEADS, prospect):
            raise NotFoundError("Prospect", str(prospect_id))
        return prospect

    async def create(self, user: User, prospect_data: ProspectCreate) -> Prospect:
        """Create a new prospect with its initial score."""
        data = prospect_data.model_dump(exclude_none=True)
        data.setdefault("agent_id", user.id)

        prospect = Prospect(**data)
        prospect.score = calculate_score(prospect, clock=self.clock)
        prospect = await self.prospect_repo.save(prospect)
        logger.info(f"Prospect {prospect.id} created by {user.id} (score {prospect.score})")
        return prospect

    async def get(self, user: User, prospect_id: uuid.UUID) -> Prospect:
        """Get a prospect by ID."""
        prospect = await self.prospect_repo.get(prospect_id)
        return self._ensure_visible(user, prospect, prospect_id)

    async def list(
        self,
        user: User,
        agent_id: Optional[uuid.UUID] = None,
        status: Optional[str] = None,
        min_score: Optional[int] = None,
        page: int = 1,
        limit: int = 20
    ) -> dict:
        """
        List prospects, highest score first.

        Users who may view all leads can filter by any agent (or none);
        everyone else only sees their own.
        """
        if not has_permission(user, Action.VIEW_ALL_LEADS):
            if not has_permission(user, Action.VIEW_OWN_PROSPECTS):
                raise ForbiddenError("Access denied")
            if agent_id and agent_id != user.id:
                raise ForbiddenError("Access denied - resource ownership required")
            agent_id = user.id

        return await self.prospect_repo.search(
            agent_id=agent_id,
            status=status,
            min_score=min_score,
            page=page,
            limit=limit
        )

    async def update(self, user: User, prospect_id: uuid.UUID, prospect_data: ProspectUpdate) -> Prospect:
        """Update a prospect and recompute its score from the merged record."""
        prospect = self._ensure_visible(user, await self.prospect_repo.get(prospect_id), prospect_id)

        for field, value in prospect_data.model_dump(exclude_unset=True).items():
            if value is None and field in NON_NULLABLE_FIELDS:
                continue
            setattr(prospect, field, value)

        prospect.score = calculate_score(prospect, clock=self.clock)
        return await self.prospect_repo.save(prospect)

    async def delete(self, user: User, prospect_id: uuid.UUID) -> None:
        """Delete a prospect and its contact history. Delivered prospects are kept."""
        prospect = self._ensure_visible(user, await self.prospect_repo.get(prospect_id), prospect_id)
        if await self.delivery_repo.exists_for_prospect(prospect.id):
            raise ValidationError("Delivered prospects cannot be deleted", field="prospect_id")

        await self.interaction_repo.delete_for_prospect(prospect.id)
        await self.prospect_repo.delete(prospect.id)
        logger.info(f"Prospect {prospect_id} deleted by {user.id}")

    async def assign(self, user: User, prospect_id: uuid.UUID, agent_id: uuid.UUID) -> Prospect:
        """Hand a prospect to another agent. Callers must hold assign_leads."""
        prospect = await self.prospect_repo.get(prospect_id)
        if not prospect:
            raise NotFoundError("Prospect", str(prospect_id))

        agent = await self.users.get_lead_recipient(agent_id)

        prospect.agent_id = agent.id
        prospect = await self.prospect_repo.save(prospect)
        logger.info(f"Prospect {prospect_id} assigned to {agent_id} by {user.id}")
        return prospect
