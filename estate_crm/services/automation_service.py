"""
Automation service - follow-up rule configuration.
"""
import logging
import uuid
from typing import List

from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.core.clock import utcnow
from estate_crm.core.exceptions import AlreadyExistsError, NotFoundError
from estate_crm.models.automation import AutomationRule, RuleTrigger
from estate_crm.repositories.rule_repo import RuleRepository
from estate_crm.schemas.automation import RuleCreate, RuleUpdate

logger = logging.getLogger(__name__)

DEFAULT_RULES = (
    {
        "name": "No Answer Follow-up",
        "trigger": RuleTrigger.NO_ANSWER.value,
        "action": "send_sms:A,create_task:2d",
        "payload": {"template": "A", "followUpDays": 2},
        "is_active": True,
    },
    {
        "name": "Voicemail Follow-up",
        "trigger": RuleTrigger.VOICEMAIL.value,
        "action": "send_sms:B,create_task:1d",
        "payload": {"template": "B", "followUpDays": 1},
        "is_active": True,
    },
    {
        "name": "Booking Confirmation",
        "trigger": RuleTrigger.BOOKED.value,
        "action": "send_confirmation_sms,schedule_reminders",
        "payload": {"scheduleReminders": True},
        "is_active": True,
    },
    {
        "name": "Uncontacted Lead Alert",
        "trigger": RuleTrigger.PROSPECT_IDLE.value,
        "action": "notify_operator",
        "payload": {"notifyAfterDays": 7},
        "is_active": True,
    },
    {
        "name": "Delivery Reminder",
        "trigger": RuleTrigger.DELIVERY_UNCONTACTED.value,
        "action": "notify_operator",
        "payload": {"notifyAfterHours": 24},
        "is_active": False,
    },
)


class RuleService:
    """Service for automation rule operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.rule_repo = RuleRepository(session)

    async def list(self) -> List[AutomationRule]:
        return await self.rule_repo.list_all()

    async def create(self, data: RuleCreate) -> AutomationRule:
        if await self.rule_repo.get_by_name(data.name):
            raise AlreadyExistsError("Rule", "name", data.name)

        values = data.model_dump()
        values["trigger"] = data.trigger.value
        rule = await self.rule_repo.create(values)
        logger.info(f"Automation rule '{rule.name}' created ({rule.trigger})")
        return rule

    async def update(self, rule_id: uuid.UUID, data: RuleUpdate) -> AutomationRule:
        rule = await self.rule_repo.get(rule_id)
        if not rule:
            raise NotFoundError("Rule", str(rule_id))

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in changes and changes["name"] != rule.name:
            if await self.rule_repo.get_by_name(changes["name"]):
                raise AlreadyExistsError("Rule", "name", changes["name"])
        if "trigger" in changes:
            changes["trigger"] = data.trigger.value

        for field, value in changes.items():
            setattr(rule, field, value)
        rule.updated_at = utcnow()

        self.session.add(rule)
        await self.session.commit()
        await self.session.refresh(rule)
        logger.info(f"Automation rule {rule_id} updated: {sorted(changes)}")
        return rule

    async def ensure_default_rules(self) -> int:
        """Create the default rules when none exist. Returns how many were created."""
        if await self.rule_repo.list_all():
            return 0
        for values in DEFAULT_RULES:
            await self.rule_repo.create(dict(values, payload=dict(values["payload"])))
        logger.info(f"Created {len(DEFAULT_RULES)} default automation rules")
        return len(DEFAULT_RULES)
