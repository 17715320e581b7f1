# Models package - database models
from estate_crm.models.user import User
from estate_crm.models.prospect import Prospect, ProspectStatus, ProspectKind, Timeline, LeadSource
from estate_crm.models.interaction import Interaction, InteractionKind, InteractionDirection
from estate_crm.models.delivery import Delivery, DeliveryStatus, Payment, PaymentStatus
from estate_crm.models.automation import AutomationRule, RuleTrigger
