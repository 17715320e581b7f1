"""
Role registry and permission checks.

The registry is a static table: each action maps to the set of roles allowed
to perform it. Anything not in the table is denied to everyone, and a user
whose role is not one of the known roles is denied everything.
"""
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, FrozenSet, Optional


class Role(str, Enum):
    AGENT = "agent"
    OPERATOR = "operator"
    ADMIN = "admin"


class Action(str, Enum):
    VIEW_ALL_LEADS = "view_all_leads"
    ASSIGN_LEADS = "assign_leads"
    MANAGE_AUTOMATION = "manage_automation"
    VIEW_PAYMENTS = "view_payments"
    CREATE_DELIVERIES = "create_deliveries"
    VIEW_OWN_PROSPECTS = "view_own_prospects"
    RECEIVE_LEADS = "receive_leads"


OPERATOR_ROLES: FrozenSet[Role] = frozenset({Role.OPERATOR, Role.ADMIN})
AGENT_ROLES: FrozenSet[Role] = frozenset({Role.AGENT, Role.ADMIN})

PERMISSIONS: Mapping[str, FrozenSet[Role]] = MappingProxyType({
    Action.VIEW_ALL_LEADS.value: OPERATOR_ROLES,
    Action.ASSIGN_LEADS.value: OPERATOR_ROLES,
    Action.MANAGE_AUTOMATION.value: OPERATOR_ROLES,
    Action.VIEW_PAYMENTS.value: OPERATOR_ROLES,
    Action.CREATE_DELIVERIES.value: OPERATOR_ROLES,
    Action.VIEW_OWN_PROSPECTS.value: AGENT_ROLES,
    Action.RECEIVE_LEADS.value: AGENT_ROLES,
})


def parse_role(value: Any) -> Optional[Role]:
    """Return the Role for a raw value, or None if it is not a known role."""
    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Role(value)
    except ValueError:
        return None


def ordered_roles(roles: Iterable[Role]) -> List[str]:
    """Role values in declaration order (agent, operator, admin)."""
    wanted = set(roles)
    return [role.value for role in Role if role in wanted]


def allowed_roles(action: Any) -> FrozenSet[Role]:
    """Roles allowed to perform an action; empty for unknown actions."""
    if not isinstance(action, str):
        return frozenset()
    key = action.value if isinstance(action, Action) else action
    return PERMISSIONS.get(key, frozenset())


def role_allowed(user: Any, roles: Iterable[Any]) -> bool:
    """True if the user's role is a known role and is in the allow-list."""
    role = parse_role(getattr(user, "role", None))
    if role is None:
        return False
    return role in {parse_role(r) for r in roles}


def has_permission(user: Any, action: Any, resource: Any = None) -> bool:
    """
    Check whether a user may perform an action.

    ``resource`` is accepted so callers can pass the object being acted on,
    but no action in the table is resource-scoped yet; ownership is enforced
    by the request guard, not here.
    """
    if user is None:
        return False
    return role_allowed(user, allowed_roles(action))


def permitted_actions(user: Any) -> List[str]:
    """All actions the user may perform, in table order."""
    return [action for action in PERMISSIONS if has_permission(user, action)]
