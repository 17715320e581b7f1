"""
Tests for the request guards in `api/deps.py`.

Covers:
- Authentication is checked before anything else.
- Role-gate rejections disclose the allow-list and the caller's role.
- Ownership gate: admin bypass, match passes, mismatch rejects, missing field passes.
- Bearer token resolution to an active user.
"""
from datetime import timedelta
from typing import Optional

import pytest
from fastapi import Body, Depends, FastAPI
from fastapi.testclient import TestClient

from estate_crm.api.deps import (
    get_current_user, get_optional_user, require_admin, require_agent, require_operator,
    require_ownership_or_admin, require_permission, require_roles
)
from estate_crm.core.exceptions import register_exception_handlers
from estate_crm.core.permissions import Action, Role
from estate_crm.core.security import create_access_token
from estate_crm.database import get_session

from conftest import build_user


def build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/operator-only")
    async def operator_only(user=Depends(require_operator)):
        return {"user": str(user.id)}

    @app.get("/admin-only")
    async def admin_only(user=Depends(require_admin)):
        return {"user": str(user.id)}

    @app.get("/agent-only")
    async def agent_only(user=Depends(require_agent)):
        return {"user": str(user.id)}

    @app.get("/agents-and-operators")
    async def agents_and_operators(user=Depends(require_roles(Role.AGENT, Role.OPERATOR))):
        return {"user": str(user.id)}

    @app.post("/owned")
    async def owned(payload: Optional[dict] = Body(None), user=Depends(require_ownership_or_admin())):
        return {"payload": payload}

    @app.get("/owners/{ownerId}/items")
    async def owner_items(ownerId: str, user=Depends(require_ownership_or_admin())):
        return {"owner": ownerId}

    @app.post("/assign")
    async def assign(user=Depends(require_permission(Action.ASSIGN_LEADS))):
        return {"ok": True}

    @app.get("/me")
    async def me(user=Depends(get_current_user)):
        return {"user": str(user.id), "role": user.role}

    return app


class Identity:
    """Stands in for token resolution."""

    def __init__(self):
        self.user = None

    def __call__(self):
        return self.user


@pytest.fixture
def identity():
    return Identity()


@pytest.fixture
def client(identity):
    app = build_app()
    app.dependency_overrides[get_optional_user] = identity
    return TestClient(app)


@pytest.mark.parametrize("method,path", [
    ("get", "/operator-only"),
    ("get", "/admin-only"),
    ("get", "/agents-and-operators"),
    ("post", "/owned"),
    ("get", "/owners/anyone/items"),
    ("post", "/assign"),
])
def test_unauthenticated_requests_are_rejected(client, method, path) -> None:
    response = getattr(client, method)(path)
    assert response.status_code == 401
    assert response.json() == {"message": "Authentication required"}
    assert response.headers["www-authenticate"] == "Bearer"


def test_agent_on_operator_route_is_forbidden(client, identity, agent) -> None:
    identity.user = agent
    response = client.get("/operator-only")
    assert response.status_code == 403
    assert response.json() == {
        "message": "Access denied",
        "required": ["operator", "admin"],
        "current": "agent",
    }


@pytest.mark.parametrize("role", ["operator", "admin"])
def test_operator_route_admits_operators_and_admins(client, identity, role) -> None:
    user = build_user(role)
    identity.user = user
    response = client.get("/operator-only")
    assert response.status_code == 200
    assert response.json() == {"user": str(user.id)}


def test_admin_route(client, identity, operator, admin) -> None:
    identity.user = operator
    response = client.get("/admin-only")
    assert response.status_code == 403
    assert response.json()["required"] == ["admin"]

    identity.user = admin
    assert client.get("/admin-only").status_code == 200


def test_admin_is_not_implicitly_allowed_by_role_gate(client, identity, admin) -> None:
    identity.user = admin
    response = client.get("/agents-and-operators")
    assert response.status_code == 403
    assert response.json()["required"] == ["agent", "operator"]
    assert response.json()["current"] == "admin"


def test_unknown_role_is_forbidden(client, identity) -> None:
    identity.user = build_user("superuser")
    response = client.get("/operator-only")
    assert response.status_code == 403
    assert response.json()["current"] == "superuser"


def test_permission_guard_reports_roles_from_table(client, identity, agent, operator) -> None:
    identity.user = agent
    response = client.post("/assign")
    assert response.status_code == 403
    assert response.json()["required"] == ["operator", "admin"]

    identity.user = operator
    assert client.post("/assign").status_code == 200


def test_owner_matching_body_passes_unchanged(client, identity, agent) -> None:
    identity.user = agent
    payload = {"ownerId": str(agent.id), "note": "call back"}
    response = client.post("/owned", json=payload)
    assert response.status_code == 200
    assert response.json() == {"payload": payload}


def test_owner_id_comparison_ignores_uuid_case(client, identity, agent) -> None:
    identity.user = agent
    response = client.post("/owned", json={"ownerId": str(agent.id).upper()})
    assert response.status_code == 200


def test_other_owner_in_body_is_forbidden(client, identity, agent, other_agent) -> None:
    identity.user = agent
    response = client.post("/owned", json={"ownerId": str(other_agent.id)})
    assert response.status_code == 403
    assert response.json() == {"message": "Access denied - resource ownership required"}


def test_missing_owner_field_passes(client, identity, agent) -> None:
    identity.user = agent
    assert client.post("/owned", json={"note": "no owner"}).status_code == 200
    assert client.post("/owned").status_code == 200


def test_empty_owner_field_counts_as_missing(client, identity, agent) -> None:
    identity.user = agent
    assert client.post("/owned", json={"ownerId": ""}).status_code == 200


def test_operators_do_not_bypass_ownership(client, identity, operator, agent) -> None:
    identity.user = operator
    response = client.post("/owned", json={"ownerId": str(agent.id)})
    assert response.status_code == 403


def test_admin_bypasses_ownership(client, identity, admin, agent) -> None:
    identity.user = admin
    assert client.post("/owned", json={"ownerId": str(agent.id)}).status_code == 200
    assert client.get(f"/owners/{agent.id}/items").status_code == 200


def test_owner_from_path_params(client, identity, agent, other_agent) -> None:
    identity.user = agent
    assert client.get(f"/owners/{agent.id}/items").status_code == 200
    assert client.get(f"/owners/{other_agent.id}/items").status_code == 403


class FakeSession:
    """Answers UserRepository.get from a dict."""

    def __init__(self, users):
        self.users = {user.id: user for user in users}

    async def get(self, model, id):
        return self.users.get(id)


@pytest.fixture
def token_client(agent):
    deactivated = build_user("agent", "carol")
    deactivated.is_active = False
    session = FakeSession([agent, deactivated])

    app = build_app()
    app.dependency_overrides[get_session] = lambda: session
    return TestClient(app), deactivated


def test_valid_token_resolves_user(token_client, agent) -> None:
    client, _ = token_client
    token = create_access_token({"user_id": str(agent.id)})
    response = client.get("/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json() == {"user": str(agent.id), "role": "agent"}


@pytest.mark.parametrize("token_factory", [
    lambda user: "not-a-jwt",
    lambda user: create_access_token({"user_id": str(user.id)}, expires_delta=timedelta(minutes=-5)),
    lambda user: create_access_token({"user_id": "not-a-uuid"}),
    lambda user: create_access_token({"sub": "no user id"}),
])
def test_bad_tokens_are_unauthenticated(token_client, agent, token_factory) -> None:
    client, _ = token_client
    token = token_factory(agent)
    response = client.get("/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_deactivated_user_is_unauthenticated(token_client) -> None:
    client, deactivated = token_client
    token = create_access_token({"user_id": str(deactivated.id)})
    response = client.get("/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_unknown_user_is_unauthenticated(token_client) -> None:
    client, _ = token_client
    stranger = build_user("admin")
    token = create_access_token({"user_id": str(stranger.id)})
    response = client.get("/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_agent_route(client, identity, agent, operator, admin) -> None:
    identity.user = agent
    assert client.get("/agent-only").status_code == 200
    identity.user = admin
    assert client.get("/agent-only").status_code == 200

    identity.user = operator
    response = client.get("/agent-only")
    assert response.status_code == 403
    assert response.json()["required"] == ["agent", "admin"]
