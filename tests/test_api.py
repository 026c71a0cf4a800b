import pytest

from conftest import make_token
from infrastructure.models import CommunityPostModel, MemberModel, MemberNicknameModel


pytestmark = pytest.mark.asyncio


async def test_health_is_public(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["data"] == {"status": "healthy"}
    assert "X-Request-ID" in resp.headers


async def test_routes_registered():
    from main import app
    routes = set(app.openapi()["paths"])
    assert "/api/v1/member/{member_num}" in routes
    assert "/api/v1/member/nicknames/{member_num}" in routes
    assert "/api/v1/community/{posts_id}/comments" in routes


async def test_missing_token_is_401(client):
    resp = await client.get("/api/v1/member/me")
    assert resp.status_code == 401
    assert resp.headers["WWW-Authenticate"] == "Bearer"
    body = resp.json()
    assert body["message"] == "Unauthorized"
    assert body["data"] is None


async def test_expired_and_forged_tokens_share_message(client, seed, member_factory):
    await seed(member_factory(42))
    expired = make_token({"sub": "42"}, expires_in=-60)
    forged = make_token({"sub": "42"}, secret="not-the-secret")
    messages = set()
    for token in (expired, forged):
        resp = await client.get("/api/v1/member/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        messages.add(resp.json()["message"])
    assert messages == {"Unauthorized"}


async def test_cookie_token_takes_priority(client, seed, member_factory, token_for):
    await seed(member_factory(42), member_factory(7))
    resp = await client.get(
        "/api/v1/member/me",
        headers={
            "Cookie": f"token={token_for(42)}",
            "Authorization": f"Bearer {token_for(7)}",
        },
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["member_num"] == 42


async def test_get_me(client, seed, member_factory, auth_headers):
    await seed(member_factory(42))
    resp = await client.get("/api/v1/member/me", headers=auth_headers(42))
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["member_birth_date"] == "1990.01.02"
    assert data["member_join_date"].endswith("Z")


async def test_get_me_for_unknown_member_is_404(client, auth_headers):
    resp = await client.get("/api/v1/member/me", headers=auth_headers(999))
    assert resp.status_code == 404
    assert resp.json()["message"] == "Member not found"


async def test_update_member(client, seed, member_factory, auth_headers, fetch_all):
    await seed(member_factory(42))
    resp = await client.put(
        "/api/v1/member/42",
        json={"member_nickname": "newnick", "member_email": None},
        headers=auth_headers(42),
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["member_nickname"] == "newnick"
    assert data["member_email"] == "user42@example.com"
    assert len(await fetch_all(MemberNicknameModel, member_num=42)) == 1


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"member_email": "가@b.com"}, "Invalid email format or Korean characters detected"),
        ({"member_phone": "0101234567"}, "Phone number must be 11 digits and start with 010"),
        ({"member_nickname": "x" * 21}, "Nickname must be between 1 and 20 characters"),
        ({"marketing_consent": "sure"}, "marketing_consent must be true or false"),
    ],
)
async def test_update_member_validation_errors(client, seed, member_factory, auth_headers, payload, message):
    await seed(member_factory(42))
    resp = await client.put("/api/v1/member/42", json=payload, headers=auth_headers(42))
    assert resp.status_code == 400
    assert resp.json()["message"] == message


async def test_update_member_duplicate_email(client, seed, member_factory, auth_headers):
    await seed(member_factory(42), member_factory(7))
    resp = await client.put(
        "/api/v1/member/42", json={"member_email": "user7@example.com"}, headers=auth_headers(42)
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Email is already in use"


async def test_update_other_member_is_forbidden(client, seed, member_factory, auth_headers, fetch_all):
    await seed(member_factory(42), member_factory(7))
    resp = await client.put(
        "/api/v1/member/7", json={"member_nickname": "hijack"}, headers=auth_headers(42)
    )
    assert resp.status_code == 403
    (row,) = await fetch_all(MemberModel, member_num=7)
    assert row.member_nickname == "nick7"


async def test_nickname_history_endpoint(client, seed, member_factory, auth_headers):
    await seed(member_factory(42))
    resp = await client.get("/api/v1/member/nicknames/42", headers=auth_headers(42))
    assert resp.status_code == 404

    await client.put("/api/v1/member/42", json={"member_nickname": "one"}, headers=auth_headers(42))
    await client.put("/api/v1/member/42", json={"member_nickname": "two"}, headers=auth_headers(42))

    resp = await client.get("/api/v1/member/nicknames/42", headers=auth_headers(42))
    assert resp.status_code == 200
    history = resp.json()["data"]
    assert [h["new_nickname"] for h in history] == ["two", "one"]
    assert all(h["change_date"].endswith("Z") for h in history)


async def test_delete_membership(client, seed, member_factory, auth_headers, fetch_all):
    await seed(
        member_factory(42),
        CommunityPostModel(member_num=42, post_title="a", post_content="a"),
    )
    resp = await client.delete("/api/v1/member/42", headers=auth_headers(42))
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Membership successfully deactivated"
    assert body["data"] == {"member_num": 42, "member_status": "inactive"}
    (post,) = await fetch_all(CommunityPostModel, member_num=42)
    assert post.post_status == "deleted"

    again = await client.delete("/api/v1/member/42", headers=auth_headers(42))
    assert again.status_code == 400
    assert again.json()["message"] == "Member is already deactivated"


async def test_delete_uses_identity_not_path(client, seed, member_factory, auth_headers, fetch_all):
    await seed(member_factory(42), member_factory(7))
    resp = await client.delete("/api/v1/member/7", headers=auth_headers(42))
    assert resp.status_code == 403
    members = {m.member_num: m.member_status for m in await fetch_all(MemberModel)}
    assert members == {42: "active", 7: "active"}


async def test_delete_unknown_member_is_404(client, auth_headers):
    resp = await client.delete("/api/v1/member/999", headers=auth_headers(999))
    assert resp.status_code == 404


async def test_unexpected_failure_is_generic_500(client, auth_headers):
    from main import app
    from api.dependencies import get_deactivation_service

    class _BrokenService:
        async def deactivate(self, member_num):
            raise RuntimeError("database password leaked in this message")

    app.dependency_overrides[get_deactivation_service] = lambda: _BrokenService()

    resp = await client.delete("/api/v1/member/42", headers=auth_headers(42))
    assert resp.status_code == 500
    body = resp.json()
    assert body["message"] == "Internal server error"
    assert "leaked" not in resp.text


async def test_path_type_errors_are_400(client, auth_headers):
    resp = await client.put("/api/v1/member/abc", json={}, headers=auth_headers(42))
    assert resp.status_code == 400
    assert resp.json()["message"].startswith("Validation failed")


async def test_unknown_route_uses_error_envelope(client):
    resp = await client.get("/api/v1/nope")
    assert resp.status_code == 404
    body = resp.json()
    assert body["code"] == 20006
    assert body["error"]["type"] == "HTTPError"
    assert body["error"]["request_id"] == resp.headers["X-Request-ID"]
