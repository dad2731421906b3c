"""Tests for two-party conversations and messages."""

import uuid

from httpx import AsyncClient

from rentora.models.user import User


async def _open(client: AsyncClient, headers: dict, other: User):
    return await client.post("/api/v1/messages/conversations", json={"userId": str(other.id)}, headers=headers)


class TestConversations:
    async def test_open_then_reuse(self, client: AsyncClient, guest_headers, guest_user, host_user, host_headers):
        created = await _open(client, guest_headers, host_user)
        assert created.status_code == 201
        data = created.json()["data"]
        assert sorted(data["participantIds"]) == sorted([str(guest_user.id), str(host_user.id)])
        assert data["lastMessage"] is None

        reused = await _open(client, host_headers, guest_user)
        assert reused.status_code == 200
        assert reused.json()["data"]["id"] == data["id"]

    async def test_cannot_message_yourself(self, client: AsyncClient, guest_headers, guest_user):
        response = await _open(client, guest_headers, guest_user)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_unknown_user(self, client: AsyncClient, guest_headers):
        response = await client.post(
            "/api/v1/messages/conversations", json={"userId": str(uuid.uuid4())}, headers=guest_headers
        )
        assert response.status_code == 404

    async def test_list_includes_last_message(self, client: AsyncClient, guest_headers, host_user, other_headers):
        conversation = (await _open(client, guest_headers, host_user)).json()["data"]
        await client.post(
            f"/api/v1/messages/conversations/{conversation['id']}/messages",
            json={"content": "Is parking included?"},
            headers=guest_headers,
        )

        mine = await client.get("/api/v1/messages/conversations", headers=guest_headers)
        items = mine.json()["data"]
        assert [c["id"] for c in items] == [conversation["id"]]
        assert items[0]["lastMessage"]["content"] == "Is parking included?"

        theirs = await client.get("/api/v1/messages/conversations", headers=other_headers)
        assert theirs.json()["data"] == []


class TestMessages:
    async def test_send_and_read(self, client: AsyncClient, guest_headers, guest_user, host_user, host_headers):
        conversation = (await _open(client, guest_headers, host_user)).json()["data"]
        url = f"/api/v1/messages/conversations/{conversation['id']}/messages"

        sent = await client.post(url, json={"content": "Hello there"}, headers=guest_headers)
        assert sent.status_code == 201
        assert sent.json()["data"]["senderId"] == str(guest_user.id)
        assert sent.json()["data"]["isRead"] is False

        # The sender's own view leaves the message unread.
        own_view = await client.get(url, headers=guest_headers)
        assert own_view.json()["data"][0]["isRead"] is False

        await client.get(url, headers=host_headers)
        after = await client.get(url, headers=guest_headers)
        assert after.json()["data"][0]["isRead"] is True
        assert after.json()["meta"]["total"] == 1

    async def test_blank_content_rejected(self, client: AsyncClient, guest_headers, host_user):
        conversation = (await _open(client, guest_headers, host_user)).json()["data"]
        response = await client.post(
            f"/api/v1/messages/conversations/{conversation['id']}/messages",
            json={"content": "   "},
            headers=guest_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_outsider_forbidden(self, client: AsyncClient, guest_headers, host_user, other_headers):
        conversation = (await _open(client, guest_headers, host_user)).json()["data"]
        url = f"/api/v1/messages/conversations/{conversation['id']}/messages"

        read = await client.get(url, headers=other_headers)
        assert read.status_code == 403

        write = await client.post(url, json={"content": "Let me in"}, headers=other_headers)
        assert write.status_code == 403
