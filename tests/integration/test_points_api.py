"""HTTP tests for the ledger endpoints, driven through the ASGI app."""

from collections.abc import Callable

from httpx import AsyncClient

Headers = Callable[[str], dict[str, str]]


async def _post(client: AsyncClient, path: str, headers: dict[str, str], json: dict | None = None) -> tuple[int, dict]:
    resp = await client.post(f"/api/v1{path}", headers=headers, json=json)
    return resp.status_code, resp.json()


class TestOpenAccount:
    async def test_open_returns_account(self, client: AsyncClient, auth_headers: Headers) -> None:
        status, body = await _post(client, "/account/open", auth_headers("u1"))
        assert status == 200
        assert body["code"] == 0
        assert body["kind"] == "ok"
        assert body["data"] == {"accountId": "u1", "status": "ACTIVE"}

    async def test_unauthenticated(self, client: AsyncClient) -> None:
        status, body = await _post(client, "/account/open", {})
        assert status == 401
        assert body["code"] == 1001
        assert body["kind"] == "unauthenticated"

    async def test_invalid_token(self, client: AsyncClient) -> None:
        status, body = await _post(client, "/account/open", {"Authorization": "Bearer junk"})
        assert status == 401
        assert body["message"] == "Invalid or expired token"


class TestScenario:
    async def test_full_flow(self, client: AsyncClient, auth_headers: Headers) -> None:
        h = auth_headers("u1")
        assert (await _post(client, "/account/open", h))[0] == 200

        status, body = await _post(
            client, "/points/credit", h, {"amount": 100, "referenceId": "ref1", "source": "PAYMENT"}
        )
        assert status == 200
        assert body["data"] == {"status": "OK"}

        status, _ = await _post(
            client, "/points/debit", h, {"amount": 30, "referenceId": "ref2", "source": "GAME"}
        )
        assert status == 200

        status, body = await _post(client, "/balance/check", h, {"amount": 70})
        assert body["data"] == {"allowed": True, "balance": 70}
        status, body = await _post(client, "/balance/check", h, {"amount": 71})
        assert body["data"] == {"allowed": False, "balance": 70}

        status, body = await _post(
            client, "/points/debit", h, {"amount": 1000, "referenceId": "ref3", "source": "GAME"}
        )
        assert status == 422
        assert body["code"] == 3003
        assert body["kind"] == "failed-precondition"
        assert body["message"] == "Insufficient balance"

        # replay of ref1 changes nothing
        status, body = await _post(
            client, "/points/credit", h, {"amount": 100, "referenceId": "ref1", "source": "PAYMENT"}
        )
        assert status == 200
        status, body = await _post(client, "/balance/check", h, {"amount": 1})
        assert body["data"]["balance"] == 70


class TestErrors:
    async def test_mutation_without_token(self, client: AsyncClient) -> None:
        status, body = await _post(
            client, "/points/credit", {}, {"amount": 100, "referenceId": "ref1", "source": "PAYMENT"}
        )
        assert status == 401
        assert body["code"] == 1001

    async def test_non_object_body_without_token(self, client: AsyncClient) -> None:
        resp = await client.post("/api/v1/points/credit", json=[1, 2])
        assert resp.status_code == 401
        assert resp.json()["kind"] == "unauthenticated"

    async def test_unparseable_body_without_token(self, client: AsyncClient) -> None:
        for path in ("/api/v1/points/debit", "/api/v1/balance/check"):
            resp = await client.post(
                path, content=b"{not json", headers={"Content-Type": "application/json"}
            )
            assert resp.status_code == 401
            assert resp.json()["code"] == 1001

    async def test_unparseable_body_with_token(self, client: AsyncClient, auth_headers: Headers) -> None:
        resp = await client.post(
            "/api/v1/points/debit",
            content=b"{not json",
            headers={**auth_headers("u1"), "Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid request payload"

    async def test_invalid_argument(self, client: AsyncClient, auth_headers: Headers) -> None:
        h = auth_headers("u1")
        await _post(client, "/account/open", h)
        status, body = await _post(
            client, "/points/credit", h, {"amount": -5, "referenceId": "ref1", "source": "PAYMENT"}
        )
        assert status == 400
        assert body["code"] == 2001
        assert body["kind"] == "invalid-argument"
        assert body["message"] == "amount must be a positive number"

    async def test_wrong_source(self, client: AsyncClient, auth_headers: Headers) -> None:
        h = auth_headers("u1")
        await _post(client, "/account/open", h)
        status, body = await _post(
            client, "/points/debit", h, {"amount": 5, "referenceId": "ref1", "source": "PAYMENT"}
        )
        assert status == 400
        assert body["message"] == "source must be GAME or ADMIN"

    async def test_missing_body(self, client: AsyncClient, auth_headers: Headers) -> None:
        status, body = await _post(client, "/points/credit", auth_headers("u1"))
        assert status == 400
        assert body["kind"] == "invalid-argument"

    async def test_account_not_opened(self, client: AsyncClient, auth_headers: Headers) -> None:
        status, body = await _post(client, "/balance/check", auth_headers("ghost"), {"amount": 1})
        assert status == 404
        assert body["code"] == 3001
        assert body["kind"] == "not-found"


class TestAmbient:
    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["service"] == "points-ledger"

    async def test_request_id_echoed(self, client: AsyncClient) -> None:
        resp = await client.post("/api/v1/account/open", headers={"X-Request-ID": "trace-123"})
        assert resp.headers["X-Request-ID"] == "trace-123"
        assert resp.json()["request_id"] == "trace-123"

    async def test_request_id_generated(self, client: AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.headers["X-Request-ID"].startswith("req_")
