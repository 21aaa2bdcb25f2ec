"""Shared test helpers: API account/task builders and a fake Redis."""

import uuid


def unique_email(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}@example.com"


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def signup(client, prefix: str, role: str = "teacher", teacher_id=None,
                 password: str = "password_123") -> dict:
    """Sign up through the API and return {token, user, headers, password}."""
    body = {"email": unique_email(prefix), "password": password, "role": role}
    if teacher_id is not None:
        body["teacherId"] = str(teacher_id)
    r = await client.post("/auth/signup", json=body)
    assert r.status_code == 201, r.text
    data = r.json()["data"]
    return {**data, "headers": bearer(data["token"]), "password": password}


async def create_task(client, account: dict, title: str = "Read chapter 3", **fields) -> dict:
    body = {"title": title, "description": f"{title}, with notes", **fields}
    r = await client.post("/tasks", json=body, headers=account["headers"])
    assert r.status_code == 201, r.text
    return r.json()["data"]["task"]


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the login limiter."""

    def __init__(self):
        self.counts: dict[str, int] = {}
        self.ttls: dict[str, int] = {}

    async def incr(self, key: str) -> int:
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    async def expire(self, key: str, seconds: int) -> bool:
        self.ttls[key] = seconds
        return True
