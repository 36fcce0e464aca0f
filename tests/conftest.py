"""
Interview Console - Test Configuration and Fixtures
"""
import json
from typing import Any, AsyncGenerator

import httpx
import pytest

from interview_console.config.settings import Settings
from interview_console.core.api_client import MockInterviewAPI
from interview_console.core.app_shell import AppShell
from interview_console.core.session_context import SessionContext
from interview_console.core.toasts import ToastQueue

BASE_URL = "http://backend.test"


class FakeBackend:
    """
    Route table standing in for the remote interview API.

    A route answers with a static JSON body, or with a handler receiving the
    request; handlers may be coroutines to simulate latency.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, body: Any = None, status: int = 200) -> None:
        self.routes[(method.upper(), path)] = (status, body)

    def get(self, path: str, body: Any = None, status: int = 200) -> None:
        self.on("GET", path, body, status)

    def post(self, path: str, body: Any = None, status: int = 200) -> None:
        self.on("POST", path, body, status)

    def calls(self, path: str, method: str | None = None) -> list[httpx.Request]:
        return [
            request for request in self.requests
            if request.url.path == path and (method is None or request.method == method.upper())
        ]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"detail": f"No route for {request.method} {request.url.path}"})

        status, body = route
        if callable(body):
            body = body(request)
            if hasattr(body, "__await__"):
                body = await body
        if isinstance(body, httpx.Response):
            return body
        return httpx.Response(status, json=body)


def form_fields(request: httpx.Request) -> dict[str, str]:
    """Decode a urlencoded request body."""
    return dict(httpx.QueryParams(request.content.decode()))


def json_body(request: httpx.Request) -> Any:
    return json.loads(request.content)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        api_base_url=BASE_URL,
        filter_debounce_ms=20,
        feedback_poll_interval_seconds=0.01,
        storage_path=str(tmp_path / "local_storage.json"),
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
async def api(backend: FakeBackend) -> AsyncGenerator[MockInterviewAPI, None]:
    client = MockInterviewAPI(base_url=BASE_URL, transport=httpx.MockTransport(backend))
    yield client
    await client.close()


@pytest.fixture
def context(tmp_path, api: MockInterviewAPI) -> SessionContext:
    ctx = SessionContext(tmp_path / "local_storage.json", on_admin_token=api.set_admin_token)
    ctx.load()
    return ctx


@pytest.fixture
def toasts() -> ToastQueue:
    # Frozen clock so toasts never expire mid-test
    return ToastQueue(clock=lambda: 0.0)


@pytest.fixture
def shell(context: SessionContext, toasts: ToastQueue) -> AppShell:
    return AppShell(context, toasts)


@pytest.fixture
def student_data() -> dict[str, Any]:
    return {
        "name": "Asha Rao",
        "email": "asha@example.com",
        "program_id": 7,
        "program_name": "Data Science",
    }


@pytest.fixture
def signed_in_shell(shell: AppShell, student_data: dict[str, Any]) -> AppShell:
    shell.handle_login(student_data)
    shell.toasts._toasts.clear()
    return shell
