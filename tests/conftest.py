"""Shared test fixtures."""

from collections.abc import Iterator
from dataclasses import dataclass, field

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from kiosk_print.api.app import create_app
from kiosk_print.config import Settings
from kiosk_print.containers import AppContainer, build_container
from kiosk_print.domain.accounts import AccountRecord, AccountRole


@dataclass(eq=False)
class FakeChannel:
    """Channel handle that records frames instead of sending them."""

    frames: list[dict[str, object]] = field(default_factory=list)
    closed: bool = False

    async def send_json(self, data: object) -> None:
        if self.closed:
            raise RuntimeError("channel closed")
        assert isinstance(data, dict)
        self.frames.append(data)

    def events(self) -> list[str]:
        return [str(frame["event"]) for frame in self.frames]

    def data_for(self, event: str) -> list[object]:
        return [frame["data"] for frame in self.frames if frame["event"] == event]


def register_user(
    container: AppContainer, name: str = "alice", secret: str = "s3cret"
) -> AccountRecord:
    return container.identity_service.register(AccountRole.USER, name, secret)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        storage_backend="memory",
        file_transport="inline",
        public_base_url="http://testserver",
        wallet_enabled=True,
    )


@pytest.fixture
def container(settings: Settings) -> AppContainer:
    return build_container(settings)


@pytest.fixture
def app(container: AppContainer) -> FastAPI:
    return create_app(container)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def user(container: AppContainer) -> AccountRecord:
    return register_user(container)
