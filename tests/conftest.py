"""Shared fakes for the dispatch core."""

from __future__ import annotations

from pathlib import Path

import pytest

from epictech.bridge import Bridge, BridgeError
from epictech.completion_client import BackendError
from epictech.conversation import ConversationStore
from epictech.persona import Persona
from epictech.router import AIResponder, AlternateBotResponder, Router
from epictech.session import ChatSession
from epictech.state_store import MemoryStateStore


class FakeClient:
    def __init__(self, reply: str = "hi there", fail: bool = False) -> None:
        self.reply = reply
        self.fail = fail
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise BackendError("boom: upstream 500")
        return self.reply


class FakeBridge(Bridge):
    name = "Fake"

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[tuple[str, str | None]] = []

    def configured(self) -> bool:
        return True

    def _deliver(self, text: str, target_channel: str | None) -> None:
        if self.fail:
            raise BridgeError("bridge down")
        self.sent.append((text, target_channel))


@pytest.fixture
def persona(tmp_path: Path) -> Persona:
    path = tmp_path / "persona.txt"
    path.write_text("You are a test persona.\n", encoding="utf-8")
    return Persona(path)


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def bridge() -> FakeBridge:
    return FakeBridge()


@pytest.fixture
def store() -> ConversationStore:
    return ConversationStore()


@pytest.fixture
def state() -> MemoryStateStore:
    return MemoryStateStore()


@pytest.fixture
def router(client, bridge, store, persona) -> Router:
    return Router(
        ai=AIResponder(client, store, persona),
        alternate=AlternateBotResponder(bridge),
    )


@pytest.fixture
def session(router, store, state) -> ChatSession:
    return ChatSession(router, store, state)
