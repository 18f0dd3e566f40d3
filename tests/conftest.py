"""Shared fakes for the translation pipeline tests."""

from __future__ import annotations

import asyncio
from typing import Callable, List, Optional, Union

import pytest

from intelligence.llm import BaseLLM, LLMResponse, Message


Responder = Callable[[str], Union[str, Exception]]


class FakeLLM(BaseLLM):
    """Offline LLM: ``responder(prompt)`` returns the reply text or an exception to raise."""

    def __init__(self, responder: Optional[Responder] = None, delay: float = 0.0) -> None:
        super().__init__(model="fake-model")
        self.responder = responder or (lambda prompt: "ok")
        self.delay = delay
        self.prompts: List[str] = []

    @property
    def provider(self) -> str:
        return "fake"

    async def acomplete(self, messages: List[Message], **kwargs) -> LLMResponse:
        prompt = messages[-1].content
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        reply = self.responder(prompt)
        if isinstance(reply, Exception):
            raise reply
        return LLMResponse(content=reply, model=self.model)


class ManualClock:
    """Deterministic monotonic clock; ``sleep`` advances time instantly."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = float(start)
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += max(0.0, float(seconds))


@pytest.fixture
def manual_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def make_llm():
    """Factory fixture: ``make_llm(responder, delay=0.0)`` builds a ``FakeLLM``."""
    return FakeLLM
