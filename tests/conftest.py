"""Shared fixtures for the translation pipeline tests."""

from __future__ import annotations

import asyncio
import copy
import json
from typing import Callable, Dict, List

import httpx
import pytest

from assessment_translator.config import DEFAULT_CONFIG, ENV_OVERRIDES


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep credentials from the developer's shell out of the tests."""
    for env_name in ENV_OVERRIDES:
        monkeypatch.delenv(env_name, raising=False)


def make_config(provider: str = "google", credentials: bool = True, batch_delay: float = 0.0) -> Dict:
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["translation_provider"] = provider
    config["translation"]["batch_delay"] = batch_delay
    if credentials:
        config["google"]["api_key"] = "test-google-key"
        config["bhashini"]["user_id"] = "test-user"
        config["bhashini"]["ulca_api_key"] = "test-ulca-key"
    return config


@pytest.fixture
def google_config():
    return make_config("google")


@pytest.fixture
def bhashini_config():
    return make_config("bhashini")


@pytest.fixture
def demo_config():
    return make_config("google", credentials=False)


class FakeProvider:
    """Records batches and translates by prefixing the target language."""

    def __init__(self, batch_size: int = 10, yield_control: bool = True):
        self.batch_size = batch_size
        self.yield_control = yield_control
        self.calls: List[tuple] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def translate_batch(self, texts, target_lang):
        self.calls.append((list(texts), target_lang))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        if self.yield_control:
            await asyncio.sleep(0)
        self.in_flight -= 1
        return [f"{target_lang}:{text}" for text in texts]

    @property
    def sent_texts(self) -> List[str]:
        return [text for batch, _ in self.calls for text in batch]


@pytest.fixture
def fake_provider():
    return FakeProvider()


class RecordingTransport:
    """httpx.MockTransport wrapper that keeps every request it saw."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport)

    def bodies(self, path_suffix: str = "") -> List[Dict]:
        return [
            json.loads(request.content)
            for request in self.requests
            if request.url.path.endswith(path_suffix)
        ]


def google_handler(request: httpx.Request) -> httpx.Response:
    """Translate like Google does, tagging each text with the target language."""
    body = json.loads(request.content)
    translations = [{"translatedText": f"{body['target']}:{text}"} for text in body["q"]]
    return httpx.Response(200, json={"data": {"translations": translations}})


def bhashini_handler(failing_languages=()) -> Callable[[httpx.Request], httpx.Response]:
    """Discovery plus compute endpoints; discovery fails for failing_languages."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        target = body["pipelineTasks"][0]["config"]["language"]["targetLanguage"]

        if request.url.path.endswith("/model/getModelsPipeline"):
            if target in failing_languages:
                return httpx.Response(503, json={"message": "service unavailable"})
            return httpx.Response(
                200,
                json={"pipelineInferenceAPIEndPoint": {"callbackUrl": f"https://compute.example/{target}"}},
            )

        output = [
            {"source": item["source"], "target": f"{target}:{item['source']}"}
            for item in body["inputData"]["input"]
        ]
        return httpx.Response(200, json={"pipelineResponse": [{"taskType": "translation", "output": output}]})

    return handler
