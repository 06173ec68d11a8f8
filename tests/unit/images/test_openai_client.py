"""
Tests for the OpenAI image generation client.
"""

from typing import Any, AsyncGenerator, Dict, List

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from src.quotagate.config import OpenAISettings
from src.quotagate.core.exceptions import TransportFailure, UpstreamEmptyResult
from src.quotagate.core.images import OpenAIImageService

IMAGE_URL = "https://oaidalleapi.example.com/img-123.png"


class FakeOpenAI:
    """Scriptable images/generations backend."""

    def __init__(self) -> None:
        self.requests: List[Dict[str, Any]] = []
        self.response: web.StreamResponse = web.json_response(
            {"created": 1700000000, "data": [{"url": IMAGE_URL}]}
        )

    async def generations(self, request: web.Request) -> web.StreamResponse:
        self.requests.append({
            "authorization": request.headers.get("Authorization"),
            "body": await request.json(),
        })
        return self.response

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/v1/images/generations", self.generations)
        return app


@pytest.fixture
def fake_openai() -> FakeOpenAI:
    return FakeOpenAI()


@pytest_asyncio.fixture
async def openai_server(fake_openai: FakeOpenAI) -> AsyncGenerator[TestServer, None]:
    server = TestServer(fake_openai.app())
    await server.start_server()
    yield server
    await server.close()


def make_service(server: TestServer, **overrides: Any) -> OpenAIImageService:
    settings = OpenAISettings(
        api_key="sk-openai-test",
        base_url=str(server.make_url("/")),
        timeout_seconds=1.0,
        **overrides,
    )
    return OpenAIImageService(settings)


class TestGenerate:
    """Test single image generation."""

    @pytest.mark.asyncio
    async def test_generate_returns_first_url(self, openai_server: TestServer) -> None:
        url = await make_service(openai_server).generate("a cat")

        assert url == IMAGE_URL

    @pytest.mark.asyncio
    async def test_generate_requests_one_fixed_size_url_image(
        self, openai_server: TestServer, fake_openai: FakeOpenAI
    ) -> None:
        await make_service(openai_server).generate("a cat")

        request = fake_openai.requests[0]
        assert request["authorization"] == "Bearer sk-openai-test"
        assert request["body"] == {
            "prompt": "a cat",
            "n": 1,
            "size": "1024x1024",
            "response_format": "url",
        }

    @pytest.mark.asyncio
    async def test_generate_sends_configured_model(
        self, openai_server: TestServer, fake_openai: FakeOpenAI
    ) -> None:
        await make_service(openai_server, model="dall-e-3", image_size="1792x1024").generate("a cat")

        body = fake_openai.requests[0]["body"]
        assert body["model"] == "dall-e-3"
        assert body["size"] == "1792x1024"

    @pytest.mark.asyncio
    async def test_prompt_is_passed_through_untouched(
        self, openai_server: TestServer, fake_openai: FakeOpenAI
    ) -> None:
        prompt = "  "

        await make_service(openai_server).generate(prompt)

        assert fake_openai.requests[0]["body"]["prompt"] == prompt

    @pytest.mark.asyncio
    async def test_empty_image_list(self, openai_server: TestServer, fake_openai: FakeOpenAI) -> None:
        fake_openai.response = web.json_response({"created": 1700000000, "data": []})

        with pytest.raises(UpstreamEmptyResult, match="No image returned"):
            await make_service(openai_server).generate("a cat")

    @pytest.mark.asyncio
    async def test_image_without_url(self, openai_server: TestServer, fake_openai: FakeOpenAI) -> None:
        fake_openai.response = web.json_response({"data": [{"b64_json": "aGVsbG8="}]})

        with pytest.raises(UpstreamEmptyResult):
            await make_service(openai_server).generate("a cat")

    @pytest.mark.asyncio
    async def test_rejected_prompt(self, openai_server: TestServer, fake_openai: FakeOpenAI) -> None:
        fake_openai.response = web.json_response(
            {"error": {"code": "content_policy_violation", "message": "rejected"}}, status=400
        )

        with pytest.raises(TransportFailure) as exc_info:
            await make_service(openai_server).generate("a cat")
        assert exc_info.value.details["status"] == 400
