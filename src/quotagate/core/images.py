"""
OpenAI image generation client.

One prompt in, one image location out. No retry, caching or batching.
"""

from typing import Any, Dict, Optional

import structlog

from ..config import OpenAISettings
from .exceptions import UpstreamEmptyResult
from .metrics import MetricsCollector
from .upstream import post_json

logger = structlog.get_logger(__name__)

SERVICE = "openai"


class OpenAIImageService:
    """Generation service backed by the OpenAI images API."""

    def __init__(self, settings: OpenAISettings, metrics: Optional[MetricsCollector] = None) -> None:
        self.settings = settings
        self.metrics = metrics

    def _build_payload(self, prompt: str) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "prompt": prompt,
            "n": 1,
            "size": self.settings.image_size,
            "response_format": "url",
        }
        if self.settings.model:
            payload["model"] = self.settings.model
        return payload

    async def generate(self, prompt: str) -> str:
        """
        Generate a single image and return its URL.

        Raises TransportFailure when the call fails and UpstreamEmptyResult
        when OpenAI answers without an image URL.
        """
        body = await post_json(
            SERVICE,
            "generate_image",
            self.settings.generations_url,
            self._build_payload(prompt),
            timeout_seconds=self.settings.timeout_seconds,
            bearer_token=self.settings.api_key,
            metrics=self.metrics,
        )

        images = body.get("data")
        if not isinstance(images, list) or not images:
            raise UpstreamEmptyResult("No image returned by OpenAI")

        first = images[0]
        url = first.get("url") if isinstance(first, dict) else None
        if not isinstance(url, str) or not url:
            raise UpstreamEmptyResult("No image returned by OpenAI")

        logger.info("Image generated", prompt_length=len(prompt), image_count=len(images))
        return url
