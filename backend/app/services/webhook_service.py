# backend/app/services/webhook_service.py

import asyncio
import json
import logging
from typing import Any, List, Optional, Tuple

import httpx

from app.core.config import Settings
from app.core.exceptions import (
    UpstreamEmptyResponseError,
    UpstreamError,
    UpstreamParseError,
    ValidationError,
)
from app.core.schemas import Recipe
from app.services.recipe_normalizer import normalize_recipe

logger = logging.getLogger(__name__)


def validate_generate_input(ingredients: Any, diet: Any) -> Tuple[List[str], str]:
    """Check and trim the generation request; returns (ingredients, diet)."""
    if not isinstance(ingredients, list) or len(ingredients) == 0:
        raise ValidationError("Please provide at least one ingredient")
    if not all(isinstance(item, str) for item in ingredients):
        raise ValidationError("Ingredients must be strings")
    if not diet or not isinstance(diet, str) or not diet.strip():
        raise ValidationError("Please provide a valid diet preference")
    return [item.strip() for item in ingredients], diet.strip()


class WebhookService:
    def __init__(self, settings: Settings, http_client: Optional[httpx.AsyncClient] = None):
        """Client for the n8n workflow that generates recipes."""
        self.settings = settings
        self.http_client = http_client

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={"Content-Type": "application/json"},
            timeout=self.settings.WEBHOOK_TIMEOUT_SECONDS,
        )

    async def _send(self, url: str, body: dict) -> httpx.Response:
        if self.http_client is not None:
            return await self.http_client.post(url, json=body)
        async with self._client() as client:
            return await client.post(url, json=body)

    async def _post(self, url: str, body: dict) -> httpx.Response:
        # httpx timeouts are per read, the deadline covers the whole exchange
        deadline = self.settings.WEBHOOK_TIMEOUT_SECONDS
        try:
            return await asyncio.wait_for(self._send(url, body), deadline)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.error("n8n webhook timed out after %ss", self.settings.WEBHOOK_TIMEOUT_SECONDS)
            raise UpstreamError("N8N webhook timed out") from e
        except httpx.HTTPError as e:
            logger.error("n8n webhook request failed: %s", e)
            raise UpstreamError(f"N8N request failed: {e}") from e

    async def generate_recipe(self, ingredients: Any, diet: Any) -> Recipe:
        """
        Ask the webhook for a recipe and normalize whatever it sends back.

        Raises ValidationError before any outbound call when the input is bad,
        ConfigurationError when no webhook URL is set, and one of the Upstream*
        errors when the webhook's answer is unusable.
        """
        ingredients, diet = validate_generate_input(ingredients, diet)
        url = self.settings.require_webhook_url()

        response = await self._post(url, {"ingredients": ingredients, "diet": diet})

        # Read as text so an empty body and broken JSON can be told apart
        response_text = response.text
        logger.debug("Raw n8n response: %s", response_text)

        if not response_text:
            logger.error("n8n returned an empty response (status %s)", response.status_code)
            raise UpstreamEmptyResponseError("N8N returned an empty response")

        try:
            data = json.loads(response_text)
        except ValueError as e:
            logger.error("Invalid JSON from n8n: %s", response_text)
            raise UpstreamParseError("Invalid JSON response from n8n", raw_body=response_text) from e

        if not response.is_success:
            message = data.get("error") if isinstance(data, dict) else None
            if not message:
                message = f"N8N error: {response.status_code} {response.reason_phrase}"
            logger.error("n8n webhook failed: %s", message)
            raise UpstreamError(str(message))

        return normalize_recipe(data, diet)
