import asyncio
import json
import logging
import time

import httpx
import pytest
import pytest_asyncio

from app.core.config import Settings
from app.core.exceptions import (
    ConfigurationError,
    UpstreamEmptyResponseError,
    UpstreamError,
    UpstreamParseError,
    ValidationError,
)
from app.services.webhook_service import WebhookService


def make_service(settings, handler):
    """WebhookService whose HTTP client records every request it sends."""
    sent = []

    def transport_handler(request: httpx.Request) -> httpx.Response:
        sent.append(request)
        return handler(request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(transport_handler))
    return WebhookService(settings, http_client=client), sent


@pytest.mark.asyncio
async def test_forwards_trimmed_input_once(test_settings):
    service, sent = make_service(
        test_settings,
        lambda request: httpx.Response(200, json={"title": "Tofu Stir Fry", "steps": ["Fry tofu"]}),
    )

    recipe = await service.generate_recipe(["  tofu ", "rice  "], "  vegan ")

    assert len(sent) == 1
    assert str(sent[0].url) == test_settings.N8N_WEBHOOK_URL
    assert sent[0].method == "POST"
    assert json.loads(sent[0].content) == {"ingredients": ["tofu", "rice"], "diet": "vegan"}
    assert recipe.title == "Tofu Stir Fry"
    assert recipe.steps == ["Fry tofu"]


@pytest.mark.asyncio
async def test_response_is_normalized(test_settings):
    service, _ = make_service(
        test_settings,
        lambda request: httpx.Response(200, json={"instructions": "Boil\n\nServe", "yield": "3"}),
    )

    recipe = await service.generate_recipe(["pasta"], "vegetarian")

    assert recipe.title == "Custom vegetarian Recipe"
    assert recipe.prep_time == "30 minutes"
    assert recipe.servings == 3
    assert recipe.steps == ["Boil", "Serve"]


@pytest.mark.parametrize(
    "ingredients,diet",
    (
        ([], "vegan"),
        (None, "vegan"),
        ("tofu", "vegan"),
        (["tofu"], ""),
        (["tofu"], "   "),
        (["tofu"], None),
        (["tofu", 3], "vegan"),
    ),
)
@pytest.mark.asyncio
async def test_bad_input_fails_before_any_request(test_settings, ingredients, diet):
    service, sent = make_service(test_settings, lambda request: httpx.Response(200, json={}))

    with pytest.raises(ValidationError):
        await service.generate_recipe(ingredients, diet)

    assert sent == []


@pytest.mark.asyncio
async def test_missing_webhook_url():
    settings = Settings(_env_file=None, N8N_WEBHOOK_URL=None)
    service, sent = make_service(settings, lambda request: httpx.Response(200, json={}))

    with pytest.raises(ConfigurationError, match="N8N webhook URL is not configured"):
        await service.generate_recipe(["tofu"], "vegan")
    assert sent == []


@pytest.mark.asyncio
async def test_empty_body(test_settings):
    service, _ = make_service(test_settings, lambda request: httpx.Response(200, content=b""))

    with pytest.raises(UpstreamEmptyResponseError, match="N8N returned an empty response"):
        await service.generate_recipe(["tofu"], "vegan")


@pytest.mark.asyncio
async def test_malformed_json_keeps_raw_body(test_settings):
    service, _ = make_service(test_settings, lambda request: httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(UpstreamParseError) as exc_info:
        await service.generate_recipe(["tofu"], "vegan")

    assert exc_info.value.message == "Invalid JSON response from n8n"
    assert exc_info.value.raw_body == "<html>oops</html>"


@pytest.mark.asyncio
async def test_upstream_error_message_is_verbatim(test_settings):
    service, _ = make_service(test_settings, lambda request: httpx.Response(500, json={"error": "X"}))

    with pytest.raises(UpstreamError) as exc_info:
        await service.generate_recipe(["tofu"], "vegan")

    assert exc_info.value.message == "X"


@pytest.mark.asyncio
async def test_upstream_error_without_message(test_settings):
    service, _ = make_service(test_settings, lambda request: httpx.Response(404, json={"detail": "nope"}))

    with pytest.raises(UpstreamError, match="N8N error: 404 Not Found"):
        await service.generate_recipe(["tofu"], "vegan")


@pytest.mark.asyncio
async def test_timeout_becomes_upstream_error(test_settings):
    def hang(request):
        raise httpx.ReadTimeout("timed out", request=request)

    service, _ = make_service(test_settings, hang)

    with pytest.raises(UpstreamError, match="timed out"):
        await service.generate_recipe(["tofu"], "vegan")


@pytest.mark.asyncio
async def test_malformed_json_is_logged(test_settings, caplog):
    service, _ = make_service(test_settings, lambda request: httpx.Response(200, text="not json {"))

    with caplog.at_level(logging.ERROR, logger="app.services.webhook_service"):
        with pytest.raises(UpstreamParseError):
            await service.generate_recipe(["tofu"], "vegan")

    assert any("not json {" in record.getMessage() for record in caplog.records)


@pytest_asyncio.fixture
async def trickling_webhook():
    """Local server that sends headers at once, then one body byte every 0.3s."""
    body = b'{"title": "x"}'

    async def handle(reader, writer):
        try:
            await reader.readuntil(b"\r\n\r\n")
            writer.write(
                b"HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n"
                + f"Content-Length: {len(body)}\r\n\r\n".encode()
            )
            await writer.drain()
            for i in range(len(body)):
                writer.write(body[i:i + 1])
                await writer.drain()
                await asyncio.sleep(0.3)
        except (ConnectionError, asyncio.IncompleteReadError):
            pass
        finally:
            writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    yield f"http://127.0.0.1:{port}/webhook"
    server.close()
    await server.wait_closed()


@pytest.mark.asyncio
async def test_deadline_covers_slow_body(trickling_webhook):
    settings = Settings(_env_file=None, N8N_WEBHOOK_URL=trickling_webhook, WEBHOOK_TIMEOUT_SECONDS=1.0)
    service = WebhookService(settings)

    started = time.monotonic()
    with pytest.raises(UpstreamError, match="timed out"):
        await service.generate_recipe(["tofu"], "vegan")

    assert time.monotonic() - started < 2.5
