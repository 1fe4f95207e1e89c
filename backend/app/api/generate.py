# backend/app/api/generate.py

import logging

from fastapi import APIRouter, Depends

from app.core.config import Settings, get_settings
from app.core.schemas import ErrorResponse, GenerateRequest, Recipe
from app.services.webhook_service import WebhookService

logger = logging.getLogger(__name__)

router = APIRouter()

SAMPLE_RECIPE = {
    "title": "Test Pasta",
    "prep_time": "20 minutes",
    "servings": 2,
    "steps": ["Boil water", "Add pasta", "Cook for 8 minutes"],
}


def get_webhook_service(settings: Settings = Depends(get_settings)) -> WebhookService:
    """Dependency to get WebhookService instance."""
    return WebhookService(settings)


@router.get("/generate")
async def generate_diagnostics(settings: Settings = Depends(get_settings)):
    """Sample recipe plus whether the webhook is configured."""
    return {
        "test_recipe": SAMPLE_RECIPE,
        "environment": {
            "webhook_url_configured": bool(settings.N8N_WEBHOOK_URL),
        },
    }


@router.post(
    "/generate",
    response_model=Recipe,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def generate_recipe(
    request: GenerateRequest,
    webhook_service: WebhookService = Depends(get_webhook_service)
):
    """
    Generate a recipe from the user's ingredients and diet preference.

    The n8n workflow does the actual generation; its answer is normalized
    into a fixed title/prep_time/servings/steps shape.
    """
    recipe = await webhook_service.generate_recipe(request.ingredients, request.diet)
    logger.info("Generated recipe %r", recipe.title)
    return recipe
