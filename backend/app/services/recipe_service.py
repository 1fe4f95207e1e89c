# backend/app/services/recipe_service.py

import logging
from typing import Any, Dict, List, Optional

from starlette.concurrency import run_in_threadpool

from app.core.exceptions import ValidationError
from app.services.dynamodb_service import DynamoDBService

logger = logging.getLogger(__name__)


class RecipeService:
    def __init__(self, dynamodb: DynamoDBService):
        """Saved-recipe operations on top of the DynamoDB store."""
        self.dynamodb = dynamodb

    async def save_recipe(self, user: Optional[str], recipe: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Store a new recipe for ``user``. No duplicate detection."""
        if not user or not user.strip():
            raise ValidationError("A user is required to save a recipe")
        if not isinstance(recipe, dict):
            raise ValidationError("A recipe object is required")

        # boto3 blocks, keep it off the event loop
        record = await run_in_threadpool(self.dynamodb.store_recipe, user.strip(), recipe)
        logger.info("Saved recipe %s for %s", record["_id"], record["user"])
        return record

    async def list_recipes(self, user: Optional[str]) -> List[Dict[str, Any]]:
        """Every recipe saved by ``user``, in store order."""
        if not user or not user.strip():
            raise ValidationError("A user is required to list recipes")
        return await run_in_threadpool(self.dynamodb.list_recipes_by_user, user.strip())
