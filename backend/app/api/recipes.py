# backend/app/api/recipes.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.core.config import Settings, get_settings
from app.core.schemas import ErrorResponse, SaveRecipeRequest, StoredRecipe
from app.services.dynamodb_service import DynamoDBService
from app.services.recipe_service import RecipeService

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def get_dynamodb_service(settings: Settings = Depends(get_settings)) -> DynamoDBService:
    """Per request: boto3 resources must not be shared between threads."""
    return DynamoDBService(settings)


def get_recipe_service(
    dynamodb: DynamoDBService = Depends(get_dynamodb_service)
) -> RecipeService:
    """Dependency to get RecipeService instance."""
    return RecipeService(dynamodb)


@router.post("/recipes", response_model=StoredRecipe, response_model_by_alias=True, responses=ERROR_RESPONSES)
@router.post("/save-recipe", response_model=StoredRecipe, response_model_by_alias=True, include_in_schema=False)
async def save_recipe(
    request: SaveRecipeRequest,
    recipe_service: RecipeService = Depends(get_recipe_service)
):
    """Save a recipe for a user and return the stored record."""
    return await recipe_service.save_recipe(request.user, request.recipe)


@router.get("/recipes", response_model=List[StoredRecipe], response_model_by_alias=True, responses=ERROR_RESPONSES)
@router.get("/get-recipes", response_model=List[StoredRecipe], response_model_by_alias=True, include_in_schema=False)
async def list_recipes(
    user: Optional[str] = Query(None, description="Owner email"),
    recipe_service: RecipeService = Depends(get_recipe_service)
):
    """List every recipe a user has saved."""
    return await recipe_service.list_recipes(user)
