from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class GenerateRequest(BaseModel):
    """Schema for a recipe generation request."""
    ingredients: List[str] = Field(default_factory=list, description="Ingredients the user has")
    diet: str = Field("", description="Diet preference, e.g. 'vegan'")


class Recipe(BaseModel):
    """Schema for a normalized recipe."""
    title: str = Field(..., description="Recipe title")
    prep_time: str = Field(..., description="Free-form preparation time, e.g. '20 minutes'")
    servings: int = Field(..., ge=0, description="Number of servings")
    steps: List[str] = Field(default_factory=list, description="Ordered instructions")


class SaveRecipeRequest(BaseModel):
    """Schema for saving a recipe on behalf of a user."""
    user: str = Field("", description="Owner email")
    recipe: Dict[str, Any] = Field(default_factory=dict, description="Recipe-shaped object")


class StoredRecipe(BaseModel):
    """Schema for a persisted recipe record."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Identifier assigned by the store")
    user: str = Field(..., description="Owner email")
    title: Optional[str] = None
    prep_time: Optional[str] = None
    servings: Optional[Union[int, float]] = None
    steps: List[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str
