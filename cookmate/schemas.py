from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


Difficulty = Literal["Easy", "Medium", "Hard"]


def _required_text(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


class Ingredient(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str = Field(..., max_length=100,
                      json_schema_extra={"example": "tomato"})
    quantity: str = Field(..., max_length=50,
                          json_schema_extra={"example": "2"})

    @field_validator("name", "quantity")
    @classmethod
    def not_blank(cls, v):
        return _required_text(v)


class Step(BaseModel):
    step_number: int = Field(..., ge=1)
    instruction: str

    @field_validator("instruction")
    @classmethod
    def not_blank(cls, v):
        return _required_text(v)


class RecipeBase(BaseModel):
    title: str = Field(
        ..., max_length=200, json_schema_extra={"example": "Caprese Salad"}
    )
    description: str = Field(
        ..., json_schema_extra={"example": "Tomato, mozzarella and basil."}
    )
    ingredients: List[Ingredient] = Field(..., min_length=1)
    steps: List[Step] = Field(default_factory=list)
    cooking_time: int = Field(..., ge=1, description="Minutes")
    difficulty: Difficulty = "Medium"
    category: str = Field(..., max_length=100)
    tags: List[str] = Field(default_factory=list)

    @field_validator("title", "description", "category")
    @classmethod
    def not_blank(cls, v):
        return _required_text(v)

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return [t.strip() for t in v if t and t.strip()]


class RecipeCreate(RecipeBase):
    pass


class Author(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str


class Recipe(RecipeBase):
    id: int
    author: Author
    likes_count: int = 0
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, r, **extra):
        """Build from an ORM recipe, decoding the JSON-encoded columns."""
        return cls(
            id=r.id,
            title=r.title,
            description=r.description,
            ingredients=[Ingredient.model_validate(i) for i in r.ingredients],
            steps=r.step_list,
            cooking_time=r.cooking_time,
            difficulty=r.difficulty,
            category=r.category,
            tags=r.tag_list,
            author=Author.model_validate(r.author),
            likes_count=len(r.likes),
            created_at=r.created_at,
            updated_at=r.updated_at,
            **extra,
        )


class RankedRecipe(Recipe):
    match_count: int = Field(..., ge=0)


class RecipePage(BaseModel):
    items: List[Recipe]
    total: int
    page: int
    pages: int


class RecipeList(BaseModel):
    items: List[Recipe]


class SearchResults(BaseModel):
    items: List[RankedRecipe]


class RecipeCreated(BaseModel):
    message: str
    recipe: Recipe


class LikeStatus(BaseModel):
    message: str
    liked: bool
    likes_count: int


class ErrorResponse(BaseModel):
    error: str
    detail: str | None = None
