import json
from datetime import datetime, timezone

from sqlalchemy import (
    Column, DateTime, ForeignKey, Integer, String, Table, Text,
)
from sqlalchemy.orm import relationship

from .db import Base


def utcnow():
    return datetime.now(timezone.utc)


recipe_likes = Table(
    "recipe_likes",
    Base.metadata,
    Column("recipe_id", ForeignKey("recipes.id", ondelete="CASCADE"),
           primary_key=True),
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"),
           primary_key=True),
)


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)


class Recipe(Base):
    __tablename__ = "recipes"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), index=True, nullable=False)
    description = Column(Text, nullable=False)
    steps = Column(Text, nullable=True)  # JSON-encoded list
    cooking_time = Column(Integer, nullable=False)  # minutes
    difficulty = Column(String(10), nullable=False, default="Medium")
    category = Column(String(100), index=True, nullable=False)
    tags = Column(Text, nullable=True)  # JSON-encoded list
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow,
                        nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow,
                        onupdate=utcnow, nullable=False)

    author = relationship("User")
    ingredients = relationship(
        "RecipeIngredient",
        order_by="RecipeIngredient.position",
        cascade="all, delete-orphan",
        back_populates="recipe",
    )
    likes = relationship("User", secondary=recipe_likes)

    @property
    def step_list(self):
        return json.loads(self.steps or "[]")

    @property
    def tag_list(self):
        return json.loads(self.tags or "[]")


class RecipeIngredient(Base):
    __tablename__ = "recipe_ingredients"
    id = Column(Integer, primary_key=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"),
                       index=True, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(100), index=True, nullable=False)
    quantity = Column(String(50), nullable=False)

    recipe = relationship("Recipe", back_populates="ingredients")
