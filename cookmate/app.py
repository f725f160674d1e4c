import logging
import math
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from . import crud, schemas
from .config import settings
from .db import SessionLocal, init_db
from .logging_config import setup_logging
from .normalize import InvalidQuery, split_ingredient_param

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # Initialize DB once at startup
    init_db()
    logger.info("%s %s starting up", settings.app_name, settings.version)
    yield
    logger.info("%s shutting down", settings.app_name)


app = FastAPI(title=settings.app_name, version=settings.version,
              lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidQuery)
async def invalid_query_handler(request: Request, exc: InvalidQuery):
    logger.warning("Rejected ingredient search: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=schemas.ErrorResponse(
            error="invalid_query", detail=str(exc)
        ).model_dump(),
    )


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    x_user: str | None = Header(default=None),
    db: Session = Depends(get_db),
):
    """Resolve the caller from the ``X-User`` header for this request."""
    username = (x_user or "").strip()
    if not username:
        raise HTTPException(status_code=401, detail="X-User header required")
    if len(username) > 50:
        raise HTTPException(status_code=400, detail="Username too long")
    return crud.get_or_create_user(db, username)


def get_recipe_or_404(recipe_id: int, db: Session = Depends(get_db)):
    r = crud.get_recipe(db, recipe_id)
    if not r:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return r


def _require_author(recipe, user):
    if recipe.author_id != user.id:
        raise HTTPException(
            status_code=403, detail="Only the author can change this recipe"
        )


def _link_header(request: Request, page: int, pages: int, page_size: int):
    links = []

    def url(p):
        return str(request.url.include_query_params(page=p,
                                                    page_size=page_size))

    links.append(f'<{url(1)}>; rel="first"')
    if page > 1:
        links.append(f'<{url(page - 1)}>; rel="prev"')
    if page < pages:
        links.append(f'<{url(page + 1)}>; rel="next"')
    links.append(f'<{url(max(pages, 1))}>; rel="last"')
    return ", ".join(links)


@app.get("/api/health")
def health():
    return {"message": "CookMate API is running!", "status": "ok"}


@app.get("/api/recipes", response_model=schemas.RecipePage)
def list_recipes(
    request: Request,
    response: Response,
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1),
    q: str | None = None,
    category: str | None = None,
    db: Session = Depends(get_db),
):
    page_size = min(page_size or settings.pagination.default_page_size,
                    settings.pagination.max_page_size)
    items, total = crud.list_recipes(db, page=page, page_size=page_size,
                                     q=q, category=category)
    pages = math.ceil(total / page_size) if total else 0
    response.headers["Link"] = _link_header(request, page, pages, page_size)
    return schemas.RecipePage(
        items=[schemas.Recipe.from_model(r) for r in items],
        total=total,
        page=page,
        pages=pages,
    )


@app.post("/api/recipes", response_model=schemas.RecipeCreated,
          status_code=201)
def create_recipe(
    recipe: schemas.RecipeCreate,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    r = crud.create_recipe(db, recipe, user)
    return schemas.RecipeCreated(
        message="Recipe created successfully",
        recipe=schemas.Recipe.from_model(r),
    )


@app.get("/api/recipes/mine", response_model=schemas.RecipeList)
def my_recipes(db: Session = Depends(get_db), user=Depends(get_current_user)):
    recipes = crud.get_user_recipes(db, user)
    return schemas.RecipeList(
        items=[schemas.Recipe.from_model(r) for r in recipes]
    )


@app.get("/api/recipes/search-by-ingredients",
         response_model=schemas.SearchResults,
         responses={400: {"model": schemas.ErrorResponse}})
def search_by_ingredients(
    ingredients: str | None = Query(
        None, description="Comma-separated ingredient names"
    ),
    db: Session = Depends(get_db),
):
    ranked = crud.search_by_ingredients(db,
                                        split_ingredient_param(ingredients))
    return schemas.SearchResults(
        items=[
            schemas.RankedRecipe.from_model(r.recipe,
                                            match_count=r.match_count)
            for r in ranked
        ]
    )


@app.get("/api/recipes/{recipe_id}", response_model=schemas.Recipe)
def get_recipe(recipe=Depends(get_recipe_or_404)):
    return schemas.Recipe.from_model(recipe)


@app.put("/api/recipes/{recipe_id}", response_model=schemas.Recipe)
def update_recipe(
    recipe_id: int,
    recipe: schemas.RecipeCreate,
    db: Session = Depends(get_db),
    existing=Depends(get_recipe_or_404),
    user=Depends(get_current_user),
):
    _require_author(existing, user)
    r = crud.update_recipe(db, recipe_id, recipe)
    return schemas.Recipe.from_model(r)


@app.delete("/api/recipes/{recipe_id}")
def delete_recipe(
    recipe_id: int,
    db: Session = Depends(get_db),
    existing=Depends(get_recipe_or_404),
    user=Depends(get_current_user),
):
    _require_author(existing, user)
    crud.delete_recipe(db, recipe_id)
    return {"deleted": True}


@app.post("/api/recipes/{recipe_id}/like", response_model=schemas.LikeStatus)
def like_recipe(
    db: Session = Depends(get_db),
    recipe=Depends(get_recipe_or_404),
    user=Depends(get_current_user),
):
    liked, count = crud.toggle_like(db, recipe, user)
    return schemas.LikeStatus(
        message="Recipe like status updated", liked=liked, likes_count=count
    )
