"""
Category API endpoints.

Categories are per-user; every task belongs to exactly one of them.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from backend.dependencies import get_category_repository, get_current_user_id
from backend.schemas import CategoryCreate, CategoryResponse
from tempo.core.repositories import CategoryRepository

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=List[CategoryResponse])
async def list_categories(
    user_id: str = Depends(get_current_user_id),
    categories: CategoryRepository = Depends(get_category_repository),
):
    """List the user's categories alphabetically."""
    return [
        CategoryResponse(id=c.id, name=c.name, color=c.color)
        for c in categories.list_for_user(user_id)
    ]


@router.post("/", response_model=CategoryResponse, status_code=201)
async def create_category(
    body: CategoryCreate,
    user_id: str = Depends(get_current_user_id),
    categories: CategoryRepository = Depends(get_category_repository),
):
    """Create a category. Names are unique per user (case-insensitive)."""
    name = body.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Category name is required")

    existing = {c.name.lower() for c in categories.list_for_user(user_id)}
    if name.lower() in existing:
        raise HTTPException(status_code=400, detail=f"Category '{name}' already exists")

    category = categories.create(user_id, name, body.color)
    return CategoryResponse(id=category.id, name=category.name, color=category.color)
