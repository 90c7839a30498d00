from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from restaurant.api.errors import ok
from restaurant.db import get_db
from restaurant.repositories.menu_repo import MenuRepository
from restaurant.schemas.menu_schema import (
    CategoryOut,
    CategoryWithProductsOut,
    MenuItemOut,
)
from restaurant.services.exceptions import NotFoundError

router = APIRouter(prefix="/api/customer", tags=["catalogue"])


def _dump_items(items):
    return [MenuItemOut.from_item(it).model_dump(mode="json") for it in items]


@router.get("/categories", summary="List active categories")
def list_categories(db: Session = Depends(get_db)):
    repo = MenuRepository(db)
    data = []
    for category, count in repo.list_active_categories():
        out = CategoryOut.model_validate(category)
        out.products_count = count
        data.append(out.model_dump(mode="json"))
    return ok(data, "Categories retrieved successfully")


@router.get("/categories/{category_id}", summary="Category with its available products")
def get_category(category_id: int, db: Session = Depends(get_db)):
    repo = MenuRepository(db)
    category = repo.get_active_category(category_id)
    if not category:
        raise NotFoundError("Category not found")
    items = repo.list_items(category_id=category_id)
    out = CategoryWithProductsOut.model_validate(category)
    out.products = [MenuItemOut.from_item(it) for it in items]
    out.products_count = len(items)
    return ok(out.model_dump(mode="json"), "Category retrieved successfully")


@router.get("/products", summary="List available products")
def list_products(
    category_id: Optional[int] = Query(None), db: Session = Depends(get_db)
):
    items = MenuRepository(db).list_items(category_id=category_id)
    return ok(_dump_items(items), "Products retrieved successfully")


@router.get("/products/search", summary="Search products by name or description")
def search_products(
    q: Optional[str] = Query(None, description="search term"),
    category_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    items = MenuRepository(db).list_items(q=q, category_id=category_id)
    return ok(_dump_items(items), "Search completed successfully")


@router.get("/products/{product_id}", summary="Get product by id")
def get_product(product_id: int, db: Session = Depends(get_db)):
    item = MenuRepository(db).get_item(product_id)
    if not item:
        raise NotFoundError("Product not found")
    return ok(
        MenuItemOut.from_item(item).model_dump(mode="json"),
        "Product details retrieved successfully",
    )
