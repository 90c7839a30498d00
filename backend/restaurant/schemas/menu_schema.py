from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from restaurant.schemas.common import Money


class MenuItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    description: Optional[str] = None
    price: Money
    image_url: Optional[str] = None
    category_id: int
    category_name: Optional[str] = None
    preparation_time: Optional[int] = None
    is_available: bool

    @classmethod
    def from_item(cls, item) -> "MenuItemOut":
        out = cls.model_validate(item)
        out.category_name = item.category.name if item.category else None
        return out


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    products_count: int = 0


class CategoryWithProductsOut(CategoryOut):
    products: List[MenuItemOut] = []
