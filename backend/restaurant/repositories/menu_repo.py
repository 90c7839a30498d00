from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from restaurant.models.category import Category
from restaurant.models.menu_item import MenuItem


class MenuRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_item(self, item_id: int, available_only: bool = False) -> Optional[MenuItem]:
        qry = self.db.query(MenuItem).filter(MenuItem.id == item_id)
        if available_only:
            qry = qry.filter(MenuItem.is_available == True)
        return qry.first()

    def list_items(
        self, q: Optional[str] = None, category_id: Optional[int] = None
    ) -> List[MenuItem]:
        """Available menu items, optionally narrowed by category and a name/description search term."""
        query = self.db.query(MenuItem).filter(MenuItem.is_available == True)
        if category_id is not None:
            query = query.filter(MenuItem.category_id == category_id)
        if q:
            like = f"%{q}%"
            query = query.filter(
                (MenuItem.name.ilike(like)) | (MenuItem.description.ilike(like))
            )
        return query.order_by(MenuItem.name).all()

    def list_active_categories(self) -> List[Tuple[Category, int]]:
        """Active categories paired with their count of available items."""
        counts = (
            self.db.query(MenuItem.category_id, func.count(MenuItem.id).label("n"))
            .filter(MenuItem.is_available == True)
            .group_by(MenuItem.category_id)
            .subquery()
        )
        rows = (
            self.db.query(Category, func.coalesce(counts.c.n, 0))
            .outerjoin(counts, counts.c.category_id == Category.id)
            .filter(Category.is_active == True)
            .order_by(Category.name)
            .all()
        )
        return [(c, int(n)) for c, n in rows]

    def get_active_category(self, category_id: int) -> Optional[Category]:
        return (
            self.db.query(Category)
            .filter(Category.id == category_id, Category.is_active == True)
            .first()
        )

    def create_category(self, name: str, description: str = None, image_url: str = None):
        c = Category(name=name, description=description, image_url=image_url)
        self.db.add(c)
        self.db.flush()
        return c

    def create_or_update_item(
        self,
        name: str,
        price,
        category_id: int,
        preparation_time: Optional[int] = 15,
        description: str = None,
        image_url: str = None,
        is_available: bool = True,
    ) -> MenuItem:
        item = (
            self.db.query(MenuItem)
            .filter(MenuItem.name == name, MenuItem.category_id == category_id)
            .first()
        )
        if item is None:
            item = MenuItem(name=name, category_id=category_id)
            self.db.add(item)
        item.price = price
        item.preparation_time = preparation_time
        item.description = description
        item.image_url = image_url
        item.is_available = is_available
        self.db.flush()
        return item
