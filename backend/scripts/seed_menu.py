#!/usr/bin/env python3
"""
Seed categories and menu items.

Reads a JSON file shaped like
    {"categories": [{"name": "...", "description": "...", "items": [
        {"name": "...", "price": 12.5, "preparation_time": 15, "description": "..."}]}]}
or, with no --file, loads a small built-in menu. Existing items (same name in
the same category) are updated in place, so the script can be re-run.

Usage:
    python scripts/seed_menu.py [--file menu.json] [--reset]
"""
import argparse
import json
import logging
import os
import sys
from decimal import Decimal

# allow running from repo/scripts
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from restaurant.db import SessionLocal, init_db
from restaurant.models.category import Category
from restaurant.repositories.menu_repo import MenuRepository

log = logging.getLogger("seed_menu")

DEFAULT_MENU = {
    "categories": [
        {
            "name": "Starters",
            "description": "Small plates",
            "items": [
                {"name": "Lentil Soup", "price": "35.00", "preparation_time": 10},
                {"name": "Garden Salad", "price": "50.00", "preparation_time": None},
            ],
        },
        {
            "name": "Mains",
            "description": "Main dishes",
            "items": [
                {"name": "Classic Burger", "price": "25.00", "preparation_time": 20},
                {"name": "Family Pizza", "price": "150.00", "preparation_time": 40},
                {"name": "Grilled Chicken", "price": "95.00", "preparation_time": 35},
            ],
        },
        {
            "name": "Drinks",
            "description": None,
            "items": [
                {"name": "Fresh Lemonade", "price": "20.00", "preparation_time": 5},
                {"name": "Soda", "price": "5.00", "preparation_time": 1},
            ],
        },
    ]
}


def _price(raw) -> Decimal:
    return Decimal(str(raw)).quantize(Decimal("0.01"))


def seed(menu: dict) -> int:
    db = SessionLocal()
    repo = MenuRepository(db)
    seeded = 0
    try:
        for cat in menu.get("categories", []):
            category = db.query(Category).filter(Category.name == cat["name"]).first()
            if category is None:
                category = repo.create_category(
                    cat["name"], cat.get("description"), cat.get("image_url")
                )
            for item in cat.get("items", []):
                repo.create_or_update_item(
                    name=item["name"],
                    price=_price(item["price"]),
                    category_id=category.id,
                    preparation_time=item.get("preparation_time", 15),
                    description=item.get("description"),
                    image_url=item.get("image_url"),
                    is_available=item.get("is_available", True),
                )
                seeded += 1
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
    return seeded


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    parser = argparse.ArgumentParser()
    parser.add_argument("--file", "-f", help="Path to a menu JSON file")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables first")
    args = parser.parse_args()

    menu = DEFAULT_MENU
    if args.file:
        if not os.path.exists(args.file):
            log.error("File not found: %s", args.file)
            sys.exit(1)
        with open(args.file, "r", encoding="utf-8") as f:
            menu = json.load(f)

    init_db(reset=args.reset)
    log.info("Seeded %d menu items", seed(menu))
