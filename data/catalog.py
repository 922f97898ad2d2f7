"""
Product catalog persisted in the local store
"""

import logging
from typing import Dict, List, Optional

from config.settings import CATALOG_CATEGORIES, LOCAL_STORE_KEYS
from data.local_store import LocalStore
from data.models import Product

logger = logging.getLogger(__name__)


class Catalog:
    """Products grouped by category: {category: [product, ...]}"""

    def __init__(self, local_store: LocalStore, categories: Optional[List[str]] = None):
        self.local_store = local_store
        self.key = LOCAL_STORE_KEYS['products']
        self.products: Dict[str, List[Product]] = {category: [] for category in (categories or CATALOG_CATEGORIES)}
        self.load()

    def load(self):
        stored = self.local_store.get(self.key, {}) or {}
        for category, items in stored.items():
            self.products[category] = [Product.from_dict(item) for item in items]

    def save(self):
        self.local_store.set(self.key, {
            category: [product.to_dict() for product in items]
            for category, items in self.products.items()
        })

    def find(self, product_id: int) -> Optional[Product]:
        """Look a product up by id across every category"""
        for items in self.products.values():
            for product in items:
                if product.id == product_id:
                    return product
        return None

    def by_category(self, category: str) -> List[Product]:
        return list(self.products.get(category, []))

    def add(self, product: Product):
        self.products.setdefault(product.category, []).append(product)
        self.save()

    def remove(self, product_id: int, category: str) -> bool:
        items = self.products.get(category, [])
        remaining = [product for product in items if product.id != product_id]
        if len(remaining) == len(items):
            return False

        self.products[category] = remaining
        self.save()
        return True

    def count(self, category: Optional[str] = None) -> int:
        if category is not None:
            return len(self.products.get(category, []))
        return sum(len(items) for items in self.products.values())
