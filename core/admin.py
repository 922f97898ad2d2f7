"""
Admin panel operations
Every call is gated on the session authority's admin check
"""

import logging
import time
from typing import Any, Dict, List, Optional

from core.notifications import Notifier
from core.session import SessionAuthority
from data.catalog import Catalog
from data.models import Customer, Order, Product
from data.orders import OrderBook

logger = logging.getLogger(__name__)


class AdminPanel:
    """Catalog management and store statistics for the admin user"""

    def __init__(self, authority: SessionAuthority, catalog: Catalog, order_book: OrderBook,
                 notifier: Optional[Notifier] = None):
        self.authority = authority
        self.catalog = catalog
        self.order_book = order_book
        self.notifier = notifier or authority.notifier

    def add_product(self, name: str, price, category: str, image_url: str,
                    description: str = '') -> Optional[Product]:
        """
        Add a product to the catalog

        Returns:
            The new product, or None if refused or invalid
        """
        if not self.authority.require_admin('add items'):
            return None

        try:
            price = int(price)
        except (TypeError, ValueError):
            price = 0

        if not name or price <= 0 or not category or not image_url:
            self.notifier.error('Please fill all required fields')
            return None

        product = Product(
            id=int(time.time() * 1000),
            name=name,
            price=price,
            category=category,
            image_url=image_url,
            description=description,
            stock=0
        )
        self.catalog.add(product)
        logger.info("Admin added product %s (%s)", product.id, product.name)
        self.notifier.success('✅ Item added successfully!')
        return product

    def delete_product(self, product_id: int, category: str) -> bool:
        if not self.authority.require_admin('delete items'):
            return False

        if not self.catalog.remove(product_id, category):
            self.notifier.warning('Item not found')
            return False

        logger.info("Admin deleted product %s", product_id)
        self.notifier.success('🗑️ Item deleted successfully')
        return True

    def stats(self) -> Optional[Dict[str, Any]]:
        if not self.authority.require_admin('view store statistics'):
            return None

        per_category = {category: len(items) for category, items in self.catalog.products.items()}
        return {
            'products_by_category': per_category,
            'total_products': self.catalog.count(),
            'total_orders': len(self.order_book.orders),
            'total_customers': len(self.order_book.customers),
            'total_revenue': self.order_book.revenue()
        }

    def orders(self) -> Optional[List[Order]]:
        if not self.authority.require_admin('view orders'):
            return None
        return list(self.order_book.orders)

    def customers(self) -> Optional[List[Customer]]:
        if not self.authority.require_admin('view customers'):
            return None
        return list(self.order_book.customers)
