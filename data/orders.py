"""
Order book and customer records persisted in the local store
"""

import logging
from typing import List, Optional

from config.settings import LOCAL_STORE_KEYS
from data.local_store import LocalStore
from data.models import Customer, Order

logger = logging.getLogger(__name__)


class OrderBook:
    """Paid orders and the customers who placed them"""

    def __init__(self, local_store: LocalStore):
        self.local_store = local_store
        self.orders: List[Order] = [
            Order.from_dict(item) for item in local_store.get(LOCAL_STORE_KEYS['orders'], []) or []
        ]
        self.customers: List[Customer] = [
            Customer.from_dict(item) for item in local_store.get(LOCAL_STORE_KEYS['customers'], []) or []
        ]

    def save_orders(self):
        self.local_store.set(LOCAL_STORE_KEYS['orders'], [order.to_dict() for order in self.orders])

    def save_customers(self):
        self.local_store.set(LOCAL_STORE_KEYS['customers'], [customer.to_dict() for customer in self.customers])

    def record_order(self, order: Order):
        self.orders.append(order)
        self.save_orders()
        logger.info("Recorded order %s (%s)", order.id, order.total)

    def add_customer(self, customer: Customer) -> bool:
        """Add a customer unless one with the same id exists"""
        if self.find_customer(customer_id=customer.id):
            return False

        self.customers.append(customer)
        self.save_customers()
        return True

    def find_customer(self, customer_id: Optional[str] = None, email: Optional[str] = None) -> Optional[Customer]:
        for customer in self.customers:
            if customer_id is not None and customer.id == customer_id:
                return customer
            if email is not None and customer.email == email:
                return customer
        return None

    def update_customer_stats(self, email: str, amount: int) -> bool:
        customer = self.find_customer(email=email)
        if customer is None:
            return False

        customer.orders += 1
        customer.total_spent += amount
        self.save_customers()
        return True

    def revenue(self) -> int:
        return sum(order.total for order in self.orders if order.status == 'paid')
