"""
Data Models - Type definitions for the storefront
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional, List, Dict, Any


@dataclass(frozen=True)
class Identity:
    """Signed-in user as reported by the identity provider"""
    uid: str
    email: str
    display_name: Optional[str] = None


def is_admin_email(email: Optional[str], admin_email: Optional[str]) -> bool:
    """Case-insensitive comparison of a user email with the configured admin email"""
    if not email or not admin_email:
        return False
    return email.strip().lower() == admin_email.strip().lower()


@dataclass(frozen=True)
class Session:
    """
    Current authentication state

    Only built through for_user() so is_admin always follows user
    """
    user: Optional[Identity] = None
    is_admin: bool = False

    @classmethod
    def for_user(cls, user: Optional[Identity], admin_email: Optional[str]) -> 'Session':
        if user is None:
            return cls()
        return cls(user=user, is_admin=is_admin_email(user.email, admin_email))

    @property
    def user_id(self) -> Optional[str]:
        return self.user.uid if self.user else None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


@dataclass
class Product:
    """Catalog product or service"""
    id: int
    name: str
    price: int
    category: str
    image_url: str = ''
    description: str = ''
    stock: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if data['stock'] is None:
            del data['stock']
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Product':
        return cls(
            id=int(data['id']),
            name=data.get('name', ''),
            price=int(data.get('price', 0)),
            category=data.get('category', ''),
            image_url=data.get('image_url', ''),
            description=data.get('description', ''),
            stock=data.get('stock')
        )


@dataclass
class CartLine:
    """One product in a cart, with a snapshot of the product taken when added"""
    product_id: int
    name: str
    price: int
    category: str
    quantity: int = 1
    image_url: str = ''
    description: str = ''
    stock: Optional[int] = None

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1) -> 'CartLine':
        return cls(
            product_id=product.id,
            name=product.name,
            price=product.price,
            category=product.category,
            quantity=quantity,
            image_url=product.image_url,
            description=product.description,
            stock=product.stock
        )

    @property
    def line_total(self) -> int:
        return self.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        # Stored in the same shape as the product, plus quantity
        data = {
            'id': self.product_id,
            'name': self.name,
            'price': self.price,
            'category': self.category,
            'image_url': self.image_url,
            'description': self.description,
            'quantity': self.quantity
        }
        if self.stock is not None:
            data['stock'] = self.stock
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CartLine':
        return cls(
            product_id=int(data['id']),
            name=data.get('name', ''),
            price=int(data.get('price', 0)),
            category=data.get('category', ''),
            quantity=int(data.get('quantity', 1)),
            image_url=data.get('image_url', ''),
            description=data.get('description', ''),
            stock=data.get('stock')
        )


class SaveStatus(str, Enum):
    """Where a cart save ended up"""
    REMOTE = 'remote'
    LOCAL_FALLBACK = 'local_fallback'
    FAILED = 'failed'
    SKIPPED = 'skipped'


@dataclass
class CheckoutDetails:
    """Customer details collected at checkout"""
    name: str
    email: str
    phone: str
    address: str = ''


@dataclass
class Order:
    """Paid and backend-verified order"""
    id: str
    customer_email: str
    customer_name: str
    customer_phone: str
    delivery_address: str
    items: List[Dict[str, Any]]
    total: int
    date: str
    status: str = 'paid'
    payment_method: str = 'paystack'
    verified: bool = True
    verification_data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Order':
        return cls(**data)


@dataclass
class Customer:
    """Customer record kept for the admin panel"""
    id: str
    email: str
    name: str = ''
    orders: int = 0
    total_spent: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Customer':
        return cls(**data)
