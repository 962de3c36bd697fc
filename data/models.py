from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Product:
    """商品列表页读取的单商品快照"""
    name: str
    price: Decimal
    description: str
    index: int


@dataclass(frozen=True)
class CartItem:
    name: str
    price: Decimal
    quantity: int
    description: str

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True)
class OrderSummary:
    item_total: Decimal
    tax: Decimal
    total: Decimal
    item_count: int


@dataclass(frozen=True)
class UserCredential:
    username: str
    password: str
    type: str
    should_succeed: bool
    has_issues: bool = False
    description: Optional[str] = None


@dataclass(frozen=True)
class CheckoutInfo:
    first_name: str
    last_name: str
    postal_code: str
    country: Optional[str] = None
