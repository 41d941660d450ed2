"""Catalog and cart value objects used by the storefront state store.

Products and variations are read-only snapshots of WooCommerce records;
``from_woo`` keeps only the fields the cart needs. Prices are ``Decimal`` so
cart totals do not drift.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple


def parse_price(raw) -> Decimal:
    """WooCommerce price string (``"49.00"``, ``""``) to ``Decimal``; blanks are 0."""
    if raw is None or raw == "":
        return Decimal("0")
    try:
        return Decimal(str(raw))
    except InvalidOperation:
        raise ValueError("INVALID_PRICE")


@dataclass(frozen=True)
class Category:
    slug: str
    name: str = ""


@dataclass(frozen=True)
class Product:
    """A catalog product.

    Attributes:
        id: WooCommerce product id.
        name: Display name (HTML entities already decoded upstream).
        slug: URL slug.
        price: Current price in the shop currency.
        image: First image URL, if any.
        categories: Product categories.
        stock_quantity: Stock level when stock is managed.
        manage_stock: Whether WooCommerce tracks stock for it.
    """

    id: int
    name: str
    slug: str = ""
    price: Decimal = Decimal("0")
    image: Optional[str] = None
    categories: Tuple[Category, ...] = ()
    stock_quantity: Optional[int] = None
    manage_stock: bool = False

    @classmethod
    def from_woo(cls, data: dict) -> "Product":
        images = data.get("images") or []
        return cls(
            id=int(data["id"]),
            name=data.get("name") or "",
            slug=data.get("slug") or "",
            price=parse_price(data.get("price")),
            image=images[0].get("src") if images else None,
            categories=tuple(
                Category(slug=c.get("slug") or "", name=c.get("name") or "")
                for c in data.get("categories") or []
            ),
            stock_quantity=data.get("stock_quantity"),
            manage_stock=bool(data.get("manage_stock")),
        )


@dataclass(frozen=True)
class Variation:
    id: int
    price: Decimal = Decimal("0")
    attributes: Tuple[Tuple[str, str], ...] = ()
    stock_quantity: Optional[int] = None
    manage_stock: Optional[bool] = None

    @classmethod
    def from_woo(cls, data: dict) -> "Variation":
        return cls(
            id=int(data["id"]),
            price=parse_price(data.get("price")),
            attributes=tuple((a.get("name", ""), a.get("option", "")) for a in data.get("attributes") or []),
            stock_quantity=data.get("stock_quantity"),
            manage_stock=data.get("manage_stock"),
        )


@dataclass(frozen=True)
class CartItem:
    """One cart line.

    ``id`` is ``<productId>`` or ``<productId>-<variationId>`` for regular
    lines and ``freebie-<parentProductId>`` for free gifts.
    """

    id: str
    product_id: int
    name: str
    price: Decimal
    quantity: int
    slug: str = ""
    image: Optional[str] = None
    variation_id: Optional[int] = None
    attributes: Tuple[Tuple[str, str], ...] = field(default=())
    stock_quantity: Optional[int] = None
    manage_stock: bool = False
    is_freebie: bool = False
    original_price: Optional[Decimal] = None
    parent_product_id: Optional[int] = None

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity
