"""Free workshop gift for BlackBoard sets."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from .domain import CartItem, Product

GIFT_SUFFIX = " (\U0001F381 Free Gift)"


@dataclass(frozen=True)
class FreebieConfig:
    slugs: tuple = ("functional-foot-workshop", "foot-workshop")
    names: tuple = ("Functional Foot Workshop", "Foot Workshop")
    category_slug: str = "workshops"
    fallback_id: int = 99999
    fallback_name: str = "Functional Foot Workshop"
    fallback_slug: str = "functional-foot-workshop"
    fallback_original_price: Decimal = Decimal("49")


FREEBIE = FreebieConfig()


def freebie_id(parent_product_id: int) -> str:
    return f"freebie-{parent_product_id}"


def qualifies_for_freebie(product: Product) -> bool:
    """True for BlackBoard sets: by category, or by a Basic/Professional name."""
    for cat in product.categories:
        if cat.slug == "blackboard-sets" or "blackboard set" in cat.name.lower():
            return True
    name = product.name.lower()
    return "blackboard" in name and ("basic" in name or "professional" in name)


def find_workshop_product(products: Iterable[Product], config: FreebieConfig = FREEBIE) -> Optional[Product]:
    """Pick the gift product from a catalog listing.

    Tries slug, then name, then workshop category, then any product whose
    name mentions "workshop" or "foot".
    """
    products = list(products)
    for p in products:
        if p.slug in config.slugs:
            return p
    for p in products:
        if any(n.lower() in p.name.lower() for n in config.names):
            return p
    for p in products:
        if any(c.slug == config.category_slug or "workshop" in c.name.lower() for c in p.categories):
            return p
    for p in products:
        name = p.name.lower()
        if "workshop" in name or "foot" in name:
            return p
    return None


def make_freebie_item(workshop: Optional[Product], parent_product_id: int, config: FreebieConfig = FREEBIE) -> CartItem:
    if workshop is not None:
        return CartItem(
            id=freebie_id(parent_product_id),
            product_id=workshop.id,
            name=workshop.name + GIFT_SUFFIX,
            price=Decimal("0"),
            quantity=1,
            slug=workshop.slug,
            image=workshop.image,
            is_freebie=True,
            original_price=workshop.price,
            parent_product_id=parent_product_id,
        )
    return CartItem(
        id=freebie_id(parent_product_id),
        product_id=config.fallback_id,
        name=config.fallback_name + GIFT_SUFFIX,
        price=Decimal("0"),
        quantity=1,
        slug=config.fallback_slug,
        is_freebie=True,
        original_price=config.fallback_original_price,
        parent_product_id=parent_product_id,
    )
