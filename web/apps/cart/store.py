"""Storefront UI state as an explicit store.

State changes only through ``dispatch(action)``, which runs the pure
``reduce`` function and then notifies subscribers. The workshop gift is
inserted by the same ``AddItem`` transition that adds its parent line, so
no state ever contains a placeholder gift or a gift without its parent.
"""

import threading
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Callable, List, Optional, Tuple, Union

from .currency import Currency
from .domain import CartItem, Product, Variation
from .freebie import freebie_id, make_freebie_item, qualifies_for_freebie


@dataclass(frozen=True)
class StorefrontState:
    items: Tuple[CartItem, ...] = ()
    cart_open: bool = False
    currency: Currency = Currency.EUR
    login_modal_open: bool = False


# ---- Actions ----
@dataclass(frozen=True)
class AddItem:
    product: Product
    quantity: int = 1
    variation: Optional[Variation] = None
    # gift product resolved by the caller; None uses the configured fallback
    workshop: Optional[Product] = None

    def __post_init__(self):
        if self.quantity < 1:
            raise ValueError("INVALID_QUANTITY")


@dataclass(frozen=True)
class RemoveItem:
    id: str


@dataclass(frozen=True)
class UpdateQuantity:
    id: str
    quantity: int


@dataclass(frozen=True)
class UpdateItem:
    id: str
    changes: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ClearCart:
    pass


@dataclass(frozen=True)
class OpenCart:
    pass


@dataclass(frozen=True)
class CloseCart:
    pass


@dataclass(frozen=True)
class SelectCurrency:
    currency: Currency


@dataclass(frozen=True)
class OpenLoginModal:
    pass


@dataclass(frozen=True)
class CloseLoginModal:
    pass


Action = Union[
    AddItem, RemoveItem, UpdateQuantity, UpdateItem, ClearCart,
    OpenCart, CloseCart, SelectCurrency, OpenLoginModal, CloseLoginModal,
]

# Identity fields of a line; UpdateItem may not touch them.
_PROTECTED_FIELDS = {"id", "product_id", "variation_id", "is_freebie", "parent_product_id"}


def line_id(product: Product, variation: Optional[Variation]) -> str:
    return f"{product.id}-{variation.id}" if variation else str(product.id)


def _new_line(action: AddItem) -> CartItem:
    product, variation = action.product, action.variation
    stock = variation.stock_quantity if variation and variation.stock_quantity is not None else product.stock_quantity
    manage = variation.manage_stock if variation and variation.manage_stock is not None else product.manage_stock
    return CartItem(
        id=line_id(product, variation),
        product_id=product.id,
        name=product.name,
        price=variation.price if variation else product.price,
        quantity=action.quantity,
        slug=product.slug,
        image=product.image,
        variation_id=variation.id if variation else None,
        attributes=variation.attributes if variation else (),
        stock_quantity=stock,
        manage_stock=bool(manage),
    )


def _add(items: Tuple[CartItem, ...], action: AddItem) -> Tuple[CartItem, ...]:
    item_id = line_id(action.product, action.variation)
    existing = next((i for i in items if i.id == item_id), None)
    if existing is not None:
        return tuple(replace(i, quantity=i.quantity + action.quantity) if i.id == item_id else i for i in items)

    added = [_new_line(action)]
    has_gift = any(i.id == freebie_id(action.product.id) for i in items)
    if qualifies_for_freebie(action.product) and not has_gift:
        added.append(make_freebie_item(action.workshop, action.product.id))
    return items + tuple(added)


def _remove(items: Tuple[CartItem, ...], item_id: str) -> Tuple[CartItem, ...]:
    target = next((i for i in items if i.id == item_id), None)
    if target is None:
        return items
    remaining = tuple(i for i in items if i.id != item_id)
    if target.is_freebie:
        return remaining
    # the gift stays while another line of the same product is still in the cart
    if any(not i.is_freebie and i.product_id == target.product_id for i in remaining):
        return remaining
    return tuple(i for i in remaining if not (i.is_freebie and i.parent_product_id == target.product_id))


def _set_quantity(items: Tuple[CartItem, ...], item_id: str, quantity: int) -> Tuple[CartItem, ...]:
    if quantity <= 0:
        return _remove(items, item_id)
    return tuple(replace(i, quantity=quantity) if i.id == item_id else i for i in items)


def reduce(state: StorefrontState, action: Action) -> StorefrontState:
    """Return the state after ``action``. Never mutates ``state``.

    Raises:
        TypeError: For an unknown action type or an unknown item field in
            ``UpdateItem``.
        ValueError: ``PROTECTED_FIELD`` when ``UpdateItem`` targets an
            identity field.
    """
    if isinstance(action, AddItem):
        return replace(state, items=_add(state.items, action), cart_open=True)
    if isinstance(action, RemoveItem):
        return replace(state, items=_remove(state.items, action.id))
    if isinstance(action, UpdateQuantity):
        return replace(state, items=_set_quantity(state.items, action.id, action.quantity))
    if isinstance(action, UpdateItem):
        if _PROTECTED_FIELDS & set(action.changes):
            raise ValueError("PROTECTED_FIELD")
        changes = dict(action.changes)
        quantity = changes.pop("quantity", None)
        items = tuple(replace(i, **changes) if i.id == action.id else i for i in state.items)
        if quantity is not None:
            items = _set_quantity(items, action.id, quantity)
        return replace(state, items=items)
    if isinstance(action, ClearCart):
        return replace(state, items=())
    if isinstance(action, OpenCart):
        return replace(state, cart_open=True)
    if isinstance(action, CloseCart):
        return replace(state, cart_open=False)
    if isinstance(action, SelectCurrency):
        return replace(state, currency=Currency(action.currency))
    if isinstance(action, OpenLoginModal):
        return replace(state, login_modal_open=True)
    if isinstance(action, CloseLoginModal):
        return replace(state, login_modal_open=False)
    raise TypeError(f"unknown action: {type(action).__name__}")


# ---- Selectors ----
def total_items(state: StorefrontState) -> int:
    return sum(i.quantity for i in state.items)


def total_price(state: StorefrontState) -> Decimal:
    return sum((i.line_total for i in state.items), Decimal("0"))


Listener = Callable[[StorefrontState], None]


class Store:
    """Single owner of a ``StorefrontState``.

    ``dispatch`` is serialized by a lock; listeners run after the new state
    is published, outside the lock, and receive that state.
    """

    def __init__(self, initial: Optional[StorefrontState] = None):
        self._state = initial or StorefrontState()
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []

    def get_state(self) -> StorefrontState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action) -> StorefrontState:
        with self._lock:
            previous = self._state
            self._state = reduce(previous, action)
            state = self._state
            listeners = list(self._listeners)
        if state != previous:
            for listener in listeners:
                listener(state)
        return state
