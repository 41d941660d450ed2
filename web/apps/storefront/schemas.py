from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from apps.accounts.schemas import AddressIn


class AddressUpdateIn(BaseModel):
    type: Literal["billing", "shipping"]
    address: Dict[str, Any]


class CheckoutBillingIn(AddressIn):
    email: str = Field(min_length=1)

    def shipping_payload(self) -> dict:
        return self.model_dump(exclude={"phone", "email"})


class CartLineIn(BaseModel):
    """One storefront cart line to re-add to the Store API cart."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    product_id: int = Field(alias="productId", gt=0)
    variation_id: Optional[int] = Field(default=None, alias="variationId")
    quantity: int = Field(gt=0)

    @property
    def store_id(self) -> int:
        return self.variation_id or self.product_id


class CheckoutRequestIn(BaseModel):
    """Checkout form as posted by the storefront.

    ``shipping`` may be omitted when ``useShippingAsBilling`` is set; a
    missing shipping address is taken from billing either way.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    billing: CheckoutBillingIn
    shipping: Optional[AddressIn] = None
    use_shipping_as_billing: bool = Field(default=False, alias="useShippingAsBilling")
    payment_method: str = Field(default="stripe", alias="paymentMethod")
    payment_data: List[Any] = Field(default_factory=list, alias="paymentData")
    customer_note: str = Field(default="", alias="customerNote")
    cart_items: List[CartLineIn] = Field(default_factory=list, alias="cartItems")

    @field_validator("payment_method", mode="before")
    @classmethod
    def _blank_method_is_stripe(cls, v):
        return v or "stripe"

    def store_payload(self) -> dict:
        """Body for Store API ``POST /checkout``."""
        if self.use_shipping_as_billing or self.shipping is None:
            shipping = self.billing.shipping_payload()
        else:
            shipping = self.shipping.shipping_payload()
        return {
            "billing_address": self.billing.model_dump(),
            "shipping_address": shipping,
            "payment_method": self.payment_method,
            "payment_data": self.payment_data,
            "customer_note": self.customer_note,
        }
