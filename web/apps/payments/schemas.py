from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CheckoutIn(BaseModel):
    """Checkout request body. Only the order id is trusted."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    order_id: int = Field(alias="orderId", gt=0)
    customer_email: Optional[str] = Field(default=None, alias="customerEmail")

    @field_validator("customer_email")
    @classmethod
    def _blank_email_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None
