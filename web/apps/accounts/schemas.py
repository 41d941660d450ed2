"""Pydantic request schemas for the auth endpoints."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CheckEmailIn(BaseModel):
    email: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("Email is required")
        return v2


class LoginIn(BaseModel):
    """Credentials posted by the login modal.

    Attributes:
        username: WordPress login name or email.
        password: Account password.
    """

    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class AddressIn(BaseModel):
    """Checkout address as the storefront sends it (camelCase)."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    address_1: str = Field(default="", alias="address1")
    address_2: str = Field(default="", alias="address2")
    city: str = ""
    state: str = ""
    postcode: str = ""
    country: str = ""
    phone: str = ""

    def billing_payload(self, email: str) -> dict:
        return {**self.model_dump(), "email": email}

    def shipping_payload(self) -> dict:
        return self.model_dump(exclude={"phone"})


class RegisterCustomerIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    billing: Optional[AddressIn] = None
    shipping: Optional[AddressIn] = None
