"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from shared.schemas import ApiModel

# --- Request Schemas ---


class AddressRequest(ApiModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "street": "Rua das Flores",
                    "number": "123",
                    "complement": "Apto 45",
                    "district": "Centro",
                    "city": "São Paulo",
                    "state": "SP",
                    "zipCode": "01001-000",
                    "country": "Brasil",
                }
            ]
        }
    }

    street: str | None = Field(None, max_length=255)
    number: str | None = Field(None, max_length=20)
    complement: str | None = Field(None, max_length=255)
    district: str | None = Field(None, max_length=100)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    zip_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)
    is_default: str | None = Field(None, max_length=5)


class RegisterRequest(ApiModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "username": "alice",
                    "password": "secret123",
                    "confirmPassword": "secret123",
                    "email": "alice@example.com",
                    "name": "Alice",
                    "phone": "+5511999999999",
                }
            ]
        }
    }

    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)
    confirm_password: str | None = None
    email: str = Field(..., max_length=254)
    name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., max_length=20)
    address: AddressRequest | None = None


class LoginRequest(ApiModel):
    username: str
    password: str


class UpdateUserRequest(ApiModel):
    """Profile changes. Unknown keys (``id``, ``username``, ``password``) are ignored."""

    name: str | None = Field(None, min_length=1, max_length=100)
    email: str | None = Field(None, max_length=254)
    phone: str | None = Field(None, max_length=20)


# --- Response Schemas ---


class UserResponse(ApiModel):
    id: str
    username: str
    email: str
    name: str
    phone: str
    created_at: datetime | None = None

    @classmethod
    def from_user(cls, user) -> UserResponse:
        return cls(
            id=str(user.id),
            username=user.username,
            email=user.email,
            name=user.name,
            phone=user.phone,
            created_at=user.created_at,
        )


class AddressResponse(ApiModel):
    id: str
    user_id: str
    street: str
    number: str
    complement: str | None = None
    district: str
    city: str
    state: str
    zip_code: str
    country: str
    is_default: str | None = None

    @classmethod
    def from_address(cls, address) -> AddressResponse:
        return cls(
            id=str(address.id),
            user_id=str(address.user_id),
            street=address.street,
            number=address.number,
            complement=address.complement,
            district=address.district,
            city=address.city,
            state=address.state,
            zip_code=address.zip_code,
            country=address.country,
            is_default=address.is_default,
        )
