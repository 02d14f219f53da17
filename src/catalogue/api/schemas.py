"""Pydantic response schemas for the Catalogue API."""

from __future__ import annotations

from shared.schemas import ApiModel


class ProductResponse(ApiModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": "5f0c6a3e-8d47-4d8e-9a3b-0b1f7a2c9d11",
                    "name": "Wireless Headphones Pro",
                    "price": "249.99",
                    "image": "https://images.unsplash.com/photo-1505740420928-5e560c06d30e",
                    "shortDescription": "Noise cancelling wireless headphones with 30-hour battery life.",
                    "category": "audio",
                }
            ]
        }
    }

    id: str
    name: str
    price: str
    image: str
    short_description: str
    category: str

    @classmethod
    def from_product(cls, product) -> ProductResponse:
        return cls(
            id=str(product.id),
            name=product.name,
            price=product.price,
            image=product.image,
            short_description=product.short_description,
            category=product.category,
        )
