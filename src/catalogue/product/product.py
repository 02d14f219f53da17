"""Product aggregate: an item offered in the storefront."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String, Text

from catalogue.domain import catalogue
from shared.money import format_amount, parse_amount


@catalogue.aggregate
class Product:
    """A catalog entry. Read-only from the storefront's point of view.

    ``price`` is decimal text; use ``unit_price`` for arithmetic.
    """

    name: String(required=True, max_length=255)
    price: String(required=True, max_length=20)
    image: String(required=True, max_length=1000)
    short_description: Text(required=True)
    category: String(required=True, max_length=50)

    @invariant.post
    def price_must_be_a_non_negative_amount(self):
        if self.price is None:
            return
        amount = parse_amount(self.price)
        if amount is None or amount < 0:
            raise ValidationError({"price": [f"Invalid price: {self.price!r}"]})

    @property
    def unit_price(self):
        return parse_amount(self.price)

    @classmethod
    def offer(cls, name, price, image, short_description, category):
        return cls(
            name=name,
            price=format_amount(price),
            image=image,
            short_description=short_description,
            category=category,
        )
