"""Catalog queries."""

from protean.utils.globals import current_domain

from catalogue.product.product import Product


def list_products() -> list[Product]:
    """Every product in the catalog. No filtering or pagination."""
    return current_domain.repository_for(Product)._dao.query.all().items


def get_product(product_id) -> Product:
    """Raises ``ObjectNotFoundError`` when no product has ``product_id``."""
    return current_domain.repository_for(Product).get(str(product_id))
