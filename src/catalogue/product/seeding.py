"""Initial catalog contents and the command that installs them."""

import structlog
from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product

logger = structlog.get_logger(__name__)

_IMAGE_PARAMS = (
    "?ixlib=rb-4.0.3&ixid=MnwxMjA3fDB8MHxwaG90by1wYWdlfHx8fGVufDB8fHx8"
    "&auto=format&fit=crop&w=600&h=400"
)


def _unsplash(photo: str) -> str:
    return f"https://images.unsplash.com/{photo}{_IMAGE_PARAMS}"


INITIAL_PRODUCTS = (
    {
        "name": "Premium Smartphone X5",
        "price": "899.99",
        "image": _unsplash("photo-1598327105666-5b89351aff97"),
        "short_description": "Latest model with 8GB RAM, 128GB storage and triple camera system.",
        "category": "smartphones",
    },
    {
        "name": "Wireless Headphones Pro",
        "price": "249.99",
        "image": _unsplash("photo-1505740420928-5e560c06d30e"),
        "short_description": "Noise cancelling wireless headphones with 30-hour battery life.",
        "category": "audio",
    },
    {
        "name": "Smart Watch Plus",
        "price": "179.99",
        "image": _unsplash("photo-1546868871-7041f2a55e12"),
        "short_description": "Fitness tracking, heart rate monitor, and 5-day battery life.",
        "category": "wearables",
    },
    {
        "name": 'Ultrabook Pro 15"',
        "price": "1299.99",
        "image": _unsplash("photo-1593642702909-dec73df255d7"),
        "short_description": "Intel i7, 16GB RAM, 512GB SSD, ultra-thin design.",
        "category": "laptops",
    },
    {
        "name": "Portable Bluetooth Speaker",
        "price": "89.99",
        "image": _unsplash("photo-1608043152269-423dbba4e7e1"),
        "short_description": "Waterproof, 20-hour playtime, with deep bass technology.",
        "category": "audio",
    },
    {
        "name": "Gaming Console X Series",
        "price": "499.99",
        "image": _unsplash("photo-1593305841991-05c297ba4575"),
        "short_description": "Next-gen gaming with 4K support, 1TB SSD, and wireless controller.",
        "category": "gaming",
    },
    {
        "name": "Premium Tablet Pro",
        "price": "649.99",
        "image": _unsplash("photo-1561154464-82e9adf32764"),
        "short_description": '10.5" display, 256GB storage, with stylus compatibility.',
        "category": "tablets",
    },
    {
        "name": "Wireless Earbuds Pro",
        "price": "129.99",
        "image": _unsplash("photo-1590658268037-c4c597589f1c"),
        "short_description": "Noise isolation, 24h battery life with charging case, sweat resistant.",
        "category": "audio",
    },
)


@catalogue.command(part_of="Product")
class SeedCatalogue:
    """Install the initial products into an empty catalog."""

    source: String(max_length=50, default="startup")


@catalogue.command_handler(part_of=Product)
class SeedCatalogueHandler:
    @handle(SeedCatalogue)
    def seed_catalogue(self, command):
        repo = current_domain.repository_for(Product)
        if repo._dao.query.all().total > 0:
            logger.debug("catalogue_seed_skipped")
            return 0

        for data in INITIAL_PRODUCTS:
            repo.add(Product.offer(**data))

        logger.info("catalogue_seeded", products=len(INITIAL_PRODUCTS), source=command.source)
        return len(INITIAL_PRODUCTS)


def seed_catalogue(source: str = "startup") -> int:
    """Seed the catalog if empty; returns the number of products inserted."""
    return current_domain.process(SeedCatalogue(source=source), asynchronous=False)
