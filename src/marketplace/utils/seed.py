"""Sample accounts and products for local development."""

import json

from protean.utils.globals import current_domain

from marketplace.catalogue.product.creation import CreateProduct
from marketplace.identity.passwords import hash_password
from marketplace.identity.user.registration import RegisterUser
from marketplace.identity.user.user import Role, User
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)

SAMPLE_ACCOUNTS = [
    {
        "name": "Admin User",
        "email": "admin@example.com",
        "password": "admin123",
        "role": Role.ADMIN.value,
        "address": "123 Admin Street",
        "phone": "123-456-7890",
    },
    {
        "name": "Vendor User",
        "email": "vendor@example.com",
        "password": "vendor123",
        "role": Role.VENDOR.value,
        "address": "456 Vendor Avenue",
        "phone": "234-567-8901",
    },
    {
        "name": "Buyer User",
        "email": "buyer@example.com",
        "password": "buyer123",
        "role": Role.BUYER.value,
        "address": "789 Buyer Road",
        "phone": "345-678-9012",
    },
]

SAMPLE_PRODUCTS = [
    {
        "title": "Laptop Computer",
        "description": "High-performance laptop with 16GB RAM and 512GB SSD",
        "price": 999.99,
        "stock": 10,
        "images": ["https://example.com/laptop1.jpg", "https://example.com/laptop2.jpg"],
        "category": "Electronics",
    },
    {
        "title": "Wireless Mouse",
        "description": "Ergonomic wireless mouse with long battery life",
        "price": 29.99,
        "stock": 50,
        "images": ["https://example.com/mouse1.jpg"],
        "category": "Electronics",
    },
    {
        "title": "Office Chair",
        "description": "Comfortable ergonomic office chair",
        "price": 199.99,
        "stock": 20,
        "images": ["https://example.com/chair1.jpg"],
        "category": "Furniture",
    },
    {
        "title": "Desk Lamp",
        "description": "LED desk lamp with adjustable brightness",
        "price": 39.99,
        "stock": 30,
        "images": ["https://example.com/lamp1.jpg"],
        "category": "Furniture",
    },
]


def seed_data() -> dict:
    """Register the sample accounts and list the sample products.

    Accounts that already exist are left alone; products are only listed for
    a vendor created in this run. Must run inside a domain context.

    Returns the ids created, keyed ``users`` (by email) and ``products``.
    """
    users = current_domain.repository_for(User)
    created = {"users": {}, "products": []}

    for account in SAMPLE_ACCOUNTS:
        if users.find_by_email(account["email"]) is not None:
            logger.info("seed_account_exists", email=account["email"])
            continue
        command = RegisterUser(
            name=account["name"],
            email=account["email"],
            password_hash=hash_password(account["password"]),
            role=account["role"],
            address=account["address"],
            phone=account["phone"],
        )
        created["users"][account["email"]] = current_domain.process(command, asynchronous=False)

    vendor_id = created["users"].get("vendor@example.com")
    if vendor_id is not None:
        for product in SAMPLE_PRODUCTS:
            command = CreateProduct(
                actor_id=vendor_id,
                actor_role=Role.VENDOR.value,
                title=product["title"],
                description=product["description"],
                price=product["price"],
                stock=product["stock"],
                images=json.dumps(product["images"]),
                category=product["category"],
            )
            created["products"].append(current_domain.process(command, asynchronous=False))

    logger.info("seed_completed", users=len(created["users"]), products=len(created["products"]))
    return created
