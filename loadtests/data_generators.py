"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the API's Pydantic request
schemas (email format, minimum password length, non-negative price).
"""

import random
import uuid

from faker import Faker

fake = Faker()

# ---------- Accounts ----------


def valid_email() -> str:
    """Generate unique emails so repeated registrations never collide."""
    local = fake.user_name()[:20]
    domain = fake.free_email_domain()
    return f"{local}.{uuid.uuid4().hex[:6]}@{domain}"


def register_data(role: str = "buyer") -> dict:
    """Generate RegisterRequest payload."""
    return {
        "name": fake.name()[:100],
        "email": valid_email(),
        "password": fake.password(length=12),
        "role": role,
    }


def profile_data() -> dict:
    """Generate UpdateMeRequest payload."""
    return {
        "profile": {
            "address": fake.address().replace("\n", ", ")[:500],
            "phone": fake.numerify("555-####"),
        }
    }


# ---------- Catalogue ----------

CATEGORIES = ["Electronics", "Furniture", "Books", "Garden", "Toys"]


def product_data() -> dict:
    """Generate CreateProductRequest payload with plenty of stock."""
    return {
        "title": fake.catch_phrase()[:200],
        "description": fake.paragraph(nb_sentences=3),
        "price": round(random.uniform(1.0, 500.0), 2),
        "stock": random.randint(1000, 5000),
        "images": [fake.image_url() for _ in range(random.randint(0, 2))],
        "category": random.choice(CATEGORIES),
    }


def product_update_data() -> dict:
    """Generate a partial UpdateProductRequest payload."""
    return {"price": round(random.uniform(1.0, 500.0), 2)}


def search_term() -> str:
    return random.choice(["a", "e", "pro", "ultra", "smart"])
