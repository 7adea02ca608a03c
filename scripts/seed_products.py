"""Seed demo products into the database."""
from decimal import Decimal

from crudkeys.product.repository import ProductRepository

INITIAL_PRODUCTS = [
    {"id": 1, "name": "Mac", "description": "nice", "price": Decimal("1000.00")},
    {"id": 2, "name": "iPad", "description": "portable", "price": Decimal("600.00")},
    {"id": 3, "name": "iPhone", "description": "pocketable", "price": Decimal("800.00")},
]


def main():
    product_repo = ProductRepository()

    missing = []
    for product in INITIAL_PRODUCTS:
        if product_repo.get_by_id(product["id"]):
            print(f"Skipping {product['name']} - already exists")
            continue
        missing.append(product)

    inserted = product_repo.create_many(missing)
    for product in missing:
        print(f"Created: {product['name']} (id={product['id']})")
    print(f"{inserted} product(s) inserted")


if __name__ == "__main__":
    main()
