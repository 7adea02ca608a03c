from decimal import Decimal, InvalidOperation

from flask import Blueprint, jsonify, request
from psycopg.errors import DataError, UniqueViolation

from crudkeys.product.repository import UPDATABLE_FIELDS, ProductRepository

bp = Blueprint("products", __name__)

product_repo = ProductRepository()

# products.id is INTEGER, products.price is NUMERIC(12, 2)
MAX_PRODUCT_ID = 2**31 - 1
MAX_PRICE = Decimal("9999999999.99")


def parse_id(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Invalid product id {value!r}")
    if not 1 <= value <= MAX_PRODUCT_ID:
        raise ValueError(f"Product id must be between 1 and {MAX_PRODUCT_ID}")
    return value


def parse_name(value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("name is required")
    return value.strip()


def parse_description(value):
    if value is not None and not isinstance(value, str):
        raise ValueError(f"Invalid description {value!r}")
    return value


def parse_price(value):
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"Invalid price {value!r}")
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid price {value!r}") from None
    if not price.is_finite() or abs(price) > MAX_PRICE:
        raise ValueError(f"Price must be a number up to {MAX_PRICE}")
    return price


FIELD_PARSERS = {
    "name": parse_name,
    "description": parse_description,
    "price": parse_price,
}


@bp.errorhandler(DataError)
def handle_data_error(e):
    return jsonify({"error": f"Invalid value: {e.diag.message_primary or e}"}), 400


@bp.route("", methods=["GET"])
def list_products():
    """List all products."""
    return jsonify(product_repo.list())


@bp.route("", methods=["POST"])
def create_product():
    """Create a new product under a caller-assigned id."""
    data = request.get_json(silent=True) or {}
    if data.get("id") is None or data.get("name") is None:
        return jsonify({"error": "id and name are required"}), 400

    try:
        product_id = parse_id(data["id"])
        product = product_repo.create(
            product_id=product_id,
            name=parse_name(data["name"]),
            description=parse_description(data.get("description")),
            price=parse_price(data.get("price")),
        )
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except UniqueViolation:
        return jsonify({"error": f"Product {data['id']} already exists"}), 409

    return jsonify(product), 201


@bp.route("/<int:product_id>", methods=["GET"])
def get_product(product_id: int):
    """Get product by ID."""
    product = product_repo.get_by_id(product_id)
    if not product:
        return jsonify({"error": "Product not found"}), 404
    return jsonify(product)


@bp.route("/<int:product_id>", methods=["PUT"])
def update_product(product_id: int):
    """Update name, description or price of a product."""
    data = request.get_json(silent=True) or {}

    try:
        fields = {k: FIELD_PARSERS[k](v) for k, v in data.items() if k in UPDATABLE_FIELDS}
        product = product_repo.update(product_id, **fields)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    if not product:
        return jsonify({"error": "Product not found"}), 404
    return jsonify(product)


@bp.route("/<int:product_id>", methods=["DELETE"])
def delete_product(product_id: int):
    """Delete a product."""
    if not product_repo.delete(product_id):
        return jsonify({"error": "Product not found"}), 404
    return "", 204
