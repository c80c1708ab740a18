from decimal import Decimal, InvalidOperation
from flask import Blueprint, Response, current_app, request, jsonify, url_for
from schema import Product
from services.export import products_to_csv

products_bp = Blueprint("products", __name__)

CENT = Decimal("0.01")
MAX_PRICE = Decimal("1e10")


def get_store():
    """
    Returns the product store owned by the running application.
    """
    return current_app.extensions["product_store"]


def parse_price(value):
    """
    Converts a JSON price (number or numeric string) into an exact Decimal.

    Floats go through their shortest string form, so 9.99 becomes Decimal('9.99').

    Raises:
        ValueError: If the value is missing, not numeric, or cannot be stored
            exactly with two decimal places.
    """
    if value is None:
        raise ValueError("price is required")
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError("price must be a number")
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError("price must be a number")
    if not price.is_finite():
        raise ValueError("price must be a finite number")
    if abs(price) >= MAX_PRICE:
        raise ValueError("price is too large")
    if price != price.quantize(CENT):
        raise ValueError("price must have at most 2 decimal places")
    return price.quantize(CENT)


def parse_product(data):
    """
    Builds an unsaved Product from a request payload. Any id in the payload is ignored.

    Raises:
        ValueError: On a malformed name or price.
    """
    name = data.get("name")
    if name is not None and not isinstance(name, str):
        raise ValueError("name must be a string")
    return Product(name=name, price=parse_price(data.get("price")))


def read_json_object():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


@products_bp.route("/products", methods=["GET"])
def list_products():
    """
    Lists the whole catalog.
    ---
    Output (200):
        - list of {id, name, price}
    """
    return jsonify([p.to_dict() for p in get_store().list_all()])


@products_bp.route("/products/<int:product_id>", methods=["GET"])
def get_product(product_id):
    """
    Fetches one product by id.
    ---
    Output (200):
        - id (int), name (str | null), price (str)
    Errors:
        - 404: No product with that id
    """
    product = get_store().get_by_id(product_id)
    if product is None:
        return jsonify({"error": "Product not found"}), 404
    return jsonify(product.to_dict())


@products_bp.route("/products", methods=["POST"])
def create_product():
    """
    Creates a product and assigns its id.
    ---
    Input (JSON):
        - name (str, optional)
        - price (number | str): At most two decimal places
    Output (201):
        - id (int), name (str | null), price (str)
        - Location header pointing at the new product
    Errors:
        - 400: Body is not a JSON object, or name/price is invalid
    """
    data = read_json_object()
    if data is None:
        return jsonify({"error": "Request body must be a JSON object"}), 400

    try:
        product = parse_product(data)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    created = get_store().add(product)
    response = jsonify(created.to_dict())
    response.status_code = 201
    response.headers["Location"] = url_for("products.get_product", product_id=created.id)
    return response


@products_bp.route("/products/<int:product_id>", methods=["PUT"])
def update_product(product_id):
    """
    Replaces name and price of an existing product.
    ---
    Input (JSON):
        - id (int): Must equal the id in the URL
        - name (str, optional): Omitted means null, there are no partial updates
        - price (number | str)
    Output (204): empty body
    Errors:
        - 400: Body id does not match the URL, or name/price is invalid
        - 404: No product with that id
    """
    data = read_json_object()
    if data is None:
        return jsonify({"error": "Request body must be a JSON object"}), 400

    body_id = data.get("id")
    if type(body_id) is not int or body_id != product_id:
        return jsonify({"error": "Product id in body does not match URL"}), 400

    try:
        product = parse_product(data)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    product.id = product_id

    if get_store().update(product) is None:
        return jsonify({"error": "Product not found"}), 404
    return "", 204


@products_bp.route("/products/<int:product_id>", methods=["DELETE"])
def delete_product(product_id):
    """
    Deletes a product. Succeeds whether or not the product existed.
    ---
    Output (204): empty body
    """
    get_store().delete(product_id)
    return "", 204


@products_bp.route("/products/search", methods=["GET"])
def search_products():
    """
    Case-insensitive substring search on product names.
    ---
    Query:
        - query (str, optional): Fragment to look for; empty matches every named product
    Output (200):
        - list of {id, name, price}
    """
    term = request.args.get("query", "")
    return jsonify([p.to_dict() for p in get_store().search(term)])


@products_bp.route("/products/export/csv", methods=["GET"])
def export_products_csv():
    """
    Downloads the whole catalog as CSV.
    ---
    Output (200): text/csv attachment named products.csv
    """
    body = products_to_csv(get_store().list_all())
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment; filename=products.csv"},
    )
