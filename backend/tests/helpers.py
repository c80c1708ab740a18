from decimal import Decimal
from schema import Product

def new_product(name="Widget", price="9.99"):
    return Product(name=name, price=Decimal(price))

def post_product(client, name="Widget", price=9.99):
    return client.post("/api/products", json={"name": name, "price": price})

def make_product(client, name="Widget", price=9.99):
    r = post_product(client, name, price)
    return r.get_json().get("id")

def put_product(client, product_id, name="Widget", price=9.99, body_id=None):
    return client.put(
        f"/api/products/{product_id}",
        json={"id": product_id if body_id is None else body_id, "name": name, "price": price},
    )

def search(client, query):
    return client.get("/api/products/search", query_string={"query": query}).get_json()
