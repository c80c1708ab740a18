#!/usr/bin/env python3
import requests
import json
import os
import sys
import logging

# Setup logging
LOG_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "logs")
os.makedirs(LOG_DIR, exist_ok=True)
LOG_FILE = os.path.join(LOG_DIR, "demo_output.log")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[
        logging.FileHandler(LOG_FILE),
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)

BASE_URL = os.environ.get("API_BASE_URL", "http://localhost:8000") + "/api"

def print_step(step_name: str):
    logger.info(f"=== {step_name} ===")

def print_result(res: requests.Response, expected: int):
    """
    Checks the response status and logs a short summary of the body.

    Args:
        res: The response object from a requests call.
        expected: The status code this step must return.
    """
    if res.status_code != expected:
        logger.error(f"Failed (expected {expected}, got {res.status_code}): {res.text}")
        sys.exit(1)
    if res.headers.get("Content-Type", "").startswith("application/json"):
        logger.info(f"Success ({res.status_code}): {json.dumps(res.json(), indent=2)[:300]}")
    else:
        logger.info(f"Success ({res.status_code}): {res.text[:300]!r}")

def run_demo():
    """
    Walks a running API through the full product lifecycle.

    Creates a product, reads it back, finds it by a name fragment, updates it,
    exports the catalog, then deletes it twice to show deletes are idempotent.
    """
    print_step("1. Create a product")
    res = requests.post(f"{BASE_URL}/products", json={"name": "Widget", "price": 9.99})
    print_result(res, 201)
    product_id = res.json()["id"]

    print_step("2. Fetch it by id")
    print_result(requests.get(f"{BASE_URL}/products/{product_id}"), 200)

    print_step("3. Search by name fragment")
    print_result(requests.get(f"{BASE_URL}/products/search", params={"query": "idg"}), 200)

    print_step("4. Replace name and price")
    res = requests.put(
        f"{BASE_URL}/products/{product_id}",
        json={"id": product_id, "name": "Widget, large", "price": "12.50"},
    )
    print_result(res, 204)

    print_step("5. Export the catalog")
    print_result(requests.get(f"{BASE_URL}/products/export/csv"), 200)

    print_step("6. Delete it, twice")
    print_result(requests.delete(f"{BASE_URL}/products/{product_id}"), 204)
    print_result(requests.delete(f"{BASE_URL}/products/{product_id}"), 204)

    print_step("7. Confirm it is gone")
    print_result(requests.get(f"{BASE_URL}/products/{product_id}"), 404)

    logger.info("Demo completed.")

if __name__ == "__main__":
    run_demo()
