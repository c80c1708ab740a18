import os
import sys
import requests
from dotenv import load_dotenv
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from db import database_url_from_env, make_engine

def print_status(check_name: str, status: bool, details: str = ""):
    """
    Renders the status of a single health check to the console.

    Args:
        check_name: Human-readable identifier for the check.
        status: Boolean indicating success or failure.
        details: Optional supplementary information (e.g., URLs, table counts).
    """
    color = "\033[92m[OK]\033[0m" if status else "\033[91m[FAIL]\033[0m"
    print(f"{color} {check_name:<30} {details}")

def run_healthcheck():
    """
    Verifies the backend environment, the product database and the running API.

    Exits with status 1 as soon as the database is unreachable or uninitialized.
    """
    print("\n=== Product API Health Verification ===\n")

    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    env_path = os.path.join(base_dir, ".env")

    # 1. .env is optional, every setting has a default
    has_env = os.path.exists(env_path)
    print_status(".env file exists", True, env_path if has_env else "not present, using defaults")
    if has_env:
        load_dotenv(env_path)

    store_kind = os.environ.get("PRODUCT_STORE", "sql").lower()
    print_status("PRODUCT_STORE", store_kind in ("sql", "memory"), store_kind)

    # 2. Database connectivity and schema
    database_url = database_url_from_env()
    try:
        engine = make_engine(database_url)
        tables = inspect(engine).get_table_names()
        print_status("Database reachable", True, engine.url.render_as_string(hide_password=True))
        print_status("Database schema initialized", "products" in tables, f"Found {len(tables)} tables")
        if "products" not in tables:
            sys.exit(1)
    except SQLAlchemyError as e:
        print_status("Database reachable", False, str(e))
        sys.exit(1)

    # 3. Running API
    base_url = os.environ.get("API_BASE_URL", f"http://localhost:{os.environ.get('PORT', '8000')}")
    try:
        r = requests.get(f"{base_url}/api/health", timeout=5)
        print_status("API health endpoint", r.status_code == 200, f"HTTP {r.status_code}")
    except requests.RequestException as e:
        print_status("API health endpoint", False, str(e))

    print("\nHealth check completed.")

if __name__ == "__main__":
    run_healthcheck()
