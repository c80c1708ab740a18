#!/usr/bin/env python3
import os
import sys

# Add the parent directory to sys.path to allow imports from the backend
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from db import clear_database, database_url_from_env, make_engine

def main():
    """
    CLI utility for wiping the product catalog.

    Drops the products table and recreates an empty schema on the database
    named by DATABASE_URL.
    """
    database_url = database_url_from_env()
    print(f"WARNING: This will permanently delete all products in {database_url}.")
    confirm = input("Are you sure you want to reset the database? (y/N): ")
    if confirm.lower() != 'y':
        print("Reset cancelled.")
        return

    clear_database(make_engine(database_url))
    print("Database reset successfully.")

if __name__ == "__main__":
    main()
