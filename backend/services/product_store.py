import logging
import threading
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, List, Optional

from schema import Product

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# SQLite INTEGER primary keys are signed 64-bit.
MIN_ID = -(2 ** 63)
MAX_ID = 2 ** 63 - 1


def is_storable_id(product_id) -> bool:
    return product_id is not None and MIN_ID <= product_id <= MAX_ID


def quantize_price(price):
    return price.quantize(CENT) if isinstance(price, Decimal) else price


class ProductStore(ABC):
    """
    Data-access contract for the product catalog.

    Absence is reported as None rather than raised; storage-engine errors
    propagate to the caller untouched.
    """

    @abstractmethod
    def list_all(self) -> List[Product]:
        """Return every product, in a stable storage-defined order."""

    @abstractmethod
    def get_by_id(self, product_id: int) -> Optional[Product]:
        """Return the product with this id, or None if there is none."""

    @abstractmethod
    def add(self, product: Product) -> Product:
        """Persist a new product under a freshly assigned id and return it."""

    @abstractmethod
    def update(self, product: Product) -> Optional[Product]:
        """
        Overwrite name and price of the product sharing `product.id`.

        Returns the updated product, or None without writing anything when no
        product has that id.
        """

    @abstractmethod
    def delete(self, product_id: int) -> bool:
        """Remove the product if it exists. Returns whether anything was removed."""

    @abstractmethod
    def search(self, term: Optional[str]) -> List[Product]:
        """Return products whose name contains `term`, ignoring case."""


class SqlProductStore(ProductStore):
    """
    Product store backed by SQLAlchemy sessions.

    Every call opens its own session from the injected factory, so the store
    holds no per-request state and can be shared across threads.
    """

    def __init__(self, session_factory):
        self._session_factory = session_factory

    def list_all(self) -> List[Product]:
        with self._session_factory() as db:
            return db.query(Product).order_by(Product.id).all()

    def get_by_id(self, product_id: int) -> Optional[Product]:
        if not is_storable_id(product_id):
            return None
        with self._session_factory() as db:
            return db.get(Product, product_id)

    def add(self, product: Product) -> Product:
        row = Product(name=product.name, price=quantize_price(product.price))
        with self._session_factory.begin() as db:
            db.add(row)
            db.flush()
        product.id = row.id
        logger.info(f"Added product {row.id}")
        return row

    def update(self, product: Product) -> Optional[Product]:
        if not is_storable_id(product.id):
            return None
        with self._session_factory.begin() as db:
            existing = db.get(Product, product.id)
            if existing is None:
                logger.debug(f"Update skipped, product {product.id} not found")
                return None
            existing.name = product.name
            existing.price = quantize_price(product.price)
        logger.info(f"Updated product {existing.id}")
        return existing

    def delete(self, product_id: int) -> bool:
        if not is_storable_id(product_id):
            logger.debug(f"Delete skipped, product {product_id} not found")
            return False
        with self._session_factory.begin() as db:
            existing = db.get(Product, product_id)
            if existing is None:
                logger.debug(f"Delete skipped, product {product_id} not found")
                return False
            db.delete(existing)
        logger.info(f"Deleted product {product_id}")
        return True

    def search(self, term: Optional[str]) -> List[Product]:
        term = term or ""
        with self._session_factory() as db:
            return (
                db.query(Product)
                .filter(Product.name.isnot(None))
                .filter(Product.name.icontains(term, autoescape=True))
                .order_by(Product.id)
                .all()
            )


class InMemoryProductStore(ProductStore):
    """
    Dictionary-backed product store for tests and throwaway runs.

    Records are copied on the way in and out so callers never hold a live
    reference to stored state.
    """

    def __init__(self):
        self._products: Dict[int, Product] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    @staticmethod
    def _copy(product: Product) -> Product:
        return Product(id=product.id, name=product.name, price=product.price)

    def list_all(self) -> List[Product]:
        with self._lock:
            return [self._copy(p) for p in self._products.values()]

    def get_by_id(self, product_id: int) -> Optional[Product]:
        with self._lock:
            found = self._products.get(product_id)
            return self._copy(found) if found is not None else None

    def add(self, product: Product) -> Product:
        with self._lock:
            row = Product(id=self._next_id, name=product.name, price=quantize_price(product.price))
            self._products[row.id] = row
            self._next_id += 1
        product.id = row.id
        logger.info(f"Added product {row.id}")
        return self._copy(row)

    def update(self, product: Product) -> Optional[Product]:
        with self._lock:
            existing = self._products.get(product.id)
            if existing is None:
                logger.debug(f"Update skipped, product {product.id} not found")
                return None
            existing.name = product.name
            existing.price = quantize_price(product.price)
            updated = self._copy(existing)
        logger.info(f"Updated product {updated.id}")
        return updated

    def delete(self, product_id: int) -> bool:
        with self._lock:
            removed = self._products.pop(product_id, None)
        if removed is None:
            logger.debug(f"Delete skipped, product {product_id} not found")
            return False
        logger.info(f"Deleted product {product_id}")
        return True

    def search(self, term: Optional[str]) -> List[Product]:
        needle = (term or "").lower()
        with self._lock:
            return [
                self._copy(p)
                for p in self._products.values()
                if p.name is not None and needle in p.name.lower()
            ]


STORE_BACKENDS = ("sql", "memory")


def build_store(kind: str = "sql", session_factory=None) -> ProductStore:
    """
    Instantiates the configured store backend.

    Args:
        kind: Either 'sql' or 'memory'.
        session_factory: SQLAlchemy sessionmaker, required for the 'sql' backend.

    Returns:
        A ProductStore implementation.

    Raises:
        ValueError: Unknown backend, or 'sql' requested without a session factory.
    """
    if kind == "memory":
        return InMemoryProductStore()
    if kind == "sql":
        if session_factory is None:
            raise ValueError("The sql product store needs a session factory")
        return SqlProductStore(session_factory)
    raise ValueError(f"Unknown product store backend: {kind!r} (expected one of {STORE_BACKENDS})")
