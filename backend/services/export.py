import csv
import io
from typing import Iterable

from schema import Product

CSV_HEADER = ["Id", "Name", "Price"]


def products_to_csv(products: Iterable[Product]) -> str:
    """
    Renders products as CSV text, one line per product after an `Id,Name,Price` header.

    Fields are quoted only when they contain a delimiter, quote or line break, so
    ordinary names come out exactly as `id,name,price`. A missing name is an
    empty field.

    Args:
        products: Products in the order they should appear.

    Returns:
        The CSV document with '\\n' line endings.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for product in products:
        writer.writerow([product.id, product.name or "", product.price])
    return buffer.getvalue()
