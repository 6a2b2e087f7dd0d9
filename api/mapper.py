"""
Conversions between API models and MongoDB documents.
"""

from decimal import Decimal
from typing import Any, Dict

from bson.decimal128 import Decimal128

from api.models import BookRequest, BookResponse


def book_request_to_document(request: BookRequest) -> Dict[str, Any]:
    """Build a storable document from a request. The store assigns ``_id``."""
    return {
        "name": request.name,
        # Decimal128 keeps the price exact; plain floats would not
        "price": Decimal128(str(request.price)),
        "category": request.category,
        "author": request.author,
    }


def document_to_book_response(document: Dict[str, Any]) -> BookResponse:
    price = document["price"]
    if isinstance(price, Decimal128):
        price = price.to_decimal()
    elif not isinstance(price, Decimal):
        price = Decimal(str(price))

    return BookResponse(
        id=str(document["_id"]),
        name=document["name"],
        price=price,
        category=document["category"],
        author=document["author"],
    )
