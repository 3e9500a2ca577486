"""Checkout error taxonomy.

Client faults carry an HTTP status and a message that is safe to return.
Anything else reaching the API boundary is treated as an internal error.
"""
from typing import Iterable


INVALID_BODY_MESSAGE = (
    "Invalid request body. Expected [{code: string, quantity: number}] "
    "or {code: string, quantity: number}"
)
UNKNOWN_ITEM_MESSAGE = "Unknown item code included"
INTERNAL_ERROR_MESSAGE = "Internal server error"


class CheckoutError(Exception):
    """Base class for client-facing checkout failures."""

    http_status = 400

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

    def as_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(CheckoutError):
    """The request body does not match the line-item contract."""

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__("INVALID_BODY", INVALID_BODY_MESSAGE)


class UnknownItemError(CheckoutError):
    """At least one requested code is not in the catalogue.

    The codes are kept for logging only and never sent to the client.
    """

    def __init__(self, codes: Iterable[str]):
        self.codes = sorted(codes)
        super().__init__("UNKNOWN_ITEM", UNKNOWN_ITEM_MESSAGE)


class CatalogueSetupError(Exception):
    """Creating or seeding the catalogue store failed."""
