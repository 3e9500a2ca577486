"""
Checkout Service - validate, look up, price.

The single pipeline behind both checkout routes.
"""
from typing import Any, Optional

from ..data.catalogue import Catalogue
from ..engine.errors import UnknownItemError, ValidationError
from ..engine.models import CheckoutResult, Item
from ..engine.pricing_engine import PricingEngine
from ..engine.validation import validate_body
from ..logging_config import get_logger


logger = get_logger(__name__)

# Unknown codes echoed into a rejection log line
MAX_LOGGED_CODES = 5


class CheckoutService:
    """Prices checkout requests against an injected catalogue."""

    def __init__(self, catalogue: Catalogue, engine: Optional[PricingEngine] = None):
        self.catalogue = catalogue
        self.engine = engine or PricingEngine()

    def checkout(self, body: Any) -> CheckoutResult:
        """
        Price a decoded checkout request body.

        Repeated codes are merged into one line with their quantities summed.
        Lines follow catalogue order.

        Raises:
            ValidationError: if the body is malformed
            UnknownItemError: if any code is not in the catalogue
        """
        try:
            requested = validate_body(body)
        except ValidationError as e:
            logger.warning("checkout rejected", reason=e.code, detail=e.detail)
            raise

        quantities: dict[str, int] = {}
        for line in requested:
            quantities[line.code] = quantities.get(line.code, 0) + line.quantity

        items = self.catalogue.lookup(quantities.keys())

        unknown = set(quantities) - {item.code for item in items}
        if unknown:
            logger.warning(
                "checkout rejected",
                reason="UNKNOWN_ITEM",
                unknown_count=len(unknown),
                sample_codes=sorted(unknown)[:MAX_LOGGED_CODES],
            )
            raise UnknownItemError(unknown)

        result = self.engine.price(items, quantities)
        logger.info("checkout priced", lines=len(result.subtotals), total=result.total)
        return result

    def catalogue_listing(self) -> list[Item]:
        """Every catalogue item with its bundle rule."""
        return self.catalogue.all_items()
