"""Engine subpackage - core pricing logic, validation and domain models."""
from .pricing_engine import PricingEngine, calculate_discounted_total
from .models import CheckoutResult, DiscountRule, Item, LineItemRequest, Subtotal
from .validation import validate_body
from .errors import CheckoutError, ValidationError, UnknownItemError, CatalogueSetupError

__all__ = [
    'PricingEngine', 'calculate_discounted_total', 'validate_body',
    'CheckoutResult', 'DiscountRule', 'Item', 'LineItemRequest', 'Subtotal',
    'CheckoutError', 'ValidationError', 'UnknownItemError', 'CatalogueSetupError',
]
