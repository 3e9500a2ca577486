"""Shared fixtures for checkout pricing tests."""
import os
import sys

import pytest
from fastapi.testclient import TestClient

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from checkout_pricing.api.main import create_app
from checkout_pricing.data.catalogue import InMemoryCatalogue
from checkout_pricing.engine.models import DiscountRule, Item
from checkout_pricing.services.checkout_service import CheckoutService


SEEDED_ITEMS = [
    Item(code="A", unit_price=50, discount_rule=DiscountRule(threshold_quantity=3, bundle_price=140)),
    Item(code="B", unit_price=35, discount_rule=DiscountRule(threshold_quantity=2, bundle_price=60)),
    Item(code="C", unit_price=25),
    Item(code="D", unit_price=12),
]


@pytest.fixture
def catalogue():
    """In-memory catalogue matching the shipped seed data."""
    return InMemoryCatalogue(SEEDED_ITEMS)


@pytest.fixture
def service(catalogue):
    return CheckoutService(catalogue)


@pytest.fixture
def client(service):
    """HTTP client over an app with the in-memory catalogue injected."""
    return TestClient(create_app(checkout_service=service))
