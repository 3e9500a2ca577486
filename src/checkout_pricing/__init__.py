"""
Checkout Pricing Package

Prices shopping-cart checkout requests against a catalogue of unit prices
and "N for a fixed price" bundle offers, served over a small HTTP API.
"""

__version__ = "1.0.0"
