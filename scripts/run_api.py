#!/usr/bin/env python
"""
Run the Checkout Pricing API (FastAPI + uvicorn).

Usage:
    PORT=8080 python scripts/run_api.py
"""
import sys
from pathlib import Path

# Add src to path for runs without an installed package
src_path = Path(__file__).parent.parent / 'src'
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from checkout_pricing.api.main import main


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\nAPI stopped.")
