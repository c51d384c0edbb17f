"""
Entry point.

Run: python -m examples.storefront.main
"""

import asyncio
import logging

from examples.storefront.cli import run_cli


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, format="  %(levelname)s %(name)s: %(message)s")
    asyncio.run(run_cli())
