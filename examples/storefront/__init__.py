"""
Storefront demo — a small açaí & burger shop driven from the terminal.

Run: python -m examples.storefront.main
"""
