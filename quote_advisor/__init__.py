"""
Insurance Quote Advisor

This package provides the quote comparison workflow of the broker site:
- Quote generation across the supported insurance providers
- Weighted quote scoring and recommendation
- Representative matching by insurance line
- Interest and assignment records with a response deadline
"""

__version__ = "1.0.0"
