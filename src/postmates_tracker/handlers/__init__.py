"""
Module: handlers
Description: Package initialization for API endpoint handlers.

This package contains FastAPI route handlers:
- webhook: Postmates webhook event endpoint
"""

__all__ = []
