"""
Product

This module provides create/read/update/delete access to products.
"""

from crudkeys.product.repository import ProductRepository

__all__ = ["ProductRepository"]
