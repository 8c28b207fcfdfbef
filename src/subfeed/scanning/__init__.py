"""Paginated scanning of the table store.

This package provides:
- PagedScanner: continuation-token driven page iterator
- UserSetCollector: folds a partition into a set of user identifiers
"""

from subfeed.scanning.scanner import PagedScanner, UserSetCollector

__all__ = [
    "PagedScanner",
    "UserSetCollector",
]
