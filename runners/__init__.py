"""
Runners module - Parallel batch comparison of piece collections.
"""

from .batch_runner import BatchComparator, ComparisonResult, compare_pair

__all__ = [
    'BatchComparator',
    'ComparisonResult',
    'compare_pair',
]
