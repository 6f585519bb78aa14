"""
Path resolution and aggregation
"""

from .aggregator import aggregate, to_number, weighted_average
from .entities import PathQuery, PathVariants
from .paths import base_path, compute_variants, resolve_variants

__all__ = [
    'aggregate',
    'base_path',
    'compute_variants',
    'resolve_variants',
    'to_number',
    'weighted_average',
    'PathQuery',
    'PathVariants',
]
