"""Administrator statistics."""

from .stats import AdminAggregator, AdminStats

__all__ = ['AdminAggregator', 'AdminStats']
