"""
QUOTE RATING & FINANCING ENGINE
Version 1.0 - Pipeline Architecture
"""

from .models import CalculatedTotals, CatalogSet, QuoteConfiguration
from .processor import QuoteProcessor, calculate_totals

__all__ = ['QuoteProcessor', 'calculate_totals', 'QuoteConfiguration', 'CatalogSet', 'CalculatedTotals']
