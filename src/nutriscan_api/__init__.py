"""NutriScan API: meal photo nutrition analysis and history."""

__version__ = "1.0.0"
