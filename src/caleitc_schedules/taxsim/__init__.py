"""TAXSIM-35 access for the benefit schedule pipeline."""

from .adapter import TaxCalculatorAdapter
from .base import TaxCalculator
from .client import TaxSimClient
from .executable import TaxSimExecutable
from .variable_mapping import OUTPUT_FIELDS, TAXSIM_INPUT_COLUMNS

__all__ = [
    "TaxCalculator",
    "TaxCalculatorAdapter",
    "TaxSimClient",
    "TaxSimExecutable",
    "OUTPUT_FIELDS",
    "TAXSIM_INPUT_COLUMNS",
]
