"""Training certificate batch generator.

Spreadsheet ingestion (column normalization, course classification, validation,
candidate building), PDF certificate rendering and JSON batch export.
"""

__version__ = "0.1.0"
