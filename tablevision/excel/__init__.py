"""Excel theme, cell helpers and the workbook builder for the dashboard export."""
from .formatters import Column, hex_fill
from .writer import ExcelWriter, Figure
