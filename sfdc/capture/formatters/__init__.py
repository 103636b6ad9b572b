"""Result formatters."""

from .delimited import CsvFormatter, default_filename

__all__ = ["CsvFormatter", "default_filename"]
