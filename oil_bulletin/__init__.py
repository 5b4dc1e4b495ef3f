"""Weekly Oil Bulletin scraper: EC fuel-price workbook -> dated JSON."""

__version__ = "0.3.0"
