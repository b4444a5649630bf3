"""MTG printing resolver: pick the exact printing of a scanned card from OCR evidence."""

__version__ = "0.1.0"
