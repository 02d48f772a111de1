"""VendOps: commission and sales backend for vending machine operators."""

__version__ = "1.0.0"
