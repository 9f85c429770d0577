"""secretlens — convert foreign-dialect secret rules and scan text with them."""

__version__ = "0.1.0"
