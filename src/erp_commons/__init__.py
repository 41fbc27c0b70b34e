"""erp-commons – query/search pipeline and cache-aside services for the ERP core."""

__version__ = "0.1.0"

__all__ = ["__version__"]
