"""Kernel types – tagged result."""
from erp_commons.kernel.types.result import Err, Ok, Result

__all__ = ["Err", "Ok", "Result"]
