"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from erp_commons.config.validation import InvalidSettingValueError


@dataclasses.dataclass(frozen=True)
class Settings:
    """Base class for 12-factor settings.

    Subclasses set ``_prefix``; a field ``page_size`` on a class with prefix
    ``ERP_SEARCH`` is read from ``ERP_SEARCH_PAGE_SIZE``.
    """

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""

    def _require_positive(self, *names: str) -> None:
        for name in names:
            value = getattr(self, name)
            if value <= 0:
                raise InvalidSettingValueError(name, value, "must be greater than zero")


__all__ = ["Settings"]
