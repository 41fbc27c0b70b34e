"""Unit of Work port – transactional boundary over the ERP repositories."""

from __future__ import annotations

import abc
from typing import Any

from erp_commons.kernel.ddd.repository import EntityRepository


class UnitOfWork(abc.ABC):
    """Port: transactional unit of work.

    Repositories are available between ``__aenter__`` and ``__aexit__``.
    Leaving the block normally commits; leaving it with an exception rolls
    back and lets the exception propagate.
    """

    companies: EntityRepository[Any]
    users: EntityRepository[Any]
    user_companies: EntityRepository[Any]

    @abc.abstractmethod
    async def commit(self) -> None: ...

    @abc.abstractmethod
    async def rollback(self) -> None: ...

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if exc_type is None:
            await self.commit()
        else:
            await self.rollback()


__all__ = ["UnitOfWork"]
