"""
Base Repository Module

Generic data access on top of SQLAlchemy. Subclasses declare the mapped model;
every query method is a thin delegation to the ORM.
"""

import logging
import math
import operator
from dataclasses import dataclass
from typing import Any, Callable, Generic, Mapping, Optional, Sequence, TypeVar, Union

from sqlalchemy import func, inspect, select
from sqlalchemy import update as sa_update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import load_only, selectinload
from sqlalchemy.sql import Select

from datagate.common.errors import ValidationError

logger = logging.getLogger(__name__)

# Define generic type variable
ModelT = TypeVar("ModelT")

# Comparison symbols accepted by where()/update()
OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    "=": operator.eq,
    "!=": operator.ne,
    "<>": operator.ne,
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
    "like": lambda column, value: column.like(value),
}


@dataclass
class Page(Generic[ModelT]):
    """A page of entities plus the counters needed to render pagination"""

    items: list[ModelT]
    total: int
    per_page: int
    current_page: int

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": [item.to_dict() for item in self.items],
            "total": self.total,
            "per_page": self.per_page,
            "current_page": self.current_page,
            "last_page": self.last_page,
        }


class Repository(Generic[ModelT]):
    """
    Generic Repository

    Wraps SQLAlchemy queries for one mapped model. `where`, `set_order_by` and
    `with_relations` add to a scope that is applied to every subsequent read
    until `reset_scope` is called.

    Write operations commit when `auto_commit` is True, otherwise they only
    flush and the caller owns the transaction.
    """

    model: type[ModelT]

    def __init__(self, session: AsyncSession, auto_commit: bool = True):
        """
        Initialize Repository

        Args:
            session: Async database session
            auto_commit: Commit after each write operation

        Raises:
            TypeError: `model` is not a mapped ORM class
        """
        self.session = session
        self.auto_commit = auto_commit
        self.model = self.make_model()
        self._criteria: list[Any] = []
        self._orderings: list[Any] = []
        self._options: list[Any] = []

    def make_model(self) -> type[ModelT]:
        model = getattr(type(self), "model", None)
        if not isinstance(model, type) or inspect(model, raiseerr=False) is None:
            raise TypeError(f"{type(self).__name__}.model must be a mapped ORM class")
        return model

    # ------------------------------------------------------------------
    # Scope helpers
    # ------------------------------------------------------------------

    @property
    def _primary_key(self):
        return inspect(self.model).primary_key[0]

    def _column(self, attribute: str):
        if attribute not in inspect(self.model).column_attrs:
            raise ValidationError(
                message=f"Unknown attribute '{attribute}' for {self.model.__name__}",
                code="unknown_attribute",
            )
        return getattr(self.model, attribute)

    def _condition(self, attribute: str, symbol: str, value: Any):
        compare = OPERATORS.get(symbol.lower())
        if compare is None:
            raise ValidationError(
                message=f"Unsupported comparison '{symbol}'",
                code="unsupported_operator",
            )
        return compare(self._column(attribute), value)

    def _load_columns(self, columns: Optional[Sequence[str]]) -> list[Any]:
        if not columns or list(columns) == ["*"]:
            return []
        return [load_only(*[self._column(c) for c in columns])]

    def _select(self, columns: Optional[Sequence[str]] = None) -> Select:
        return (
            select(self.model)
            .where(*self._criteria)
            .order_by(*self._orderings)
            .options(*self._options, *self._load_columns(columns))
            .execution_options(populate_existing=True)
        )

    async def _save(self) -> None:
        if self.auto_commit:
            await self.session.commit()
        else:
            await self.session.flush()

    def where(self, attribute: str, value: Any, symbol: str = "=") -> "Repository[ModelT]":
        """Add `attribute <symbol> value` to the scope"""
        self._criteria.append(self._condition(attribute, symbol, value))
        return self

    def with_relations(self, *relations: str) -> "Repository[ModelT]":
        """Eager load relationships on subsequent reads"""
        for name in relations:
            self._options.append(selectinload(getattr(self.model, name)))
        return self

    def set_order_by(self, attribute: str, order: str = "asc") -> "Repository[ModelT]":
        """Order subsequent reads by attribute"""
        direction = order.lower()
        if direction not in ("asc", "desc"):
            raise ValidationError(
                message=f"Unsupported order '{order}'",
                code="unsupported_order",
            )
        column = self._column(attribute)
        self._orderings.append(column.asc() if direction == "asc" else column.desc())
        return self

    def reset_scope(self) -> "Repository[ModelT]":
        self._criteria = []
        self._orderings = []
        self._options = []
        return self

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find(self, id: Any, columns: Optional[Sequence[str]] = None) -> Optional[ModelT]:
        """Find by primary key"""
        result = await self.session.execute(
            self._select(columns).where(self._primary_key == id)
        )
        return result.scalars().first()

    async def find_by(
        self,
        attribute: str,
        value: Any,
        columns: Optional[Sequence[str]] = None,
    ) -> Optional[ModelT]:
        """Find the first row where attribute equals value"""
        result = await self.session.execute(
            self._select(columns).where(self._column(attribute) == value).limit(1)
        )
        return result.scalars().first()

    async def all(self, columns: Optional[Sequence[str]] = None) -> list[ModelT]:
        """Get all rows"""
        result = await self.session.execute(self._select(columns))
        return list(result.scalars().all())

    async def paginate(
        self,
        per_page: int = 20,
        columns: Optional[Sequence[str]] = None,
        page: int = 1,
    ) -> Page[ModelT]:
        """Get one page of rows plus the total count"""
        per_page = max(1, per_page)
        page = max(1, page)

        count_query = select(func.count()).select_from(self.model).where(*self._criteria)
        total = (await self.session.execute(count_query)).scalar() or 0

        query = self._select(columns).offset((page - 1) * per_page).limit(per_page)
        result = await self.session.execute(query)
        return Page(
            items=list(result.scalars().all()),
            total=total,
            per_page=per_page,
            current_page=page,
        )

    async def find_add_lock(
        self,
        value: Any,
        attribute: str = "id",
        shared: bool = True,
    ) -> Optional[ModelT]:
        """
        Find the first row where attribute equals value, holding a row lock

        The lock is shared (FOR SHARE) by default; shared=False takes an
        exclusive lock (FOR UPDATE), required when the row is updated in the
        same transaction.

        The lock lives until the caller's transaction ends. Dialects without row
        locking (SQLite) ignore it.
        """
        result = await self.session.execute(
            select(self.model)
            .where(self._column(attribute) == value)
            .limit(1)
            .with_for_update(read=shared)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def check_exists(self, attribute: str, value: Any, id: Any = 0) -> int:
        """Count rows where attribute equals value, excluding primary key id"""
        result = await self.session.execute(
            select(func.count())
            .select_from(self.model)
            .where(self._column(attribute) == value)
            .where(self._primary_key != id)
        )
        return result.scalar() or 0

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _check_attributes(self, data: Mapping[str, Any]) -> None:
        for key in data:
            self._column(key)

    async def create(self, data: Mapping[str, Any]) -> ModelT:
        """Insert one row"""
        self._check_attributes(data)
        entity = self.model(**data)
        self.session.add(entity)
        await self._save()
        await self.session.refresh(entity)
        logger.debug("Created %s id=%s", self.model.__name__, inspect(entity).identity)
        return entity

    async def update(
        self,
        data: Mapping[str, Any],
        id: Any,
        symbol: str = "=",
        attribute: str = "id",
    ) -> int:
        """
        Update rows where `attribute <symbol> id`

        Returns:
            int: Number of affected rows
        """
        self._check_attributes(data)
        result = await self.session.execute(
            sa_update(self.model)
            .where(self._condition(attribute, symbol, id))
            .values(**data)
            .execution_options(synchronize_session="fetch")
        )
        await self._save()
        return result.rowcount

    async def delete(self, ids: Union[Any, Sequence[Any]]) -> int:
        """
        Delete rows by primary key

        Returns:
            int: Number of deleted rows
        """
        if isinstance(ids, (list, tuple, set)):
            keys = list(ids)
        else:
            keys = [ids]
        if not keys:
            return 0

        result = await self.session.execute(
            select(self.model).where(self._primary_key.in_(keys))
        )
        entities = result.scalars().all()
        for entity in entities:
            await self.session.delete(entity)
        await self._save()
        return len(entities)

    async def update_or_create(
        self,
        attributes: Mapping[str, Any],
        values: Optional[Mapping[str, Any]] = None,
    ) -> ModelT:
        """Update the first row matching attributes, or create it"""
        values = values or {}
        self._check_attributes(attributes)
        self._check_attributes(values)

        result = await self.session.execute(
            select(self.model).filter_by(**attributes).limit(1)
        )
        entity = result.scalars().first()
        if entity is None:
            entity = self.model(**{**attributes, **values})
            self.session.add(entity)
        else:
            for key, value in values.items():
                setattr(entity, key, value)

        await self._save()
        await self.session.refresh(entity)
        return entity
