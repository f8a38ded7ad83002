"""
Mechanical derivation of GraphQL types and operations from the ORM schema.

For every mapped model the deriver produces a ``DerivedEntity``: an object
type mirroring the table's columns, filter/order/insert/update input types, and
default read (``users``, ``usersSingle``) and write (``insertIntoUsers``,
``insertIntoUsersSingle``, ``updateUsers``, ``deleteFromUsers``) operations.

Entities live in a ``TypeRegistry`` keyed by table name. Extension is an
explicit merge step (``TypeRegistry.extend``): a new type is composed from
the entry's ``fields()`` plus additions, and replaces the entry's exposed
type without mutating the base entry.

Resolvers here are built as closures whose annotations reference the
generated classes directly, so this module must not use postponed
annotation evaluation.
"""

import dataclasses
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Annotated, Any

import strawberry
from sqlalchemy import Column, inspect, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from ..logging import get_logger
from .context import ConstraintViolationError, get_database
from .filters import ColumnOrder, filter_clauses, filter_input_for, order_clauses

logger = get_logger(__name__)

_NO_DEFAULT = object()


@dataclass(frozen=True)
class GraphField:
    """One field of a composed GraphQL type: its annotation plus optional resolver."""

    annotation: Any
    resolver: Callable[..., Any] | None = None
    description: str | None = None
    default: Any = _NO_DEFAULT

    @property
    def has_default(self) -> bool:
        return self.default is not _NO_DEFAULT

    def to_strawberry(self) -> Any:
        """Build a fresh Strawberry field, or None for a plain annotated field."""
        if self.resolver is not None:
            return strawberry.field(resolver=self.resolver, description=self.description)
        if self.has_default:
            return strawberry.field(default=self.default, description=self.description)
        if self.description:
            return strawberry.field(description=self.description)
        return None


def compose_type(
    name: str,
    fields: Mapping[str, GraphField],
    *,
    description: str | None = None,
    is_input: bool = False,
) -> type:
    """Create a Strawberry object (or input) type from a field mapping.

    Required data fields are declared before defaulted and resolved ones so
    the generated dataclass is valid regardless of mapping order.
    """
    if not fields:
        raise ValueError(f'Cannot create type "{name}" with no fields')

    ordered = sorted(
        fields.items(), key=lambda item: item[1].has_default or item[1].resolver is not None
    )
    annotations: dict[str, Any] = {}
    namespace: dict[str, Any] = {"__module__": __name__}
    for field_name, graph_field in ordered:
        annotations[field_name] = graph_field.annotation
        strawberry_field = graph_field.to_strawberry()
        if strawberry_field is not None:
            namespace[field_name] = strawberry_field
    namespace["__annotations__"] = annotations

    cls = type(name, (), namespace)
    if is_input:
        cls = strawberry.input(cls, name=name, description=description)
    else:
        cls = strawberry.type(cls, name=name, description=description)

    # Plain data fields, used to build instances from ORM rows
    cls._data_fields = tuple(
        field_name for field_name, graph_field in fields.items() if graph_field.resolver is None
    )
    return cls


def to_graphql(object_type: type, row: Any) -> Any:
    """Convert an ORM row into an instance of a composed object type."""
    return object_type(**{name: getattr(row, name) for name in object_type._data_fields})


def input_values(item: Any) -> dict[str, Any]:
    """Return the non-null fields of an input instance."""
    values = {}
    for input_field in dataclasses.fields(item):
        value = getattr(item, input_field.name)
        if value is not None:
            values[input_field.name] = value
    return values


def _type_prefix(table_name: str) -> str:
    return "".join(part.capitalize() for part in table_name.split("_"))


def _is_generated(column: Column) -> bool:
    return column.identity is not None or column is column.table.autoincrement_column


@dataclass(frozen=True)
class DerivedEntity:
    """Derived GraphQL surface of one mapped table."""

    key: str
    model: type
    object_type: type
    filter_input: type
    insert_input: type
    update_input: type
    order_by_input: type
    columns: Mapping[str, GraphField]
    additions: Mapping[str, GraphField] = field(default_factory=dict)

    @property
    def type_prefix(self) -> str:
        return _type_prefix(self.key)

    def fields(self) -> dict[str, GraphField]:
        """Field name -> field mapping of the exposed object type."""
        return {**self.columns, **self.additions}


def derive_entity(model: type) -> DerivedEntity:
    """Derive the object and input types for one mapped model."""
    mapper = inspect(model)
    table = mapper.local_table
    prefix = _type_prefix(table.name)

    columns: dict[str, GraphField] = {}
    filters: dict[str, GraphField] = {}
    inserts: dict[str, GraphField] = {}
    updates: dict[str, GraphField] = {}
    orders: dict[str, GraphField] = {}

    for attr in mapper.column_attrs:
        column = attr.columns[0]
        try:
            python_type = column.type.python_type
        except NotImplementedError:
            logger.warning(
                "Skipping column without a Python type", table=table.name, column=attr.key
            )
            continue

        columns[attr.key] = GraphField(python_type | None if column.nullable else python_type)

        filter_input = filter_input_for(python_type)
        if filter_input is not None:
            filters[attr.key] = GraphField(filter_input | None, default=None)
        orders[attr.key] = GraphField(ColumnOrder | None, default=None)

        if _is_generated(column):
            continue

        required = not column.nullable and column.default is None and column.server_default is None
        if required:
            inserts[attr.key] = GraphField(python_type)
        else:
            inserts[attr.key] = GraphField(python_type | None, default=None)

        if not column.primary_key:
            updates[attr.key] = GraphField(python_type | None, default=None)

    entity = DerivedEntity(
        key=table.name,
        model=model,
        object_type=compose_type(
            f"{prefix}Item", columns, description=f"Row of the {table.name} table."
        ),
        filter_input=compose_type(
            f"{prefix}Filters",
            filters,
            description=f"Column filters for {table.name}; all given operators must match.",
            is_input=True,
        ),
        insert_input=compose_type(
            f"{prefix}InsertInput",
            inserts,
            description=f"Values for a new {table.name} row.",
            is_input=True,
        ),
        update_input=compose_type(
            f"{prefix}UpdateInput",
            updates,
            description=f"Columns to change on matching {table.name} rows; null keeps a value.",
            is_input=True,
        ),
        order_by_input=compose_type(
            f"{prefix}OrderBy",
            orders,
            description=f"Sort order for {table.name} rows.",
            is_input=True,
        ),
        columns=columns,
    )
    logger.debug("Derived GraphQL types", entity=entity.key, fields=list(columns))
    return entity


# Storage helpers shared by derived and extended resolvers


async def fetch_rows(
    info: strawberry.Info,
    object_type: type,
    statement: Select,
    *,
    limit: int | None = None,
    offset: int | None = None,
) -> list[Any]:
    """Run a SELECT in its own session and convert the rows to ``object_type``."""
    if limit is not None:
        statement = statement.limit(limit)
    if offset is not None:
        statement = statement.offset(offset)

    try:
        async with get_database(info).session() as session:
            result = await session.execute(statement)
            rows = [to_graphql(object_type, row) for row in result.scalars().all()]
    except SQLAlchemyError as e:
        logger.error(
            "Storage query failed",
            object_type=object_type.__name__,
            field=info.field_name,
            error=str(e),
        )
        raise

    logger.debug("Fetched rows", object_type=object_type.__name__, count=len(rows))
    return rows


async def flush_writes(session: AsyncSession, entity_key: str, operation: str) -> None:
    """Flush pending writes, translating constraint failures."""
    try:
        await session.flush()
    except IntegrityError as e:
        logger.warning(
            "Write rejected by storage constraint",
            entity=entity_key,
            operation=operation,
            error=str(e.orig),
        )
        raise ConstraintViolationError(f"Cannot {operation} {entity_key}: {e.orig}") from e


# Default operations


def list_query(entity: DerivedEntity) -> GraphField:
    model, object_type, filter_input = entity.model, entity.object_type, entity.filter_input
    order_by_input = entity.order_by_input

    async def resolve(
        info: strawberry.Info,
        where: filter_input | None = None,
        order_by: order_by_input | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[object_type]:
        statement = (
            select(model)
            .where(*filter_clauses(model, where))
            .order_by(*order_clauses(model, order_by))
        )
        return await fetch_rows(info, object_type, statement, limit=limit, offset=offset)

    return GraphField(
        list[object_type], resolve, description=f"Fetch {entity.key} rows matching the filters."
    )


def single_query(entity: DerivedEntity) -> GraphField:
    model, object_type, filter_input = entity.model, entity.object_type, entity.filter_input
    order_by_input = entity.order_by_input

    async def resolve(
        info: strawberry.Info,
        where: filter_input | None = None,
        order_by: order_by_input | None = None,
        offset: int | None = None,
    ) -> object_type | None:
        statement = (
            select(model)
            .where(*filter_clauses(model, where))
            .order_by(*order_clauses(model, order_by))
        )
        rows = await fetch_rows(info, object_type, statement, limit=1, offset=offset)
        return rows[0] if rows else None

    return GraphField(
        object_type | None,
        resolve,
        description=f"Fetch the first {entity.key} row matching the filters.",
    )


def insert_mutation(entity: DerivedEntity) -> GraphField:
    model, object_type, insert_input = entity.model, entity.object_type, entity.insert_input

    async def resolve(info: strawberry.Info, values: list[insert_input]) -> list[object_type]:
        rows = [model(**input_values(item)) for item in values]
        async with get_database(info).session() as session:
            session.add_all(rows)
            await flush_writes(session, entity.key, "insert into")
            logger.info("Inserted rows", entity=entity.key, count=len(rows))
            return [to_graphql(object_type, row) for row in rows]

    return GraphField(list[object_type], resolve, description=f"Insert {entity.key} rows.")


def insert_single_mutation(entity: DerivedEntity) -> GraphField:
    model, object_type, insert_input = entity.model, entity.object_type, entity.insert_input

    async def resolve(info: strawberry.Info, values: insert_input) -> object_type:
        row = model(**input_values(values))
        async with get_database(info).session() as session:
            session.add(row)
            await flush_writes(session, entity.key, "insert into")
            logger.info("Inserted row", entity=entity.key)
            return to_graphql(object_type, row)

    return GraphField(object_type, resolve, description=f"Insert one {entity.key} row.")


def update_mutation(entity: DerivedEntity) -> GraphField:
    model, object_type = entity.model, entity.object_type
    filter_input, update_input = entity.filter_input, entity.update_input

    async def resolve(
        info: strawberry.Info,
        values: Annotated[update_input, strawberry.argument(name="set")],
        where: filter_input | None = None,
    ) -> list[object_type]:
        changes = input_values(values)
        async with get_database(info).session() as session:
            result = await session.execute(select(model).where(*filter_clauses(model, where)))
            rows = result.scalars().all()
            for row in rows:
                for name, value in changes.items():
                    setattr(row, name, value)
            await flush_writes(session, entity.key, "update")
            logger.info("Updated rows", entity=entity.key, count=len(rows), columns=list(changes))
            return [to_graphql(object_type, row) for row in rows]

    return GraphField(
        list[object_type], resolve, description=f"Update {entity.key} rows matching the filters."
    )


def delete_mutation(entity: DerivedEntity) -> GraphField:
    model, object_type, filter_input = entity.model, entity.object_type, entity.filter_input

    async def resolve(
        info: strawberry.Info,
        where: filter_input | None = None,
    ) -> list[object_type]:
        async with get_database(info).session() as session:
            result = await session.execute(select(model).where(*filter_clauses(model, where)))
            rows = result.scalars().all()
            deleted = [to_graphql(object_type, row) for row in rows]
            for row in rows:
                await session.delete(row)
            await flush_writes(session, entity.key, "delete from")
            logger.info("Deleted rows", entity=entity.key, count=len(rows))
            return deleted

    return GraphField(
        list[object_type], resolve, description=f"Delete {entity.key} rows matching the filters."
    )


class TypeRegistry:
    """Derived entities keyed by table name, with explicit extension."""

    def __init__(self) -> None:
        self._base: dict[str, DerivedEntity] = {}
        self._current: dict[str, DerivedEntity] = {}

    def register(self, entity: DerivedEntity) -> None:
        if entity.key in self._base:
            raise ValueError(f"Entity {entity.key!r} is already registered")
        self._base[entity.key] = entity
        self._current[entity.key] = entity

    def __getitem__(self, key: str) -> DerivedEntity:
        return self._current[key]

    def __contains__(self, key: object) -> bool:
        return key in self._current

    def __iter__(self) -> Iterator[str]:
        return iter(self._current)

    def base(self, key: str) -> DerivedEntity:
        """The entity as derived, ignoring any extension."""
        return self._base[key]

    def object_type(self, key: str) -> type:
        """The object type currently exposed for an entity."""
        return self._current[key].object_type

    def extend(
        self,
        key: str,
        name: str,
        additions: Mapping[str, GraphField],
        *,
        description: str | None = None,
    ) -> type:
        """Compose ``name`` as the entity's fields plus ``additions`` and expose it.

        Additions shadow existing fields of the same name. The previous entry
        is left untouched; ``base(key)`` keeps returning the derived type.
        """
        current = self._current[key]
        object_type = compose_type(name, {**current.fields(), **additions}, description=description)
        self._current[key] = dataclasses.replace(
            current,
            object_type=object_type,
            additions={**current.additions, **additions},
        )
        logger.debug("Extended GraphQL type", entity=key, type=name, added=list(additions))
        return object_type

    def queries(self) -> dict[str, GraphField]:
        """Default read operations, resolved against the currently exposed types."""
        fields: dict[str, GraphField] = {}
        for key, entity in self._current.items():
            fields[key] = list_query(entity)
            fields[f"{key}_single"] = single_query(entity)
        return fields

    def mutations(self) -> dict[str, GraphField]:
        """Default write operations, resolved against the currently exposed types."""
        fields: dict[str, GraphField] = {}
        for key, entity in self._current.items():
            fields[f"insert_into_{key}"] = insert_mutation(entity)
            fields[f"insert_into_{key}_single"] = insert_single_mutation(entity)
            fields[f"update_{key}"] = update_mutation(entity)
            fields[f"delete_from_{key}"] = delete_mutation(entity)
        return fields


def derive_registry(models: Iterable[type]) -> TypeRegistry:
    """Derive every model into a fresh registry."""
    registry = TypeRegistry()
    for model in models:
        registry.register(derive_entity(model))
    return registry
