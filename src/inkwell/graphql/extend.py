"""
Relationship fields and filter compilation for extended GraphQL types.

A relationship field is resolved lazily: nothing is fetched with the parent,
and each requested edge issues its own query scoped by the foreign key. Where
shapes compile to plain column equality for scalar keys and to an existential
subquery (``EXISTS``) for keys naming a relationship, all ANDed together.

Resolvers are closures annotated with the target classes, so this module must
not use postponed annotation evaluation.
"""

import dataclasses
from typing import Any

import strawberry
from sqlalchemy import and_, inspect, select
from sqlalchemy.sql.elements import ColumnElement

from ..logging import get_logger
from .derive import GraphField, fetch_rows

logger = get_logger(__name__)


def where_clauses(model: type, where: Any | None) -> list[ColumnElement[bool]]:
    """Compile a ``Where*Input`` instance into predicates on ``model``.

    Absent (null) keys add nothing. A nested input under a relationship key
    becomes ``EXISTS`` over the related rows matching that input.
    """
    if where is None:
        return []

    mapper = inspect(model)
    clauses: list[ColumnElement[bool]] = []
    for where_field in dataclasses.fields(where):
        value = getattr(where, where_field.name)
        if value is None:
            continue

        if where_field.name in mapper.relationships:
            prop = mapper.relationships[where_field.name]
            nested = where_clauses(prop.mapper.class_, value)
            attribute = getattr(model, where_field.name)
            criterion = and_(*nested) if nested else None
            clauses.append(attribute.any(criterion) if prop.uselist else attribute.has(criterion))
        else:
            clauses.append(getattr(model, where_field.name) == value)
    return clauses


def relation_field(
    model: type,
    relationship: str,
    target: type,
    *,
    where: type | None = None,
    description: str | None = None,
) -> GraphField:
    """Build a lazily resolved field for a declared ORM relationship.

    Args:
        model: Parent model declaring the relationship
        relationship: Relationship attribute name on ``model``
        target: Object type returned for related rows
        where: Optional filter input exposed as the field's ``where`` argument
            (to-many relationships only)
        description: GraphQL field description

    Returns:
        A ``GraphField`` returning ``[target!]!`` for to-many relationships and
        a nullable ``target`` for to-one relationships.
    """
    mapper = inspect(model)
    prop = mapper.relationships[relationship]
    related = prop.mapper.class_
    # (parent attribute holding the key, related column it must equal)
    key_pairs = [
        (mapper.get_property_by_column(local).key, remote)
        for local, remote in prop.local_remote_pairs
    ]

    def scope(root: Any) -> list[ColumnElement[bool]]:
        return [remote == getattr(root, key) for key, remote in key_pairs]

    def log_resolve(root: Any, where_value: Any = None) -> None:
        logger.debug(
            "Resolving relationship",
            parent=model.__name__,
            relationship=relationship,
            parent_key={key: getattr(root, key) for key, _ in key_pairs},
            where=where_value,
        )

    if not prop.uselist:
        if where is not None:
            raise ValueError(f"{model.__name__}.{relationship} is to-one and takes no filter")

        async def resolve_one(root, info: strawberry.Info) -> target | None:
            log_resolve(root)
            rows = await fetch_rows(info, target, select(related).where(*scope(root)), limit=1)
            return rows[0] if rows else None

        return GraphField(target | None, resolve_one, description=description)

    if where is None:

        async def resolve_many(root, info: strawberry.Info) -> list[target]:
            log_resolve(root)
            return await fetch_rows(info, target, select(related).where(*scope(root)))

        return GraphField(list[target], resolve_many, description=description)

    where_input = where

    async def resolve_filtered(
        root, info: strawberry.Info, where: where_input | None = None
    ) -> list[target]:
        log_resolve(root, where)
        statement = select(related).where(*scope(root), *where_clauses(related, where))
        return await fetch_rows(info, target, statement)

    return GraphField(list[target], resolve_filtered, description=description)
