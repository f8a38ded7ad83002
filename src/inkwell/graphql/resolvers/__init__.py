"""Resolver package for the overriding top-level GraphQL queries.

Derived default operations resolve in ``inkwell.graphql.derive``; relationship
fields resolve in ``inkwell.graphql.extend``.
"""
