"""Resolver package for the GraphQL schema.

Resolvers check access with `access_control`, open a database session and
delegate to the `domain` services, converting models to GraphQL types.
"""
