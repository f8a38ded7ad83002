"""
GraphQL layer: derived types, extensions and the assembled schema
"""
