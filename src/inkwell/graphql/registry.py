"""
Process-wide registry of GraphQL types derived from the ORM schema
"""

from ..dbmodels import ENTITY_MODELS
from .derive import derive_registry

# Derived once at import; extended by the modules under ``types``
registry = derive_registry(ENTITY_MODELS)
