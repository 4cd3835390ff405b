from intake_portal.repositories.resource_store import (
    RELATION_MODELS,
    ResourceStore,
    SQLAlchemyResourceStore,
)

__all__ = ["RELATION_MODELS", "ResourceStore", "SQLAlchemyResourceStore"]
