from .memory_profile_repository import InMemoryProfileRepository
from .sqlalchemy_profile_repository import SqlAlchemyProfileRepository

__all__ = ["InMemoryProfileRepository", "SqlAlchemyProfileRepository"]
