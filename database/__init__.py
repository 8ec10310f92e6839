"""
Database layer — Content repository access.

Backends:
  - Contentful (Content Management API over httpx)
  - In-memory (dict-based, for development/testing)

Quick start:
  from database import create_store
  store = create_store(RepositoryConfig(backend="memory"))
  entries = await store.get_entries("message")
"""
from database.store_base import BaseEntryStore
from database.store_memory import InMemoryEntryStore
from database.store_contentful import ContentfulEntryStore
from database.store_factory import create_store

__all__ = [
    "BaseEntryStore",
    "InMemoryEntryStore",
    "ContentfulEntryStore",
    "create_store",
]
