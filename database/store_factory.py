"""
Store Factory — Create the right entry store backend from configuration.

Configuration in settings.yaml:
    repository:
      # Entry store backend
      #   "contentful" — Contentful Content Management API (production)
      #   "memory"     — In-memory dicts (development, testing)
      backend: "contentful"

      # For memory backend: optional JSON seed file
      seed_file: "./data/seed.json"

Usage:
    from database.store_factory import create_store
    store = create_store(get_settings().repository)

Each call builds a new store; the caller owns it and passes it to the
Orchestrator explicitly.
"""
from __future__ import annotations

import structlog

from config.settings import RepositoryConfig
from database.store_base import BaseEntryStore

logger = structlog.get_logger()


def create_store(config: RepositoryConfig = None) -> BaseEntryStore:
    """Factory: create the entry store backend named by `config.backend`."""
    config = config or RepositoryConfig()
    backend = config.backend

    if backend == "memory":
        from database.store_memory import InMemoryEntryStore
        if config.seed_file:
            store = InMemoryEntryStore.from_file(config.seed_file)
        else:
            store = InMemoryEntryStore()
        logger.info("store_created", backend="memory", seed_file=config.seed_file or None)
        return store

    if backend == "contentful":
        from database.store_contentful import ContentfulEntryStore
        logger.info("store_created", backend="contentful",
                    space_id=config.space_id, environment=config.environment)
        return ContentfulEntryStore(config)

    raise ValueError(f"Unknown repository backend: {backend}")
