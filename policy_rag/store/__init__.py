"""
Policy document store.

Usage:
    from policy_rag.store import create_store

    store = create_store(settings)   # once, at startup
    await store.connect()
    policy_id = await store.insert_policy(policy)
    await store.insert_section(policy_id, section)
    sections = await store.fetch_all_sections()
"""

import logging

from .base import PolicyStore
from .memory import InMemoryPolicyStore
from .postgres import PostgresPolicyStore

logger = logging.getLogger(__name__)


def create_store(settings) -> PolicyStore:
    """
    Create the store selected by settings.store_backend

    Args:
        settings: Settings instance (store_backend, database_url)

    Returns:
        Unconnected PolicyStore (call connect() before use)
    """
    if settings.store_backend == "memory":
        logger.info("Using in-memory policy store")
        return InMemoryPolicyStore()
    if settings.store_backend == "postgres":
        logger.info("Using PostgreSQL policy store")
        return PostgresPolicyStore(settings.database_url)
    raise ValueError(f"Unsupported store backend: {settings.store_backend}")


__all__ = [
    "PolicyStore",
    "InMemoryPolicyStore",
    "PostgresPolicyStore",
    "create_store",
]
