"""
Unit tests for the in-memory policy store and store factory.
"""

from datetime import datetime

import pytest

from policy_rag.config import Settings
from policy_rag.exceptions import StoreError
from policy_rag.models import PolicyDocument
from policy_rag.store import InMemoryPolicyStore, PostgresPolicyStore, create_store

pytestmark = pytest.mark.unit


def make_policy(title="약관"):
    return PolicyDocument(title=title, version="1.0", effective_date=datetime(2024, 1, 1))


class TestInMemoryPolicyStore:

    async def test_insert_policy_assigns_id(self, memory_store):
        policy = make_policy()

        policy_id = await memory_store.insert_policy(policy)

        assert policy_id == 1
        assert policy.id == 1
        assert policy.created_at is not None

    async def test_ids_increase(self, memory_store, make_section):
        assert await memory_store.insert_policy(make_policy("a")) == 1
        assert await memory_store.insert_policy(make_policy("b")) == 2
        assert await memory_store.insert_section(1, make_section()) == 1
        assert await memory_store.insert_section(2, make_section()) == 2

    async def test_sections_in_insertion_order(self, memory_store, make_section):
        for i in range(3):
            await memory_store.insert_section(7, make_section(title=f"s{i}", order=i, keywords=["보험금"]))

        sections = await memory_store.fetch_all_sections()

        assert [s.title for s in sections] == ["s0", "s1", "s2"]
        assert all(s.policy_id == 7 for s in sections)
        assert [s.id for s in sections] == [1, 2, 3]

    async def test_stored_copies_are_isolated(self, memory_store, make_section):
        section = make_section(title="원본", keywords=["보험금"])
        await memory_store.insert_section(1, section)

        section.title = "변경"
        section.keywords.append("계약")
        fetched = await memory_store.fetch_all_sections()

        assert fetched[0].title == "원본"
        assert fetched[0].keywords == ["보험금"]

    async def test_list_policies_newest_first(self, memory_store):
        for title in ("첫째", "둘째", "셋째"):
            await memory_store.insert_policy(make_policy(title))

        policies = await memory_store.list_policies()

        assert [p.title for p in policies] == ["셋째", "둘째", "첫째"]

    async def test_listed_policies_have_no_sections(self, memory_store, make_section):
        policy = make_policy()
        policy.sections = [make_section()]
        await memory_store.insert_policy(policy)

        policies = await memory_store.list_policies()

        assert policies[0].sections == []

    async def test_empty_store(self):
        store = InMemoryPolicyStore()
        await store.connect()
        assert await store.fetch_all_sections() == []
        assert await store.list_policies() == []
        await store.disconnect()


class TestCreateStore:

    def test_memory_backend(self):
        assert isinstance(create_store(Settings(store_backend="memory")), InMemoryPolicyStore)

    def test_postgres_backend_not_connected(self):
        store = create_store(Settings(store_backend="postgres", database_url="postgresql://u:p@db:5432/x"))
        assert isinstance(store, PostgresPolicyStore)
        assert store.pool is None

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unsupported store backend"):
            create_store(Settings(store_backend="sqlite"))

    async def test_postgres_store_requires_connect(self):
        store = PostgresPolicyStore("postgresql://u:p@db:5432/x")
        with pytest.raises(StoreError, match="not connected"):
            await store.fetch_all_sections()
