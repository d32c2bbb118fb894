"""
PostgreSQL policy store (asyncpg connection pool).

Schema:
    insurance_policies  - one row per uploaded policy (title, version, effective date)
    policy_sections     - ordered sections with keyword arrays, cascade-deleted with the policy
"""

import logging
from typing import List, Optional

import asyncpg

from ..exceptions import StoreError
from ..models import PolicyDocument, Section
from .base import PolicyStore

logger = logging.getLogger(__name__)


class PostgresPolicyStore(PolicyStore):
    """PostgreSQL-backed policy store"""

    def __init__(self, connection_string: str, min_size: int = 1, max_size: int = 10):
        self.connection_string = connection_string
        self.min_size = min_size
        self.max_size = max_size
        self.pool: Optional[asyncpg.Pool] = None

    async def connect(self):
        """Initialize connection pool and schema"""
        self.pool = await asyncpg.create_pool(
            self.connection_string,
            min_size=self.min_size,
            max_size=self.max_size,
        )
        await self.init_schema()
        logger.info(f"Connected to PostgreSQL: {self.connection_string.split('@')[-1]}")

    async def disconnect(self):
        """Close connection pool"""
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("Disconnected from PostgreSQL")

    def _require_pool(self) -> asyncpg.Pool:
        if self.pool is None:
            raise StoreError("PostgreSQL store is not connected")
        return self.pool

    async def init_schema(self):
        """Create tables and indexes"""
        async with self._require_pool().acquire() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS insurance_policies (
                    id SERIAL PRIMARY KEY,
                    title TEXT NOT NULL,
                    version TEXT NOT NULL DEFAULT '1.0',
                    effective_date TIMESTAMP NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            await conn.execute("""
                CREATE TABLE IF NOT EXISTS policy_sections (
                    id SERIAL PRIMARY KEY,
                    policy_id INTEGER REFERENCES insurance_policies(id) ON DELETE CASCADE,
                    title TEXT NOT NULL,
                    content TEXT NOT NULL,
                    section_order INTEGER NOT NULL,
                    keywords TEXT[] NOT NULL DEFAULT '{}',
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            await conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_sections_policy
                ON policy_sections (policy_id, section_order)
            """)

            logger.info("Database schema initialized")

    async def insert_policy(self, policy: PolicyDocument) -> int:
        async with self._require_pool().acquire() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO insurance_policies (title, version, effective_date)
                VALUES ($1, $2, $3)
                RETURNING id, created_at
                """,
                policy.title,
                policy.version,
                policy.effective_date,
            )
            policy.id = row["id"]
            policy.created_at = row["created_at"]
            return row["id"]

    async def insert_section(self, policy_id: int, section: Section) -> int:
        async with self._require_pool().acquire() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO policy_sections
                    (policy_id, title, content, section_order, keywords)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING id
                """,
                policy_id,
                section.title,
                section.content,
                section.order,
                list(section.keywords),
            )
            section.id = row["id"]
            section.policy_id = policy_id
            return row["id"]

    async def fetch_all_sections(self) -> List[Section]:
        async with self._require_pool().acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT id, policy_id, title, content, section_order, keywords
                FROM policy_sections
                ORDER BY id
                """
            )
            return [
                Section(
                    id=row["id"],
                    policy_id=row["policy_id"],
                    title=row["title"],
                    content=row["content"],
                    order=row["section_order"],
                    keywords=list(row["keywords"] or []),
                )
                for row in rows
            ]

    async def list_policies(self) -> List[PolicyDocument]:
        async with self._require_pool().acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT id, title, version, effective_date, created_at
                FROM insurance_policies
                ORDER BY created_at DESC, id DESC
                """
            )
            return [
                PolicyDocument(
                    id=row["id"],
                    title=row["title"],
                    version=row["version"],
                    effective_date=row["effective_date"],
                    created_at=row["created_at"],
                )
                for row in rows
            ]

    async def count_sections(self) -> int:
        async with self._require_pool().acquire() as conn:
            return await conn.fetchval("SELECT COUNT(*) FROM policy_sections")
