"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Concurrency Design:
-------------------
1. **UNIQUE constraints** on email and telephone make the uniqueness check
   part of the INSERT itself. Two concurrent registrations of the same
   email produce one row and one UniqueViolation, which is translated to
   ConflictError.

2. **Conditional UPDATE** for verification: the WHERE clause matches only
   an unverified row with the given token, so the transition and its
   precondition are a single statement. A second call finds no row.
"""

import logging
from pathlib import Path

from psycopg import errors
from psycopg_pool import ConnectionPool

from greetme.domain.account import Account
from greetme.domain.exceptions import ConflictError

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, name, telephone, email, nickname, password_hash, "
    "is_verified, verification_token, created_at, updated_at"
)

_CONFLICT_MESSAGES = {
    "users_email_key": "Email already exists.",
    "users_telephone_key": "Telephone number already exists.",
}


def _row_to_account(row: tuple | None) -> Account | None:
    if row is None:
        return None
    return Account(
        id=row[0],
        name=row[1],
        telephone=row[2],
        email=row[3],
        nickname=row[4],
        password_hash=row[5],
        is_verified=row[6],
        verification_token=row[7],
        created_at=row[8],
        updated_at=row[9],
    )


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_by_email_or_telephone(self, email: str, telephone: str) -> Account | None:
        # Email matches sort first so an email conflict is reported over a telephone one
        sql = f"""
            SELECT {_COLUMNS}
            FROM users
            WHERE email = %s OR telephone = %s
            ORDER BY (email = %s) DESC
            LIMIT 1
        """
        return self._fetch_one(sql, (email, telephone, email))

    def find_by_email(self, email: str) -> Account | None:
        return self._fetch_one(f"SELECT {_COLUMNS} FROM users WHERE email = %s", (email,))

    def find_by_id(self, account_id: int) -> Account | None:
        return self._fetch_one(f"SELECT {_COLUMNS} FROM users WHERE id = %s", (account_id,))

    def find_by_email_and_token(self, email: str, token: str) -> Account | None:
        sql = f"SELECT {_COLUMNS} FROM users WHERE email = %s AND verification_token = %s"
        return self._fetch_one(sql, (email, token))

    def insert(self, account: Account) -> Account:
        """
        Insert a new account row.

        The UNIQUE constraints on email and telephone serialize concurrent
        registrations (one INSERT wins, the other raises UniqueViolation).

        Raises:
            ConflictError: If the email or telephone is already taken
        """
        sql = f"""
            INSERT INTO users (name, telephone, email, nickname, password_hash,
                               is_verified, verification_token)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING {_COLUMNS}
        """
        params = (
            account.name,
            account.telephone,
            account.email,
            account.nickname,
            account.password_hash,
            account.is_verified,
            account.verification_token,
        )

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
                conn.commit()
        except errors.UniqueViolation as e:
            constraint = e.diag.constraint_name
            logger.info("Insert rejected by unique constraint %s", constraint)
            raise ConflictError(
                _CONFLICT_MESSAGES.get(constraint, "Email already exists.")
            ) from None

        return _row_to_account(row)

    def mark_verified(self, email: str, token: str) -> Account | None:
        sql = f"""
            UPDATE users
            SET is_verified = TRUE, verification_token = NULL, updated_at = NOW()
            WHERE email = %s AND verification_token = %s AND is_verified = FALSE
            RETURNING {_COLUMNS}
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email, token))
            row = cursor.fetchone()
            conn.commit()
            return _row_to_account(row)

    def touch_updated_at(self, account_id: int) -> None:
        with self._pool.connection() as conn:
            conn.execute("UPDATE users SET updated_at = NOW() WHERE id = %s", (account_id,))
            conn.commit()

    def _fetch_one(self, sql: str, params: tuple) -> Account | None:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, params)
            return _row_to_account(cursor.fetchone())


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/greetme/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parents[4] / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
