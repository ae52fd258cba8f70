"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import get_connection, release_connection
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Settings table: application-wide key/value pairs (default exchange rate, ...)
CREATE TABLE IF NOT EXISTS settings (
    key             VARCHAR(100) PRIMARY KEY,
    value           TEXT NOT NULL,
    updated_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Cash register movements. Both legs of an exchange share a pair_id.
CREATE TABLE IF NOT EXISTS cash_transactions (
    id              SERIAL PRIMARY KEY,
    type            VARCHAR(20) NOT NULL
                    CHECK (type IN ('sale', 'expense', 'deposit', 'withdrawal', 'exchange')),
    amount          DOUBLE PRECISION NOT NULL CHECK (amount >= 0),
    currency        VARCHAR(3) NOT NULL,
    exchange_rate   DOUBLE PRECISION,
    description     TEXT DEFAULT '',
    reference       VARCHAR(100),
    date            TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    pair_id         VARCHAR(36),
    created_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Customers
CREATE TABLE IF NOT EXISTS customers (
    id              SERIAL PRIMARY KEY,
    name            VARCHAR(150) NOT NULL,
    email           VARCHAR(150),
    phone           VARCHAR(50),
    created_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Customer account movements (single currency)
CREATE TABLE IF NOT EXISTS customer_transactions (
    id              SERIAL PRIMARY KEY,
    customer_id     INT NOT NULL REFERENCES customers(id) ON DELETE CASCADE,
    type            VARCHAR(10) NOT NULL CHECK (type IN ('invoice', 'payment', 'refund')),
    amount          NUMERIC(14,2) NOT NULL CHECK (amount >= 0),
    description     TEXT DEFAULT '',
    reference       VARCHAR(100),
    date            DATE NOT NULL DEFAULT CURRENT_DATE,
    due_date        DATE
);

-- Indexes for faster queries
CREATE INDEX IF NOT EXISTS idx_cash_transactions_date ON cash_transactions(date);
CREATE INDEX IF NOT EXISTS idx_cash_transactions_pair ON cash_transactions(pair_id) WHERE pair_id IS NOT NULL;
CREATE INDEX IF NOT EXISTS idx_customer_transactions_customer ON customer_transactions(customer_id, date);
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        release_connection(conn)


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("Database schema created successfully.")
