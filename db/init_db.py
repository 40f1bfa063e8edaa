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
-- Customers: referenced by orders for display names only
CREATE TABLE IF NOT EXISTS customer (
    id              VARCHAR(8) PRIMARY KEY,
    companyname     VARCHAR(100),
    contactname     VARCHAR(100),
    contacttitle    VARCHAR(100),
    city            VARCHAR(60),
    country         VARCHAR(60)
);

-- Employees: reportsto points at the employee's manager
CREATE TABLE IF NOT EXISTS employee (
    id              SERIAL PRIMARY KEY,
    firstname       VARCHAR(60) NOT NULL,
    lastname        VARCHAR(60) NOT NULL,
    region          VARCHAR(60),
    hiredate        DATE,
    title           VARCHAR(100),
    reportsto       INT REFERENCES employee(id)
);

-- Products: referenced by order line items
CREATE TABLE IF NOT EXISTS product (
    id              SERIAL PRIMARY KEY,
    productname     VARCHAR(100) NOT NULL,
    unitprice       NUMERIC(12,2),
    discontinued    BOOLEAN DEFAULT FALSE
);

-- Order headers
CREATE TABLE IF NOT EXISTS customerorder (
    id              SERIAL PRIMARY KEY,
    customerid      VARCHAR(8) REFERENCES customer(id),
    employeeid      INT REFERENCES employee(id),
    shipcity        VARCHAR(60),
    shipaddress     VARCHAR(200),
    shipname        VARCHAR(100),
    shipvia         INT,
    shipregion      VARCHAR(60),
    shipcountry     VARCHAR(60),
    shippostalcode  VARCHAR(20),
    shippeddate     DATE,
    requireddate    DATE,
    freight         NUMERIC(12,2) DEFAULT 0
);

-- Order line items. orderid has no foreign key: deleting an order
-- without cascade leaves its line items behind.
CREATE TABLE IF NOT EXISTS orderdetail (
    id              VARCHAR(32) PRIMARY KEY,
    orderid         INT NOT NULL,
    productid       INT NOT NULL REFERENCES product(id),
    unitprice       NUMERIC(12,2) NOT NULL,
    quantity        INT NOT NULL CHECK (quantity > 0),
    discount        NUMERIC(4,3) NOT NULL DEFAULT 0 CHECK (discount >= 0 AND discount <= 1)
);

-- Indexes for faster queries
CREATE INDEX IF NOT EXISTS idx_customerorder_customer ON customerorder(customerid);
CREATE INDEX IF NOT EXISTS idx_customerorder_employee ON customerorder(employeeid);
CREATE INDEX IF NOT EXISTS idx_orderdetail_order ON orderdetail(orderid);
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
    from db.connection import init_pool, close_pool
    init_pool()
    create_tables()
    close_pool()
    print("Database schema created successfully.")
