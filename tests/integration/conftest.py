"""
Fixtures for tests against a real PostgreSQL database.

Set TEST_DATABASE_URL to a disposable database to run them; every table is
truncated before each test.
"""

import os
from datetime import date

import pytest

from db import connection
from db.init_db import create_tables

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")

SEED_SQL = """
    INSERT INTO customer (id, companyname, contactname, city, country) VALUES
        ('ALFKI', 'Alfreds Futterkiste', 'Maria Anders', 'Berlin', 'Germany'),
        ('BONAP', 'Bon app''', 'Laurence Lebihan', 'Marseille', 'France');
    INSERT INTO employee (id, firstname, lastname, region, hiredate, title, reportsto) VALUES
        (1, 'Andrew', 'Fuller', 'WA', '1992-08-14', 'Vice President, Sales', NULL),
        (2, 'Nancy', 'Davolio', 'WA', '1992-05-01', 'Sales Representative', 1),
        (3, 'Janet', 'Leverling', 'WA', '1992-04-01', 'Sales Representative', 1);
    INSERT INTO product (id, productname, unitprice) VALUES
        (1, 'Chai', 18.00),
        (2, 'Chang', 19.00);
"""


@pytest.fixture(scope="session")
def database():
    if not TEST_DATABASE_URL:
        pytest.skip("TEST_DATABASE_URL not set")
    saved = connection._pool
    connection._pool = None
    connection.init_pool(dsn=TEST_DATABASE_URL)
    create_tables()
    yield
    connection.close_pool()
    connection._pool = saved


@pytest.fixture(autouse=True)
def clean_tables(database):
    conn = connection.get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(
                "TRUNCATE orderdetail, customerorder, product, employee, customer "
                "RESTART IDENTITY CASCADE;"
            )
            cur.execute(SEED_SQL)
        conn.commit()
    finally:
        connection.release_connection(conn)


@pytest.fixture
def ship_to():
    return dict(
        shipcity="Berlin",
        shipaddress="Obere Str. 57",
        shipname="Alfreds Futterkiste",
        shipvia=1,
        shipcountry="Germany",
        shippostalcode="12209",
        requireddate=date(2024, 5, 1),
        freight=10.0,
    )
