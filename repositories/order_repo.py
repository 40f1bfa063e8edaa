"""
repositories/order_repo.py
---------------------------
Data access layer for orders and their line items.
All SQL queries related to the `customerorder` and `orderdetail` tables live here.

Values are always bound as query parameters. The only dynamic fragments of a
statement (listing sort column and direction, optional customer filter) are
checked against allow-lists and composed with psycopg2.sql.
"""

from typing import Optional, Sequence

from psycopg2 import sql

from config import DEFAULT_PER_PAGE, ORDER_DELETE_CASCADE
from db.connection import get_connection, release_connection
from models.order import Order, OrderCollectionOptions, OrderDetail
from repositories.errors import InsertionError, InvalidCollectionOptionError
from utils.logger import get_logger

logger = get_logger(__name__)

# Columns returned by order listings; also the columns a listing may sort by.
ALL_ORDERS_COLUMNS = (
    "id",
    "customerid",
    "employeeid",
    "shipcity",
    "shipcountry",
    "shippeddate",
)
ORDER_SORT_COLUMNS = frozenset(ALL_ORDERS_COLUMNS)
SORT_DIRECTIONS = frozenset(("asc", "desc"))

DEFAULT_SORT = "id"
DEFAULT_CUSTOMER_SORT = "shippeddate"

_LIST_ORDERS_SQL = sql.SQL("""
    SELECT {columns},
           c.contactname AS customername,
           e.firstname || ' ' || e.lastname AS employeename
    FROM customerorder AS o
    LEFT JOIN customer AS c ON o.customerid = c.id
    LEFT JOIN employee AS e ON o.employeeid = e.id
    {where}
    ORDER BY {order_by}
    LIMIT %s OFFSET %s;
""")

_COUNT_ORDERS_SQL = sql.SQL("SELECT count(*) AS total FROM customerorder AS o {where};")

_CUSTOMER_FILTER = sql.SQL("WHERE o.customerid = %s")

_GET_ORDER_SQL = """
    SELECT o.id, o.customerid, o.employeeid,
           o.shipcity, o.shipaddress, o.shipname, o.shipvia, o.shipregion,
           o.shipcountry, o.shippostalcode, o.shippeddate, o.requireddate, o.freight,
           c.contactname AS customername,
           e.firstname || ' ' || e.lastname AS employeename,
           (
               SELECT sum(d.unitprice * d.quantity * (1 - d.discount))
               FROM orderdetail AS d
               WHERE d.orderid = o.id
               GROUP BY d.orderid
           ) AS subtotal
    FROM customerorder AS o
    LEFT JOIN customer AS c ON o.customerid = c.id
    LEFT JOIN employee AS e ON o.employeeid = e.id
    WHERE o.id = %s;
"""

_GET_ORDER_DETAILS_SQL = """
    SELECT d.id, d.orderid, d.productid,
           d.unitprice * d.quantity AS price,
           p.productname,
           d.unitprice, d.quantity, d.discount
    FROM orderdetail AS d
    LEFT JOIN product AS p ON d.productid = p.id
    WHERE d.orderid = %s
    ORDER BY split_part(d.id, '/', 2)::int;
"""

_INSERT_ORDER_SQL = """
    INSERT INTO customerorder
        (employeeid, customerid, shipcity, shipaddress, shipvia, shipregion,
         shipname, shipcountry, shippostalcode, requireddate, freight)
    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
    RETURNING id;
"""

_INSERT_DETAIL_SQL = """
    INSERT INTO orderdetail (id, orderid, productid, unitprice, quantity, discount)
    VALUES (%s, %s, %s, %s, %s, %s);
"""

_UPDATE_ORDER_SQL = """
    UPDATE customerorder
    SET employeeid = %s, customerid = %s, shipcity = %s, shipaddress = %s,
        shipname = %s, shipvia = %s, shipregion = %s, shipcountry = %s,
        shippostalcode = %s, requireddate = %s, freight = %s
    WHERE id = %s;
"""

_UPDATE_DETAIL_SQL = """
    UPDATE orderdetail
    SET productid = %s, unitprice = %s, quantity = %s, discount = %s
    WHERE id = %s;
"""

_DELETE_ORDER_SQL = "DELETE FROM customerorder WHERE id = %s;"
_DELETE_ORDER_DETAILS_SQL = "DELETE FROM orderdetail WHERE orderid = %s;"

_SNAPSHOT_SQL = "SET TRANSACTION ISOLATION LEVEL REPEATABLE READ READ ONLY;"


class OrderRepository:
    """Repository for CRUD operations on orders and order line items."""

    # ── READ ──────────────────────────────────────────────

    def get_all_orders(
        self,
        options: Optional[OrderCollectionOptions] = None,
        customer_id: Optional[str] = None,
    ) -> list[Order]:
        """
        Fetch one page of orders, enriched with customer and employee names.

        Args:
            options: Page window and ordering. Missing options use the
                defaults (page 1, DEFAULT_PER_PAGE rows, ascending).
            customer_id: Only return orders placed by this customer. An
                empty id means no filter.

        Returns:
            List of Order objects (possibly empty).

        Raises:
            InvalidCollectionOptionError: Unknown sort column/direction or a
                page window that does not start at page 1 or later.
        """
        return self._list_orders(options, customer_id, DEFAULT_SORT)

    def get_customer_orders(
        self, customer_id: str, options: Optional[OrderCollectionOptions] = None
    ) -> list[Order]:
        """
        Fetch one page of the orders placed by a customer.
        Sorted by shipped date unless options name another column.
        """
        return self._list_orders(options, customer_id, DEFAULT_CUSTOMER_SORT)

    def _list_orders(
        self,
        options: Optional[OrderCollectionOptions],
        customer_id: Optional[str],
        default_sort: str,
    ) -> list[Order]:
        options = self._resolve_options(options, default_sort)
        where = _CUSTOMER_FILTER if customer_id else sql.SQL("")
        params: list = [customer_id] if customer_id else []
        params += [options.per_page, options.offset]

        query = _LIST_ORDERS_SQL.format(
            columns=sql.SQL(", ").join(
                sql.Identifier("o", column) for column in ALL_ORDERS_COLUMNS
            ),
            where=where,
            order_by=self._order_by(options),
        )

        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(query, params)
                return [self._row_to_order(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def count_orders(self, customer_id: Optional[str] = None) -> int:
        """Total number of orders a listing pages over."""
        where = _CUSTOMER_FILTER if customer_id else sql.SQL("")
        params = (customer_id,) if customer_id else ()
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(_COUNT_ORDERS_SQL.format(where=where), params)
                return int(cur.fetchone()["total"])
        finally:
            release_connection(conn)

    def get_order(self, order_id: int) -> Optional[Order]:
        """
        Fetch a single order by ID, with its subtotal.

        The subtotal is None when the order has no line items.

        Returns:
            An Order object or None if not found.
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                return self._fetch_order(cur, order_id)
        finally:
            release_connection(conn)

    def get_order_details(self, order_id: int) -> list[OrderDetail]:
        """
        Fetch the line items of an order, in the order they were created.

        Returns:
            List of OrderDetail objects with `price` and `productname` set.
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                return self._fetch_details(cur, order_id)
        finally:
            release_connection(conn)

    def get_order_with_details(
        self, order_id: int
    ) -> tuple[Optional[Order], list[OrderDetail]]:
        """
        Fetch an order together with its line items.

        Both reads run in one read-only REPEATABLE READ transaction, so the
        pair reflects a single snapshot of the database.

        Returns:
            (order or None, list of line items)
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(_SNAPSHOT_SQL)
                order = self._fetch_order(cur, order_id)
                items = self._fetch_details(cur, order_id)
            conn.commit()
            return order, items
        except Exception:
            conn.rollback()
            raise
        finally:
            release_connection(conn)

    # ── CREATE ────────────────────────────────────────────

    def create_order(self, order: Order, details: Sequence[OrderDetail] = ()) -> Order:
        """
        Insert an order and its line items in a single transaction.

        Line items get ids "<orderid>/1" .. "<orderid>/N" in input order.

        Args:
            order: Header data for the new order.
            details: Line items to attach to the new order.

        Returns:
            The same Order with its `id` populated (and each detail's
            `id` and `orderid`).

        Raises:
            InsertionError: The header insert returned no id.
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(_INSERT_ORDER_SQL, (
                    order.employeeid, order.customerid, order.shipcity,
                    order.shipaddress, order.shipvia, order.shipregion,
                    order.shipname, order.shipcountry, order.shippostalcode,
                    order.requireddate, order.freight,
                ))
                row = cur.fetchone()
                if not row or row.get("id") is None:
                    raise InsertionError("Order insertion did not return an id")
                order_id = row["id"]

                detail_ids = [f"{order_id}/{n}" for n in range(1, len(details) + 1)]
                for detail_id, detail in zip(detail_ids, details):
                    cur.execute(_INSERT_DETAIL_SQL, (
                        detail_id, order_id, detail.productid,
                        detail.unitprice, detail.quantity, detail.discount,
                    ))
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to create order: {e}")
            raise
        finally:
            release_connection(conn)

        order.id = order_id
        for detail_id, detail in zip(detail_ids, details):
            detail.id = detail_id
            detail.orderid = order_id
        logger.info(f"Created order #{order_id} with {len(details)} line item(s)")
        return order

    # ── UPDATE ────────────────────────────────────────────

    def update_order(
        self, order_id: int, order: Order, details: Sequence[OrderDetail] = ()
    ) -> Order:
        """
        Overwrite an order header and its line items in a single transaction.

        Every header field is written, so pass the complete order. Line items
        are matched by their own `id`; an id matching no row is a no-op.

        Args:
            order_id: Primary key of the order to update.
            order: New header data.
            details: Line items to update, each with its `id` set.

        Returns:
            The supplied Order with `id` set to order_id (not re-read).

        Raises:
            ValueError: A line item has no id.
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(_UPDATE_ORDER_SQL, (
                    order.employeeid, order.customerid, order.shipcity,
                    order.shipaddress, order.shipname, order.shipvia,
                    order.shipregion, order.shipcountry, order.shippostalcode,
                    order.requireddate, order.freight, order_id,
                ))
                for detail in details:
                    if detail.id is None:
                        raise ValueError("Order line items must have an id to be updated")
                    cur.execute(_UPDATE_DETAIL_SQL, (
                        detail.productid, detail.unitprice,
                        detail.quantity, detail.discount, detail.id,
                    ))
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to update order #{order_id}: {e}")
            raise
        finally:
            release_connection(conn)

        order.id = order_id
        logger.info(f"Updated order #{order_id}")
        return order

    # ── DELETE ────────────────────────────────────────────

    def delete_order(self, order_id: int, cascade: Optional[bool] = None) -> bool:
        """
        Delete an order by ID.

        Args:
            order_id: Primary key.
            cascade: Also delete the order's line items. None falls back to
                ORDER_DELETE_CASCADE; without it the line items remain.

        Returns:
            True if an order was deleted, False otherwise.
        """
        if cascade is None:
            cascade = ORDER_DELETE_CASCADE
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                if cascade:
                    cur.execute(_DELETE_ORDER_DETAILS_SQL, (order_id,))
                cur.execute(_DELETE_ORDER_SQL, (order_id,))
                deleted = cur.rowcount > 0
            conn.commit()
            if deleted:
                logger.info(f"Deleted order #{order_id}")
            return deleted
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to delete order #{order_id}: {e}")
            raise
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _resolve_options(
        options: Optional[OrderCollectionOptions], default_sort: str
    ) -> OrderCollectionOptions:
        """Fill in defaults and reject anything outside the allow-lists."""
        if options is None:
            options = OrderCollectionOptions()
        sort = options.sort or default_sort
        per_page = DEFAULT_PER_PAGE if options.per_page is None else options.per_page
        order = (options.order or "asc").lower()

        if sort not in ORDER_SORT_COLUMNS:
            raise InvalidCollectionOptionError(f"Cannot sort orders by {sort!r}")
        if order not in SORT_DIRECTIONS:
            raise InvalidCollectionOptionError(f"Unknown sort direction {options.order!r}")
        if options.page < 1:
            raise InvalidCollectionOptionError(f"Page must be 1 or greater, got {options.page}")
        if per_page < 1:
            raise InvalidCollectionOptionError(
                f"Results per page must be 1 or greater, got {per_page}"
            )
        return OrderCollectionOptions(
            page=options.page, per_page=per_page, sort=sort, order=order
        )

    @staticmethod
    def _order_by(options: OrderCollectionOptions) -> sql.Composed:
        direction = sql.SQL(options.order.upper())
        terms = [sql.SQL("{} {}").format(sql.Identifier("o", options.sort), direction)]
        # id breaks ties so consecutive pages never overlap
        if options.sort != "id":
            terms.append(sql.SQL("{} {}").format(sql.Identifier("o", "id"), direction))
        return sql.SQL(", ").join(terms)

    def _fetch_order(self, cur, order_id: int) -> Optional[Order]:
        cur.execute(_GET_ORDER_SQL, (order_id,))
        row = cur.fetchone()
        return self._row_to_order(row) if row else None

    def _fetch_details(self, cur, order_id: int) -> list[OrderDetail]:
        cur.execute(_GET_ORDER_DETAILS_SQL, (order_id,))
        return [self._row_to_detail(r) for r in cur.fetchall()]

    @staticmethod
    def _row_to_order(row: dict) -> Order:
        """Convert a database row to an Order domain object."""
        return Order(
            id=row["id"],
            customerid=row.get("customerid"),
            employeeid=row.get("employeeid"),
            shipcity=row.get("shipcity"),
            shipaddress=row.get("shipaddress"),
            shipname=row.get("shipname"),
            shipvia=row.get("shipvia"),
            shipregion=row.get("shipregion"),
            shipcountry=row.get("shipcountry"),
            shippostalcode=row.get("shippostalcode"),
            requireddate=row.get("requireddate"),
            shippeddate=row.get("shippeddate"),
            freight=_to_float(row.get("freight")),
            customername=row.get("customername"),
            employeename=row.get("employeename"),
            subtotal=_to_float(row.get("subtotal")),
        )

    @staticmethod
    def _row_to_detail(row: dict) -> OrderDetail:
        """Convert a database row to an OrderDetail domain object."""
        return OrderDetail(
            id=row["id"],
            orderid=row.get("orderid"),
            productid=row.get("productid"),
            productname=row.get("productname"),
            unitprice=float(row["unitprice"]),
            quantity=row["quantity"],
            discount=float(row["discount"]),
            price=_to_float(row.get("price")),
        )


def _to_float(value) -> Optional[float]:
    return float(value) if value is not None else None
