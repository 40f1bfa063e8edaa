"""
models/order.py
---------------
Domain models for customer orders, their line items, and the options
that shape a paginated order listing.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass
class Order:
    """
    Represents an order header (a row of the `customerorder` table).

    Attributes:
        customerid: Customer placing the order.
        employeeid: Employee handling the order.
        shipcity / shipaddress / shipname / shipvia / shipregion /
        shipcountry / shippostalcode: Shipping information.
        requireddate: Date the customer needs the order by.
        shippeddate: Date the order shipped (None until shipped).
        freight: Shipping cost.
        id: Database primary key (None for new records).
        customername: Customer contact name (read-only, joined).
        employeename: "first last" of the employee (read-only, joined).
        subtotal: Sum of line totals net of discount (read-only, derived).
    """
    customerid: Optional[str] = None
    employeeid: Optional[int] = None
    shipcity: Optional[str] = None
    shipaddress: Optional[str] = None
    shipname: Optional[str] = None
    shipvia: Optional[int] = None
    shipregion: Optional[str] = None
    shipcountry: Optional[str] = None
    shippostalcode: Optional[str] = None
    requireddate: Optional[date] = None
    shippeddate: Optional[date] = None
    freight: Optional[float] = None
    id: Optional[int] = None
    customername: Optional[str] = None
    employeename: Optional[str] = None
    subtotal: Optional[float] = None

    def __str__(self) -> str:
        return f"Order #{self.id} | {self.customerid} | {self.shipcity}, {self.shipcountry}"


@dataclass
class OrderDetail:
    """
    Represents one line item of an order (a row of the `orderdetail` table).

    The id is "<orderid>/<n>", assigned when the order is created.
    `price` and `productname` are only populated on read.
    """
    productid: int
    unitprice: float
    quantity: int
    discount: float = 0.0  # fraction, 0-1
    id: Optional[str] = None
    orderid: Optional[int] = None
    productname: Optional[str] = None
    price: Optional[float] = None

    @property
    def line_total(self) -> float:
        """Price of the line after discount."""
        return self.unitprice * self.quantity * (1 - self.discount)


@dataclass
class OrderCollectionOptions:
    """
    Options that customize a query for a collection of orders.

    Attributes:
        page: Page number, starting at 1.
        per_page: Results per page. None means DEFAULT_PER_PAGE.
        sort: Column to sort by. None means the listing's own default.
        order: Sort direction, 'asc' or 'desc'.
    """
    page: int = 1
    per_page: Optional[int] = None
    sort: Optional[str] = None
    order: str = "asc"

    @property
    def offset(self) -> int:
        """Rows skipped before this page. Only meaningful once per_page is set."""
        return (self.page - 1) * self.per_page
