"""Tests for the XML envelope codec."""

import xml.etree.ElementTree as ET
from datetime import date, datetime
from decimal import Decimal

import pytest

from freshbookspy import FreshBooksAPIError, FreshBooksDecodeError, Invoice, Line
from freshbookspy.envelope import Request, RequestMethod, decode, encode


class TestEncode:
    """Test request serialization."""

    def test_list_request(self):
        """Test a list request with page, per_page and filters."""
        payload = encode(
            Request(
                method=RequestMethod.INVOICE_LIST,
                page=2,
                per_page=25,
                filters={
                    "date_from": date(2024, 1, 1),
                    "client_id": "13",
                    "status": None,
                },
            )
        )
        assert payload.startswith(b"<?xml")

        root = ET.fromstring(payload)
        assert root.tag == "request"
        assert root.get("method") == "invoice.list"
        assert root.findtext("page") == "2"
        assert root.findtext("per_page") == "25"
        assert root.findtext("date_from") == "2024-01-01"
        assert root.findtext("client_id") == "13"
        assert root.find("status") is None

    def test_get_request_uses_kind_id(self):
        """Test that the id is sent as <kind_id>."""
        root = ET.fromstring(encode(Request(method=RequestMethod.CLIENT_GET, id=7)))
        assert root.get("method") == "client.get"
        assert root.findtext("client_id") == "7"
        assert root.find("page") is None

    def test_create_request_with_lines(self):
        """Test that nested items and lists are serialized."""
        invoice = Invoice(
            client_id="13",
            date=datetime(2024, 6, 23, 12, 30),
            lines=[
                Line(name="Yard work", unit_cost=Decimal("10.00"), quantity=4),
                Line(name="Paint"),
            ],
        )
        root = ET.fromstring(
            encode(Request(method=RequestMethod.INVOICE_CREATE, item=invoice))
        )

        element = root.find("invoice")
        assert element is not None
        assert element.findtext("client_id") == "13"
        assert element.findtext("date") == "2024-06-23 12:30:00"
        assert element.find("invoice_id") is None
        lines = element.findall("lines/line")
        assert [line.findtext("name") for line in lines] == ["Yard work", "Paint"]
        assert lines[0].findtext("unit_cost") == "10.00"

    def test_booleans_are_numeric(self):
        """Test that booleans are sent as 1 and 0."""
        root = ET.fromstring(
            encode(
                Request(
                    method=RequestMethod.CLIENT_LIST,
                    filters={"include_archived": True, "notify": False},
                )
            )
        )
        assert root.findtext("include_archived") == "1"
        assert root.findtext("notify") == "0"


class TestDecode:
    """Test response parsing."""

    def test_page_of(self, envelope, invoice_xml):
        """Test decoding a listing into a Page."""
        body = (
            '<invoices page="2" per_page="2" pages="3" total="5">'
            f"{invoice_xml(3)}{invoice_xml(4)}</invoices>"
        )
        response = decode(envelope(body).encode())
        assert response.ok

        page = response.page_of("invoices", "invoice", Invoice)
        assert page.page == 2
        assert page.pages == 3
        assert page.per_page == 2
        assert page.total == 5
        assert [invoice.invoice_id for invoice in page.items] == ["3", "4"]
        assert page.items[0].amount == Decimal("23.50")
        assert page.items[0].date == datetime(2024, 6, 23)

    def test_empty_listing(self, envelope):
        """Test an empty listing container."""
        response = decode(
            envelope('<invoices page="1" per_page="25" pages="0" total="0"/>').encode()
        )
        page = response.page_of("invoices", "invoice", Invoice)
        assert page.items == ()
        assert page.pages == 0

    def test_single_item_with_lines(self, envelope):
        """Test decoding an item with a nested line list."""
        body = (
            "<invoice><invoice_id>344</invoice_id>"
            "<updated>0000-00-00 00:00:00</updated>"
            "<lines><line><name>Yard work</name><amount>40</amount></line></lines>"
            "</invoice>"
        )
        invoice = decode(envelope(body).encode()).item("invoice", Invoice)
        assert invoice.invoice_id == "344"
        assert invoice.updated is None
        assert len(invoice.lines) == 1
        assert invoice.lines[0].amount == Decimal("40")

    def test_value(self, envelope):
        """Test reading a scalar element such as a created id."""
        response = decode(envelope("<invoice_id>  344 </invoice_id>").encode())
        assert response.value("invoice_id") == "344"

    def test_failure_envelope(self, envelope):
        """Test that a fail status is raised as FreshBooksAPIError."""
        body = "<error>Invoice not found.</error><code>40010</code><field>invoice_id</field>"
        response = decode(envelope(body, status="fail").encode())
        assert not response.ok

        with pytest.raises(FreshBooksAPIError) as exc_info:
            response.raise_for_status()

        assert exc_info.value.message == "Invoice not found."
        assert exc_info.value.code == "40010"
        assert exc_info.value.field == "invoice_id"
        assert str(exc_info.value) == "[40010] Invoice not found."

    def test_malformed_payload(self):
        """Test that broken XML raises FreshBooksDecodeError."""
        with pytest.raises(FreshBooksDecodeError) as exc_info:
            decode(b"<response status='ok'><invoices>")
        assert exc_info.value.payload == b"<response status='ok'><invoices>"

    def test_wrong_root_element(self):
        """Test that a non-envelope document raises FreshBooksDecodeError."""
        with pytest.raises(FreshBooksDecodeError):
            decode(b"<html><body>Maintenance</body></html>")

    def test_missing_element(self, envelope):
        """Test that a missing expected element raises FreshBooksDecodeError."""
        response = decode(envelope().encode())
        with pytest.raises(FreshBooksDecodeError):
            response.item("invoice", Invoice)

    def test_missing_pagination_attributes(self, envelope):
        """Test that a listing without page counts raises FreshBooksDecodeError."""
        response = decode(envelope("<invoices></invoices>").encode())
        with pytest.raises(FreshBooksDecodeError):
            response.page_of("invoices", "invoice", Invoice)


class TestFormatting:
    """Test whitespace and number handling."""

    def test_pretty_printed_response(self):
        """Test that indentation whitespace does not leak into values."""
        payload = b"""<?xml version="1.0" encoding="utf-8"?>
<response xmlns="http://www.freshbooks.com/api/" status="ok">
  <invoices page="1" per_page="25" pages="1" total="1">
    <invoice>
      <invoice_id>344</invoice_id>
      <notes>
      </notes>
      <lines>
      </lines>
    </invoice>
  </invoices>
</response>
"""
        page = decode(payload).page_of("invoices", "invoice", Invoice)
        assert page.items[0].invoice_id == "344"
        assert page.items[0].notes is None
        assert page.items[0].lines == []

    def test_decimals_use_fixed_point(self):
        """Test that decimals are never sent in exponent notation."""
        invoice = Invoice(lines=[Line(name="Hours", unit_cost=Decimal("1E+2"))])
        root = ET.fromstring(
            encode(Request(method=RequestMethod.INVOICE_CREATE, item=invoice))
        )
        assert root.findtext("invoice/lines/line/unit_cost") == "100"
