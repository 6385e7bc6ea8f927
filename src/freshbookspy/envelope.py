"""XML request/response envelope codec for the FreshBooks API.

Requests look like::

    <?xml version='1.0' encoding='utf-8'?>
    <request method="invoice.list">
      <page>2</page>
      <per_page>25</per_page>
      <client_id>13</client_id>
    </request>

and responses like::

    <response status="ok">
      <invoices page="2" per_page="25" pages="4" total="93">
        <invoice>...</invoice>
      </invoices>
    </response>

A rejected request comes back as ``<response status="fail">`` with
``<error>``, and optionally ``<code>`` and ``<field>``, children.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, Field, ValidationError

from freshbookspy.exceptions import FreshBooksAPIError, FreshBooksDecodeError
from freshbookspy.models import Page

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class RequestMethod(str, Enum):
    """API methods used by the client."""

    INVOICE_LIST = "invoice.list"
    INVOICE_GET = "invoice.get"
    INVOICE_CREATE = "invoice.create"
    PAYMENT_LIST = "payment.list"
    PAYMENT_GET = "payment.get"
    PAYMENT_CREATE = "payment.create"
    EXPENSE_LIST = "expense.list"
    EXPENSE_GET = "expense.get"
    EXPENSE_CREATE = "expense.create"
    CLIENT_LIST = "client.list"
    CLIENT_GET = "client.get"
    CLIENT_CREATE = "client.create"
    CATEGORY_LIST = "category.list"
    CATEGORY_GET = "category.get"

    @property
    def kind(self) -> str:
        """Resource kind the method acts on, e.g. ``invoice``."""
        return self.value.split(".", 1)[0]


class Request(BaseModel):
    """Typed request descriptor.

    ``id`` is sent as ``<{kind}_id>`` and ``item`` as ``<{kind}>``, where
    ``kind`` comes from the method. Filters with a ``None`` value are dropped.
    """

    method: RequestMethod
    id: str | int | None = None
    item: Any = None
    page: int | None = None
    per_page: int | None = None
    filters: dict[str, Any] = Field(default_factory=dict)


def _format(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _singular(tag: str) -> str:
    return tag[:-1] if tag.endswith("s") else tag


def _append(parent: ET.Element, tag: str, value: Any) -> None:
    """Append ``value`` to ``parent`` as a ``tag`` element.

    Mappings become nested elements; lists become a ``tag`` container with one
    singular-named child per entry (``lines`` holds ``line`` elements).
    """
    if value is None:
        return
    if isinstance(value, BaseModel):
        value = value.model_dump(exclude_none=True)
    if isinstance(value, (list, tuple)):
        if not value:
            return
        container = ET.SubElement(parent, tag)
        for entry in value:
            _append(container, _singular(tag), entry)
        return

    element = ET.SubElement(parent, tag)
    if isinstance(value, Mapping):
        for key, child in value.items():
            _append(element, key, child)
    else:
        element.text = _format(value)


def encode(request: Request) -> bytes:
    """Serialize a request descriptor to a UTF-8 XML payload."""
    root = ET.Element("request", method=request.method.value)
    kind = request.method.kind

    _append(root, f"{kind}_id", request.id)
    _append(root, kind, request.item)
    _append(root, "page", request.page)
    _append(root, "per_page", request.per_page)
    for name, value in request.filters.items():
        _append(root, name, value)

    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def element_to_dict(element: ET.Element) -> Any:
    """Convert an element into plain Python values.

    Leaf elements become their stripped text (``None`` when blank). Other elements
    become a dict keyed by child tag; a tag seen more than once maps to a
    list.
    """
    if len(element) == 0:
        return (element.text or "").strip() or None

    result: dict[str, Any] = {}
    for child in element:
        value = element_to_dict(child)
        if child.tag in result:
            existing = result[child.tag]
            if isinstance(existing, list):
                existing.append(value)
            else:
                result[child.tag] = [existing, value]
        else:
            result[child.tag] = value
    return result


class Response:
    """Decoded response envelope."""

    def __init__(self, root: ET.Element) -> None:
        self.root = root
        self.status = root.get("status")

    @property
    def ok(self) -> bool:
        """True when the service accepted the request."""
        return self.status == "ok"

    @property
    def error(self) -> str | None:
        return self.root.findtext("error")

    @property
    def code(self) -> str | None:
        return self.root.findtext("code")

    @property
    def field(self) -> str | None:
        return self.root.findtext("field")

    def raise_for_status(self) -> Response:
        """Raise FreshBooksAPIError for a failure envelope.

        Returns:
            The response itself, for chaining

        Raises:
            FreshBooksAPIError: If the service reported a failure
        """
        if not self.ok:
            raise FreshBooksAPIError(
                self.error or f"Request failed with status {self.status!r}",
                code=self.code,
                field=self.field,
            )
        return self

    def _find(self, tag: str) -> ET.Element:
        element = self.root.find(tag)
        if element is None:
            raise FreshBooksDecodeError(f"Response has no <{tag}> element")
        return element

    def _validate(self, model: type[M], element: ET.Element) -> M:
        try:
            return model.model_validate(element_to_dict(element) or {})
        except ValidationError as e:
            raise FreshBooksDecodeError(
                f"Invalid <{element.tag}> element: {e}"
            ) from e

    def value(self, tag: str) -> str:
        """Return the text of a top-level element, e.g. ``invoice_id``."""
        text = self._find(tag).text
        if text is None:
            raise FreshBooksDecodeError(f"Response element <{tag}> is empty")
        return text.strip()

    def item(self, tag: str, model: type[M]) -> M:
        """Return a single top-level element as a model instance."""
        return self._validate(model, self._find(tag))

    def items(self, container: str, tag: str, model: type[M]) -> list[M]:
        """Return every ``tag`` child of ``container`` as model instances."""
        return [
            self._validate(model, element)
            for element in self._find(container).findall(tag)
        ]

    def page_of(self, container: str, tag: str, model: type[M]) -> Page[M]:
        """Return a listing container as a Page.

        Args:
            container: Container element name, e.g. ``invoices``
            tag: Item element name, e.g. ``invoice``
            model: Pydantic model class for the items

        Returns:
            Page carrying the items and the pagination attributes
        """
        element = self._find(container)
        try:
            page = int(element.attrib["page"])
            pages = int(element.attrib["pages"])
            per_page = element.get("per_page")
            total = element.get("total")
            return Page[model](  # type: ignore[valid-type]
                items=tuple(self.items(container, tag, model)),
                page=page,
                pages=pages,
                per_page=int(per_page) if per_page else None,
                total=int(total) if total else None,
            )
        except (KeyError, ValueError) as e:
            raise FreshBooksDecodeError(
                f"Invalid pagination attributes on <{container}>: {e}"
            ) from e


def decode(payload: bytes) -> Response:
    """Parse a response payload into a Response.

    Raises:
        FreshBooksDecodeError: If the payload is not a response envelope
    """
    try:
        root = ET.fromstring(payload)
    except ET.ParseError as e:
        raise FreshBooksDecodeError(f"Malformed response: {e}", payload) from e

    # Responses are namespaced; drop it so callers can use bare tag names
    for element in root.iter():
        if element.tag.startswith("{"):
            element.tag = element.tag.split("}", 1)[1]

    if root.tag != "response":
        raise FreshBooksDecodeError(
            f"Expected <response> root element, got <{root.tag}>", payload
        )

    response = Response(root)
    if not response.ok:
        logger.debug("Request failed: %s (code=%s)", response.error, response.code)
    return response
