"""Unit tests for record and page mapping.

Mapping must be pure: no request is issued until a link function is awaited.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError

from digitalbits.frontier.core import MalformedResponseError
from digitalbits.frontier.models import Page, Record
from digitalbits.frontier.runtime.mapper import (
    LinkFunction,
    map_page,
    map_record,
    map_response,
)

BASE = "https://frontier.testnet.digitalbits.io"


def make_client(*responses):
    client = MagicMock()
    client.get = AsyncMock(side_effect=list(responses))
    return client


def payment(op_id: str, **extra) -> dict:
    body = {
        "id": op_id,
        "paging_token": op_id,
        "type": "payment",
        "amount": "10.0000000",
        "_links": {
            "self": {"href": f"{BASE}/operations/{op_id}"},
            "transaction": {"href": f"{BASE}/transactions/abc"},
            "effects": {"href": f"{BASE}/operations/{op_id}/effects{{?cursor,limit,order}}", "templated": True},
        },
    }
    body.update(extra)
    return body


def envelope(records: list[dict], next_href: str | None = None, prev_href: str | None = None) -> dict:
    links = {"self": {"href": f"{BASE}/operations"}}
    if next_href:
        links["next"] = {"href": next_href}
    if prev_href:
        links["prev"] = {"href": prev_href}
    return {"_links": links, "_embedded": {"records": records}}


class TestMapRecord:
    """Test single resource mapping."""

    def test_data_fields_and_links(self):
        client = make_client()
        record = map_record(payment("100"), client)

        assert isinstance(record, Record)
        assert record.id == "100"
        assert record["amount"] == "10.0000000"
        assert record.cursor == "100"
        assert set(record.links) == {"self", "transaction", "effects"}
        assert "_links" not in record.fields
        assert record.raw["_links"]["self"]["href"].endswith("/operations/100")
        client.get.assert_not_called()

    def test_mapping_is_idempotent(self):
        client = make_client()
        raw = payment("7")
        first = map_record(raw, client)
        second = map_record(raw, client)

        assert first.fields == second.fields
        assert first == second
        assert first.links["self"] is not second.links["self"]
        client.get.assert_not_called()

    def test_record_is_immutable(self):
        record = map_record(payment("1"), make_client())
        with pytest.raises(ValidationError):
            record.amount = "0"

    def test_account_data_field_readable_as_attribute(self):
        raw = {
            "id": "GABC",
            "account_id": "GABC",
            "paging_token": "GABC",
            "data": {"config.memo_required": "MQ=="},
        }
        account = map_record(raw, make_client())

        assert account.data == {"config.memo_required": "MQ=="}
        assert account["data"] == account.data
        assert account.fields["data"] == account.data
        assert account.fields["account_id"] == "GABC"

    def test_record_without_links(self):
        record = map_record({"id": "x"}, make_client())
        assert dict(record.links) == {}
        assert record.cursor is None

    @pytest.mark.asyncio
    async def test_link_function_fetches_and_maps(self):
        tx = {"id": "abc", "hash": "abc", "_links": {"self": {"href": f"{BASE}/transactions/abc"}}}
        client = make_client(tx)
        record = map_record(payment("5"), client)

        linked = await record.links["transaction"]()

        client.get.assert_awaited_once_with(f"{BASE}/transactions/abc")
        assert isinstance(linked, Record)
        assert linked.hash == "abc"

    @pytest.mark.asyncio
    async def test_templated_link_expansion(self):
        client = make_client(envelope([]))
        record = map_record(payment("5"), client)

        await record.links["effects"](limit=2, order="desc")

        client.get.assert_awaited_once_with(f"{BASE}/operations/5/effects?limit=2&order=desc")

    @pytest.mark.asyncio
    async def test_templated_link_without_values(self):
        client = make_client(envelope([]))
        record = map_record(payment("5"), client)

        result = await record.links["effects"]()

        client.get.assert_awaited_once_with(f"{BASE}/operations/5/effects")
        assert isinstance(result, Page)

    @pytest.mark.asyncio
    async def test_joined_transaction_resolves_locally(self):
        client = make_client()
        raw = payment("9", transaction={"id": "abc", "hash": "abc", "successful": True})
        record = map_record(raw, client)

        tx = await record.links["transaction"]()

        assert tx.hash == "abc"
        assert tx.successful is True
        client.get.assert_not_called()

    def test_non_object_rejected(self):
        with pytest.raises(MalformedResponseError):
            map_record(["not", "a", "record"], make_client())

    def test_invalid_links_rejected(self):
        with pytest.raises(MalformedResponseError):
            map_record({"id": "1", "_links": {"self": {"templated": True}}}, make_client())
        with pytest.raises(MalformedResponseError):
            map_record({"id": "1", "_links": []}, make_client())


class TestMapPage:
    """Test collection mapping and navigation."""

    def test_page_records(self):
        page = map_page(envelope([payment("1"), payment("2")]), make_client())
        assert [r.id for r in page] == ["1", "2"]
        assert len(page) == 2
        assert page[1].cursor == "2"
        assert not page.has_next

    def test_missing_records_rejected(self):
        with pytest.raises(MalformedResponseError, match="_embedded.records"):
            map_page({"_links": {}, "_embedded": {}}, make_client())

    def test_missing_links_rejected(self):
        with pytest.raises(MalformedResponseError, match="_links"):
            map_page({"_embedded": {"records": []}}, make_client())

    @pytest.mark.asyncio
    async def test_next_uses_exact_server_href(self):
        next_href = f"{BASE}/operations?cursor=100&limit=1&order=asc"
        client = make_client(envelope([payment("101")]))
        page = map_page(envelope([payment("100")], next_href=next_href), client)

        following = await page.next()

        client.get.assert_awaited_once_with(next_href)
        assert [r.id for r in following] == ["101"]

    @pytest.mark.asyncio
    async def test_next_then_prev_round_trip(self):
        first_raw = envelope(
            [payment("1"), payment("2")],
            next_href=f"{BASE}/operations?cursor=2&order=asc",
            prev_href=f"{BASE}/operations?cursor=1&order=desc",
        )
        second_raw = envelope(
            [payment("3"), payment("4")],
            next_href=f"{BASE}/operations?cursor=4&order=asc",
            prev_href=f"{BASE}/operations?cursor=3&order=desc",
        )
        client = make_client(second_raw, first_raw)
        first = map_page(first_raw, client)

        second = await first.next()
        back = await second.prev()

        assert [r.fields for r in back] == [r.fields for r in first]
        assert client.get.await_args_list[1].args[0] == f"{BASE}/operations?cursor=3&order=desc"

    @pytest.mark.asyncio
    async def test_next_without_link_returns_none(self):
        client = make_client()
        page = map_page(envelope([payment("1")]), client)
        assert await page.next() is None
        assert await page.prev() is None
        client.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_next_resolving_to_record_is_malformed(self):
        client = make_client(payment("1"))
        page = map_page(envelope([], next_href=f"{BASE}/operations?cursor=1"), client)
        with pytest.raises(MalformedResponseError):
            await page.next()


class TestMapResponse:
    """Test response dispatch."""

    def test_envelope_becomes_page(self):
        assert isinstance(map_response(envelope([]), make_client()), Page)

    def test_object_becomes_record(self):
        assert isinstance(map_response(payment("1"), make_client()), Record)

    def test_link_function_captures_only_link_and_client(self):
        client = make_client()
        record = map_record(payment("1"), client)
        fn = record.links["self"]
        assert isinstance(fn, LinkFunction)
        assert fn.client is client
        assert fn.href == f"{BASE}/operations/1"
