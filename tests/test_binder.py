from __future__ import annotations

import asyncio

import pytest

from twiml_server.errors import MissingRequiredFieldsError
from twiml_server.routing.binder import (
    DEFAULT_REQUIRED_FIELDS,
    call_handler,
    check_required_fields,
    missing_fields,
)


def test_missing_fields_lists_absent_keys_in_order():
    form = {"ApiVersion": "2010-04-01", "From": "+1"}
    assert missing_fields(form, DEFAULT_REQUIRED_FIELDS) == ["To", "AccountSid"]


def test_empty_values_count_as_present():
    form = {name: "" for name in DEFAULT_REQUIRED_FIELDS}
    check_required_fields(form, DEFAULT_REQUIRED_FIELDS)


def test_check_required_fields_raises_with_missing_names():
    with pytest.raises(MissingRequiredFieldsError) as excinfo:
        check_required_fields({}, ("To",))
    assert excinfo.value.missing == ("To",)
    assert excinfo.value.status_code == 400
    assert excinfo.value.detail == "Your request did not provide all of the required body fields."


def test_call_handler_runs_sync_and_async_handlers():
    calls: list[str] = []

    def sync_handler(value):
        calls.append(f"sync:{value}")

    async def async_handler(value):
        await asyncio.sleep(0)
        calls.append(f"async:{value}")

    class AsyncCallable:
        async def __call__(self, value):
            calls.append(f"callable:{value}")

    async def run():
        await call_handler(sync_handler, 1)
        await call_handler(async_handler, 2)
        await call_handler(AsyncCallable(), 3)

    asyncio.run(run())

    assert calls == ["sync:1", "async:2", "callable:3"]


def test_call_handler_propagates_errors():
    async def failing(value):
        raise RuntimeError(value)

    with pytest.raises(RuntimeError, match="nope"):
        asyncio.run(call_handler(failing, "nope"))
