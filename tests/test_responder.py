"""Tests for the single-shot webhook responder."""

from __future__ import annotations

import asyncio
import json
import threading

import pytest

from camayak_contentapi.responder import WebhookResponder, serialize_error


class TestSucceed:
    @pytest.mark.asyncio
    async def test_payload_returned_as_json(self):
        responder = WebhookResponder()
        assert responder.succeed({"published_id": "42", "published_url": "https://x/42"})

        response = await responder.wait()
        assert response.status_code == 200
        assert json.loads(response.body) == {
            "published_id": "42",
            "published_url": "https://x/42",
        }

    @pytest.mark.asyncio
    async def test_no_payload_empty_body(self):
        responder = WebhookResponder()
        responder.succeed()
        response = await responder.wait()
        assert response.status_code == 200
        assert response.body == b""


class TestFail:
    @pytest.mark.asyncio
    async def test_status_500(self):
        responder = WebhookResponder()
        responder.fail("Unknown event type")
        response = await responder.wait()
        assert response.status_code == 500
        assert json.loads(response.body) == {"error": "Unknown event type"}

    @pytest.mark.asyncio
    async def test_status_code_error_serialized(self):
        responder = WebhookResponder()
        responder.fail(404)
        response = await responder.wait()
        assert json.loads(response.body) == {"error": 404}


class TestSingleResolution:
    @pytest.mark.asyncio
    async def test_second_call_ignored(self):
        responder = WebhookResponder("evt-1")
        assert responder.succeed({"published_id": "1"}) is True
        assert responder.fail("late") is False
        assert responder.succeed({"published_id": "2"}) is False

        response = await responder.wait()
        assert response.status_code == 200
        assert json.loads(response.body) == {"published_id": "1"}

    @pytest.mark.asyncio
    async def test_second_call_logged(self, caplog):
        responder = WebhookResponder("evt-2")
        responder.fail("first")
        with caplog.at_level("WARNING"):
            responder.succeed()
        assert "already resolved" in caplog.text

    @pytest.mark.asyncio
    async def test_resolved_flag(self):
        responder = WebhookResponder()
        assert responder.resolved is False
        responder.succeed()
        assert responder.resolved is True

    @pytest.mark.asyncio
    async def test_abandoned_waiter_makes_calls_no_ops(self):
        responder = WebhookResponder("evt-3")
        waiter = asyncio.ensure_future(responder.wait())
        await asyncio.sleep(0)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        assert responder.abandoned is True
        assert responder.succeed() is False
        assert responder.fail("late") is False

    @pytest.mark.asyncio
    async def test_resolution_after_wait_started(self):
        responder = WebhookResponder()
        waiter = asyncio.ensure_future(responder.wait())
        await asyncio.sleep(0)
        responder.succeed({"published_id": "7"})
        response = await waiter
        assert json.loads(response.body) == {"published_id": "7"}


class TestThreadedResolution:
    @pytest.mark.asyncio
    async def test_worker_thread_wakes_waiter(self):
        responder = WebhookResponder("evt-4")
        outcomes = []

        def _work():
            outcomes.append(responder.succeed({"published_id": "42"}))

        worker = threading.Thread(target=_work)
        worker.start()
        response = await asyncio.wait_for(responder.wait(), timeout=5)
        worker.join(timeout=5)

        assert response.status_code == 200
        assert json.loads(response.body) == {"published_id": "42"}
        assert outcomes == [True]

    @pytest.mark.asyncio
    async def test_worker_thread_second_call_ignored(self):
        responder = WebhookResponder("evt-5")
        responder.fail("first")
        outcomes = []

        worker = threading.Thread(target=lambda: outcomes.append(responder.succeed()))
        worker.start()
        while worker.is_alive():
            await asyncio.sleep(0.01)

        assert outcomes == [False]
        assert (await responder.wait()).status_code == 500


class TestSerializeError:
    def test_mapping_passthrough(self):
        assert serialize_error({"message": "nope", "code": 3}) == {"message": "nope", "code": 3}

    def test_exception_message(self):
        assert serialize_error(RuntimeError("boom")) == {"error": "boom"}

    def test_exception_without_message_uses_type(self):
        assert serialize_error(TimeoutError()) == {"error": "TimeoutError"}

    def test_other_objects_stringified(self):
        class Reason:
            def __str__(self):
                return "quota exceeded"

        assert serialize_error(Reason()) == {"error": "quota exceeded"}
