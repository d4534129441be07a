import asyncio
import json
import unittest

import httpx

from translator.sse_client import (
    ABORTED_MESSAGE,
    FetchSSEError,
    RequestAborted,
    iter_sse_events,
    run_abortable,
)

URL = "https://api.example.com/v1/chat/completions"


def mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def collect(client, body=None):
    return [
        data
        async for data in iter_sse_events(
            URL, headers={"Authorization": "Bearer sk-test"}, body=body or {}, client=client
        )
    ]


class TestIterSSEEvents(unittest.IsolatedAsyncioTestCase):
    async def test_yields_event_data(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            stream = (
                ": keep-alive\n\n"
                'data: {"a": 1}\n\n'
                "event: ping\n\n"
                "data:line1\ndata: line2\n\n"
                "data: [DONE]\n\n"
            )
            return httpx.Response(
                200, content=stream.encode(), headers={"content-type": "text/event-stream"}
            )

        async with mock_client(handler) as client:
            events = await collect(client, body={"stream": True})

        self.assertEqual(events, ['{"a": 1}', "line1\nline2", "[DONE]"])
        self.assertEqual(seen["method"], "POST")
        self.assertEqual(seen["auth"], "Bearer sk-test")
        self.assertEqual(seen["body"], {"stream": True})

    async def test_trailing_event_without_blank_line(self):
        def handler(request):
            return httpx.Response(200, content=b"data: last")

        async with mock_client(handler) as client:
            self.assertEqual(await collect(client), ["last"])

    async def test_error_status_uses_api_error_message(self):
        def handler(request):
            return httpx.Response(
                401, json={"error": {"message": "Incorrect API key provided", "type": "invalid_request_error"}}
            )

        async with mock_client(handler) as client:
            with self.assertRaises(FetchSSEError) as ctx:
                await collect(client)
        self.assertEqual(ctx.exception.message, "Incorrect API key provided")
        self.assertEqual(ctx.exception.status_code, 401)

    async def test_error_status_with_plain_body(self):
        def handler(request):
            return httpx.Response(502, content=b"Bad Gateway")

        async with mock_client(handler) as client:
            with self.assertRaises(FetchSSEError) as ctx:
                await collect(client)
        self.assertEqual(ctx.exception.message, "Bad Gateway")

    async def test_redirect_is_an_error(self):
        def handler(request):
            return httpx.Response(302, headers={"Location": "https://elsewhere.example.com"})

        async with mock_client(handler) as client:
            with self.assertRaises(FetchSSEError) as ctx:
                await collect(client)
        self.assertEqual(ctx.exception.status_code, 302)
        self.assertEqual(ctx.exception.message, "HTTP 302")

    async def test_network_error_is_wrapped(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with mock_client(handler) as client:
            with self.assertRaises(FetchSSEError) as ctx:
                await collect(client)
        self.assertEqual(ctx.exception.message, "connection refused")
        self.assertIsNone(ctx.exception.status_code)


class TestRunAbortable(unittest.IsolatedAsyncioTestCase):
    async def test_without_signal(self):
        async def work():
            return 42

        self.assertEqual(await run_abortable(work(), None), 42)

    async def test_completes_before_abort(self):
        async def work():
            return "done"

        self.assertEqual(await run_abortable(work(), asyncio.Event()), "done")

    async def test_abort_cancels_work(self):
        signal = asyncio.Event()
        cancelled = asyncio.Event()

        async def work():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        asyncio.get_running_loop().call_later(0.01, signal.set)
        with self.assertRaises(RequestAborted) as ctx:
            await run_abortable(work(), signal)
        self.assertEqual(ctx.exception.message, ABORTED_MESSAGE)
        self.assertTrue(cancelled.is_set())

    async def test_already_aborted(self):
        signal = asyncio.Event()
        signal.set()

        async def work():
            return "never"

        with self.assertRaises(RequestAborted):
            await run_abortable(work(), signal)

    async def test_propagates_errors(self):
        async def work():
            raise FetchSSEError("boom", 500)

        with self.assertRaises(FetchSSEError):
            await run_abortable(work(), asyncio.Event())

    async def test_outer_cancel_is_not_reported_as_abort(self):
        signal = asyncio.Event()

        async def work():
            try:
                await asyncio.sleep(10)
            finally:
                # 模拟关闭连接耗时
                await asyncio.sleep(0.05)

        outer = asyncio.create_task(run_abortable(work(), signal))
        await asyncio.sleep(0.01)
        signal.set()
        await asyncio.sleep(0.01)
        outer.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await outer


if __name__ == "__main__":
    unittest.main()
