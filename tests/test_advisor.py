# tests/test_advisor.py

"""Tests for the AI beauty advisor session and Gemini client."""

import asyncio
import unittest
from collections.abc import AsyncIterator
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from storefront.models.chat_turn import ChatTurn
from storefront.services.advisor import (
    APOLOGY,
    GREETING,
    AdvisorBusyError,
    AdvisorSession,
    GeminiAdvisorClient,
    build_system_instruction,
)
from storefront.services.catalog_store import seed_catalog


class FakeAdvisorClient:
    """Streams canned cumulative chunks and records what it was sent."""

    def __init__(self, chunks: list[str], fail_after: int | None = None) -> None:
        self.chunks = chunks
        self.fail_after = fail_after
        self.calls: list[tuple[str, list[ChatTurn], str]] = []

    async def stream_reply(
        self, system_instruction: str, history: list[ChatTurn], message: str,
    ) -> AsyncIterator[str]:
        self.calls.append((system_instruction, history, message))
        for idx, chunk in enumerate(self.chunks):
            if self.fail_after is not None and idx >= self.fail_after:
                raise ConnectionError("stream dropped")
            yield chunk


class StalledAdvisorClient:
    """Holds the first reply until released; later replies stream at once."""

    def __init__(self) -> None:
        self.release = asyncio.Event()
        self.calls: list[tuple[str, list[ChatTurn], str]] = []

    async def stream_reply(
        self, system_instruction: str, history: list[ChatTurn], message: str,
    ) -> AsyncIterator[str]:
        self.calls.append((system_instruction, history, message))
        if len(self.calls) == 1:
            await self.release.wait()
        yield f"Re: {message}"


class TestSystemInstruction(unittest.TestCase):
    """Catalog-grounded persona prompt."""

    def test_lists_every_product_with_prices(self) -> None:
        """Each product appears with its sale price and category path."""
        products = seed_catalog()
        text = build_system_instruction(products)
        for p in products:
            self.assertIn(p.name, text)
        self.assertIn(
            "Velvet Rose Matte Lipstick (Rs. 3,950 - discounted from Rs. 4,500)",
            text,
        )
        self.assertIn("Midnight Drama Mascara (Rs. 4,500) [Eyes - Mascara]", text)
        self.assertIn("Rumi Makeup", text)


class TestAdvisorSession(unittest.IsolatedAsyncioTestCase):
    """Transcript handling around a streamed reply."""

    async def test_starts_with_greeting(self) -> None:
        """A new session opens with the welcome turn."""
        session = AdvisorSession(FakeAdvisorClient([]))
        self.assertEqual(len(session.transcript), 1)
        self.assertEqual(session.transcript[0].id, "welcome")
        self.assertEqual(session.transcript[0].text, GREETING)

    async def test_streams_cumulative_text(self) -> None:
        """Chunks are yielded as they arrive and the final one is kept."""
        client = FakeAdvisorClient(["Try", "Try our serum."])
        session = AdvisorSession(client)

        seen = [t async for t in session.send("  dry skin?  ", seed_catalog())]

        self.assertEqual(seen, ["Try", "Try our serum."])
        roles = [t.role for t in session.transcript]
        self.assertEqual(roles, ["assistant", "user", "assistant"])
        self.assertEqual(session.transcript[1].text, "dry skin?")
        reply = session.transcript[-1]
        self.assertEqual(reply.text, "Try our serum.")
        self.assertFalse(reply.streaming)
        self.assertFalse(session.busy)

    async def test_history_excludes_new_turns(self) -> None:
        """The message being sent is not duplicated into the history."""
        client = FakeAdvisorClient(["ok"])
        session = AdvisorSession(client)
        async for _ in session.send("hi", []):
            pass
        _, history, message = client.calls[0]
        self.assertEqual(message, "hi")
        self.assertEqual([t.id for t in history], ["welcome"])

    async def test_blank_message_does_nothing(self) -> None:
        """Whitespace-only messages never reach the client."""
        client = FakeAdvisorClient(["x"])
        session = AdvisorSession(client)
        seen = [t async for t in session.send("   ", [])]
        self.assertEqual(seen, [])
        self.assertEqual(len(session.transcript), 1)
        self.assertEqual(client.calls, [])

    async def test_failure_becomes_apology(self) -> None:
        """A dropped stream is replaced by the apology text."""
        client = FakeAdvisorClient(["partial", "more"], fail_after=1)
        session = AdvisorSession(client)
        seen = [t async for t in session.send("hi", [])]

        self.assertEqual(seen, ["partial", APOLOGY])
        self.assertEqual(session.transcript[-1].text, APOLOGY)
        self.assertFalse(session.transcript[-1].streaming)
        self.assertFalse(session.busy)

    async def test_second_send_while_busy(self) -> None:
        """Only one reply streams at a time; closing the first frees the session."""
        session = AdvisorSession(FakeAdvisorClient(["a", "ab", "abc"]))
        first = session.send("one", [])
        self.assertEqual(await first.__anext__(), "a")
        self.assertTrue(session.busy)

        with self.assertRaises(AdvisorBusyError):
            await session.send("two", []).__anext__()

        await first.aclose()
        self.assertFalse(session.busy)
        self.assertEqual(session.transcript[-1].text, "a")
        self.assertFalse(session.transcript[-1].streaming)
        # Rejected send left no turns behind
        self.assertEqual(len(session.transcript), 3)

    async def test_cancel_before_first_chunk(self) -> None:
        """A reply cancelled before any text leaves no empty assistant turn."""
        client = StalledAdvisorClient()
        session = AdvisorSession(client)

        task = asyncio.create_task(session.send("hi", []).__anext__())
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        self.assertTrue(session.busy)
        task.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await task

        self.assertFalse(session.busy)
        self.assertEqual(
            [(t.role, t.text) for t in session.transcript],
            [("assistant", GREETING), ("user", "hi")],
        )

        seen = [t async for t in session.send("hi again", [])]

        self.assertEqual(seen, ["Re: hi again"])
        _, history, _ = client.calls[1]
        self.assertTrue(all(t.text for t in history))
        self.assertEqual([t.role for t in history], ["assistant", "user"])


class TestGeminiAdvisorClient(unittest.IsolatedAsyncioTestCase):
    """Request shaping against the google-genai chat API."""

    async def test_stream_reply(self) -> None:
        """History roles map to Gemini roles and chunks accumulate."""
        async def chunks() -> AsyncIterator[SimpleNamespace]:
            for text in ("Hello", None, " there"):
                yield SimpleNamespace(text=text)

        chat = MagicMock()
        chat.send_message_stream = AsyncMock(return_value=chunks())
        genai_client = MagicMock()
        genai_client.aio.chats.create.return_value = chat

        client = GeminiAdvisorClient(
            api_key="k", model="test-model", temperature=0.2,
            client=genai_client,
        )
        history = [
            ChatTurn("welcome", "assistant", GREETING),
            ChatTurn("user-1", "user", "hi"),
        ]
        out = [t async for t in client.stream_reply("SYS", history, "lipstick?")]

        self.assertEqual(out, ["Hello", "Hello there"])
        chat.send_message_stream.assert_awaited_once_with("lipstick?")
        kwargs = genai_client.aio.chats.create.call_args.kwargs
        self.assertEqual(kwargs["model"], "test-model")
        self.assertEqual(kwargs["config"].system_instruction, "SYS")
        self.assertEqual(kwargs["config"].temperature, 0.2)
        self.assertEqual(
            [c.role for c in kwargs["history"]], ["model", "user"]
        )
        self.assertEqual(kwargs["history"][1].parts[0].text, "hi")
