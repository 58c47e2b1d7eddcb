# storefront/services/advisor.py

"""AI beauty advisor: transcript management over a streaming chat service.

:meth:`AdvisorSession.send` is an async generator yielding the
*cumulative* reply text.  Each value replaces the streaming placeholder
turn in the transcript (last write wins).  Only one send may be in flight;
closing the generator or cancelling the task consuming it stops the stream
and leaves whatever text had arrived.
"""

import itertools
import logging
from collections.abc import AsyncIterator
from typing import Any, Protocol

from google import genai
from google.genai import types

from storefront.config.settings import Settings
from storefront.models.chat_turn import ChatTurn
from storefront.models.product import Product, format_price

logger = logging.getLogger("storefront.advisor")

GREETING = (
    "Hello, beautiful! I'm Rumi, your personal beauty advisor. Whether "
    "you're looking for the perfect shade or skincare tips, I'm here to "
    "help. What can I do for you today?"
)

APOLOGY = (
    "I'm having a little trouble connecting to my beauty knowledge right "
    "now. Please try again in a moment!"
)


def build_system_instruction(products: list[Product]) -> str:
    """Advisor persona plus the live catalog, so advice stays on-inventory."""
    currency = Settings.CURRENCY_LABEL
    lines: list[str] = []
    for p in products:
        price = f"{currency} {format_price(p.price)}"
        if p.original_price:
            price += (
                f" - discounted from {currency} "
                f"{format_price(p.original_price)}"
            )
        lines.append(
            f"- {p.name} ({price}) [{p.category} - {p.subcategory}]: "
            f"{p.description}"
        )
    catalog = "\n".join(lines)

    return (
        f'You are Rumi, a professional makeup artist and the AI Beauty '
        f'Advisor for "{Settings.BRAND_NAME}".\n'
        "Your tone is warm, professional, sophisticated, and encouraging.\n"
        "You have access to the following product catalog:\n"
        f"{catalog}\n\n"
        "Rules:\n"
        f"1. Always recommend products from the {Settings.BRAND_NAME} "
        "catalog when relevant.\n"
        '2. If a user asks about makeup tips (e.g., "how to apply '
        'eyeliner"), give expert advice.\n'
        "3. Keep responses concise (under 3 paragraphs) unless asked for "
        "a detailed tutorial.\n"
        "4. If asked about shipping or returns, professionally state that "
        "you are a demo advisor and suggest checking the footer links.\n"
        '5. Emphasize "enhancing natural beauty" rather than "fixing '
        'flaws".\n'
    )


class AdvisorClient(Protocol):
    """A remote chat service that streams cumulative reply text."""

    def stream_reply(
        self,
        system_instruction: str,
        history: list[ChatTurn],
        message: str,
    ) -> AsyncIterator[str]: ...


class GeminiAdvisorClient:
    """Gemini chat through the ``google-genai`` async client."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        client: Any = None,
    ) -> None:
        self.api_key = api_key or Settings.ADVISOR_API_KEY
        self.model = model or Settings.ADVISOR_MODEL
        self.temperature = (
            temperature
            if temperature is not None
            else Settings.ADVISOR_TEMPERATURE
        )
        self._client = client

    @property
    def client(self) -> Any:
        # Created on first use so a missing key surfaces as a send failure
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def stream_reply(
        self,
        system_instruction: str,
        history: list[ChatTurn],
        message: str,
    ) -> AsyncIterator[str]:
        contents = [
            types.Content(
                role="model" if turn.role == "assistant" else "user",
                parts=[types.Part(text=turn.text)],
            )
            for turn in history
        ]
        chat = self.client.aio.chats.create(
            model=self.model,
            config=types.GenerateContentConfig(
                system_instruction=system_instruction,
                temperature=self.temperature,
            ),
            history=contents,
        )

        full_text = ""
        async for chunk in await chat.send_message_stream(message):
            if chunk.text:
                full_text += chunk.text
                yield full_text


class AdvisorBusyError(RuntimeError):
    """A reply is already streaming."""


class AdvisorSession:
    """Ordered advisor transcript, seeded with the greeting."""

    def __init__(self, client: AdvisorClient | None = None) -> None:
        self.client: AdvisorClient = client or GeminiAdvisorClient()
        self.transcript: list[ChatTurn] = [
            ChatTurn(id="welcome", role="assistant", text=GREETING)
        ]
        self._busy = False
        self._ids = itertools.count(1)

    @property
    def busy(self) -> bool:
        return self._busy

    def _turn(self, role: str, text: str, streaming: bool = False) -> ChatTurn:
        turn = ChatTurn(
            id=f"{role}-{next(self._ids)}",
            role=role,
            text=text,
            streaming=streaming,
        )
        self.transcript.append(turn)
        return turn

    async def send(
        self, text: str, products: list[Product],
    ) -> AsyncIterator[str]:
        """Send a user message and yield the reply as it accumulates.

        Blank messages yield nothing.  Raises :class:`AdvisorBusyError`
        (on first iteration) if another reply is still streaming.
        """
        message = text.strip()
        if not message:
            return
        if self._busy:
            raise AdvisorBusyError("A reply is already in progress")

        self._busy = True
        history = [
            ChatTurn(t.id, t.role, t.text) for t in self.transcript if t.text
        ]
        self._turn("user", message)
        placeholder = self._turn("assistant", "", streaming=True)
        instruction = build_system_instruction(products)

        stream = self.client.stream_reply(instruction, history, message)
        finished = False
        try:
            try:
                async for cumulative in stream:
                    placeholder.text = cumulative
                    yield cumulative
                finished = True
            except Exception as exc:
                logger.error(
                    "Error generating beauty advice: %s", exc, exc_info=True
                )
                placeholder.text = APOLOGY
                finished = True
                yield APOLOGY
        finally:
            placeholder.streaming = False
            self._busy = False
            if not finished:
                logger.info(
                    "Advisor stream cancelled after %d chars",
                    len(placeholder.text),
                )
            if not placeholder.text:
                self.transcript.remove(placeholder)
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()
