"""Request orchestrator: memory, language, prompt, generation, sanitizing."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import InvalidRequestError, UpstreamError
from .generation import TextGenerator
from .language import classify
from .memory import ConversationTurn, MemoryStore, Role
from .prompt import assemble
from .sanitizer import sanitize

if TYPE_CHECKING:
    from .logging import JSONLLogger

MISSING_FIELDS_MESSAGE = "Missing prompt or userId."
METHOD_NOT_ALLOWED_MESSAGE = "Method not allowed"
SERVER_ERROR_MESSAGE = "Server error."


logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    """Body of a chat request."""

    model_config = ConfigDict(populate_by_name=True)

    prompt: str | None = None
    project: str | None = None
    user_id: str | None = Field(default=None, alias="userId")


@dataclass
class HandlerResponse:
    """Status code and JSON body to send back. A None body means empty."""

    status_code: int
    body: dict[str, Any] | None = None


def parse_request(body: Any) -> ChatRequest:
    """Validate a decoded JSON body.

    Raises:
        InvalidRequestError: If the body is not an object or prompt/userId
            are missing or empty.
    """
    if not isinstance(body, dict):
        raise InvalidRequestError(MISSING_FIELDS_MESSAGE)
    try:
        request = ChatRequest.model_validate(body)
    except ValidationError as e:
        raise InvalidRequestError(MISSING_FIELDS_MESSAGE) from e
    if not request.prompt or not request.user_id:
        raise InvalidRequestError(MISSING_FIELDS_MESSAGE)
    return request


class ChatHandler:
    """Handles one chat request end to end.

    With ``serialize_users`` enabled, requests for the same user run one at
    a time; otherwise concurrent requests race and the last save wins.
    """

    def __init__(
        self,
        store: MemoryStore,
        generator: TextGenerator,
        *,
        serialize_users: bool = True,
        events: JSONLLogger | None = None,
    ) -> None:
        self.store = store
        self.generator = generator
        self.serialize_users = serialize_users
        self.events = events
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_holders: dict[str, int] = {}

    def get_lock(self, user_id: str) -> asyncio.Lock:
        """Get the lock for a user."""
        if user_id not in self._locks:
            self._locks[user_id] = asyncio.Lock()
        return self._locks[user_id]

    @asynccontextmanager
    async def user_lock(self, user_id: str) -> AsyncIterator[None]:
        """Hold the lock for a user; the lock is dropped once nobody holds or awaits it."""
        lock = self.get_lock(user_id)
        self._lock_holders[user_id] = self._lock_holders.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_holders[user_id] -= 1
            if self._lock_holders[user_id] == 0:
                del self._lock_holders[user_id]
                self._locks.pop(user_id, None)

    async def handle(self, method: str, body: Any) -> HandlerResponse:
        """Handle a request given its HTTP method and decoded JSON body."""
        method = method.upper()
        if method == "OPTIONS":
            return HandlerResponse(200)
        if method != "POST":
            return HandlerResponse(405, {"error": METHOD_NOT_ALLOWED_MESSAGE})

        try:
            request = parse_request(body)
        except InvalidRequestError as e:
            return HandlerResponse(400, {"error": str(e)})

        user_id = request.user_id
        assert user_id is not None
        started = time.monotonic()

        try:
            if self.serialize_users:
                async with self.user_lock(user_id):
                    reply = await self.process(request)
            else:
                reply = await self.process(request)
        except UpstreamError as e:
            if self.events:
                self.events.log_upstream_error(user_id, e.status_code, e.payload)
            return HandlerResponse(e.status_code, {"error": e.payload})
        except Exception as e:
            logger.exception("Backend error for user %s", user_id)
            if self.events:
                self.events.log_server_error(user_id, repr(e))
            return HandlerResponse(500, {"error": SERVER_ERROR_MESSAGE})

        if self.events:
            duration_ms = (time.monotonic() - started) * 1000
            self.events.log_reply(user_id, duration_ms, len(reply))
        return HandlerResponse(200, {"reply": reply})

    async def process(self, request: ChatRequest) -> str:
        """Run the pipeline for a validated request and return the reply.

        Memory is only written after a reply was generated, so a failed
        generation leaves the stored record untouched.
        """
        user_id = request.user_id
        prompt = request.prompt
        assert user_id is not None and prompt is not None

        memory = self.store.load(user_id)
        if request.project:
            memory.last_project = request.project
        memory.last_task = prompt
        memory = self.store.append(memory, ConversationTurn(role=Role.USER, content=prompt))

        language = classify(prompt)
        if self.events:
            self.events.log_request(user_id, language.value, len(prompt))
        prompt_text = assemble(memory.conversation, language)

        generated = await self.generator.generate(prompt_text)

        reply = sanitize(generated)
        memory = self.store.append(memory, ConversationTurn(role=Role.ASSISTANT, content=reply))
        self.store.save(user_id, memory)
        return reply
