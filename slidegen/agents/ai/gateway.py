"""
Model gateway used by every pipeline stage.

Wraps the synchronous provider clients with a timeout, cooperative
cancellation, client-side rate limiting and retry. Two structured modes:

- instructor: the client library validates against the pydantic schema
- json: free text is requested and the JSON payload is parsed locally
"""

import asyncio
import json
import time
from functools import partial
from typing import Any, Callable, Dict, Optional, Type

from pydantic import ValidationError

from slidegen.agents.ai.clients import get_client, invoke
from slidegen.agents.ai.rate_limiter import RateLimiter, RetryPolicy, retry_async
from slidegen.agents.core.interfaces import IModelGateway, SchemaT
from slidegen.agents.exceptions import GenerationCancelledError, ModelError, ModelErrorReason
from slidegen.config.logging_config import get_logger
from slidegen.config.settings import Config, ModelConfig, get_config
from slidegen.utils.json_extract import parse_json_reply

logger = get_logger(__name__)

JSON_INSTRUCTION = "\n\nRespond with valid JSON only, no additional text."


def parse_structured(text: str, schema: Type[SchemaT], model: str = None) -> SchemaT:
    """Validate a free-text reply against schema, raising malformed-output on failure."""
    try:
        data = parse_json_reply(text)
        # A bare list answers a single-field wrapper schema such as ImageQueryList
        if isinstance(data, list) and len(schema.model_fields) == 1:
            data = {next(iter(schema.model_fields)): data}
        return schema.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise ModelError(
            ModelErrorReason.MALFORMED_OUTPUT,
            f"Reply is not a valid {schema.__name__}",
            cause=e,
            context={"model": model, "reply_preview": (text or "")[:200]},
        ) from e


class ModelGateway(IModelGateway):
    """IModelGateway backed by the provider registry in clients.py."""

    def __init__(
        self,
        config: Optional[ModelConfig] = None,
        retry_policy: Optional[RetryPolicy] = None,
        rate_limiter: Optional[RateLimiter] = None,
        client: Any = None,
        raw_client: Any = None
    ):
        self.config = config or get_config().model
        self.retry_policy = retry_policy or RetryPolicy.from_config(get_config().retry)
        self.rate_limiter = rate_limiter or RateLimiter.from_config(get_config().rate_limits)
        self.model = self.config.model
        self._client = client
        self._raw_client = raw_client
        self.request_count = 0
        self.last_request_time: Optional[float] = None
        logger.info(f"[GATEWAY] Initialized model={self.model} mode={self.config.structured_mode}")

    @classmethod
    def from_config(cls, config: Config) -> "ModelGateway":
        return cls(
            config=config.model,
            retry_policy=RetryPolicy.from_config(config.retry),
            rate_limiter=RateLimiter.from_config(config.rate_limits),
        )

    @property
    def client(self):
        if self._client is None:
            self._client, self.model = get_client(self.config.model, api_key=self.config.api_key)
        return self._client

    @property
    def raw_client(self):
        if self._raw_client is None:
            self._raw_client, self.model = get_client(
                self.config.model, api_key=self.config.api_key, wrap_with_instructor=False
            )
        return self._raw_client

    async def generate_text(
        self,
        prompt: str,
        max_tokens: Optional[int] = None,
        *,
        cancel_event: Optional[asyncio.Event] = None
    ) -> str:
        return await self._text(prompt, max_tokens, self.config.temperature, cancel_event)

    async def generate_structured(
        self,
        prompt: str,
        schema: Type[SchemaT],
        *,
        temperature: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None
    ) -> SchemaT:
        temperature = self.config.temperature if temperature is None else temperature

        if self.config.structured_mode == "json":
            async def attempt():
                text = await self._execute(
                    self._invoke_fn(self.raw_client, prompt + JSON_INSTRUCTION, None, None, temperature),
                    cancel_event,
                )
                return parse_structured(text, schema, self.model)
        else:
            async def attempt():
                return await self._execute(
                    self._invoke_fn(self.client, prompt, schema, None, temperature),
                    cancel_event,
                )

        return await retry_async(
            attempt, self.retry_policy, cancel_event=cancel_event, description=f"{schema.__name__} request"
        )

    async def _text(self, prompt, max_tokens, temperature, cancel_event) -> str:
        async def attempt():
            return await self._execute(
                self._invoke_fn(self.raw_client, prompt, None, max_tokens, temperature),
                cancel_event,
            )

        return await retry_async(attempt, self.retry_policy, cancel_event=cancel_event, description="text request")

    def _invoke_fn(self, client, prompt: str, schema, max_tokens: Optional[int], temperature: float) -> Callable[[], Any]:
        return partial(
            invoke,
            client,
            self.model,
            [{"role": "user", "content": prompt}],
            schema,
            max_tokens=max_tokens or self.config.max_tokens,
            temperature=temperature,
            top_p=self.config.top_p,
            top_k=self.config.top_k,
        )

    async def _execute(self, fn: Callable[[], Any], cancel_event: Optional[asyncio.Event]) -> Any:
        """Run one blocking call in the executor, bounded by timeout and cancel_event."""
        if cancel_event is not None and cancel_event.is_set():
            raise GenerationCancelledError("Generation cancelled before model call")

        await self.rate_limiter.acquire()

        loop = asyncio.get_running_loop()
        timeout = self.config.timeout_seconds
        call = asyncio.ensure_future(asyncio.wait_for(loop.run_in_executor(None, fn), timeout=timeout))
        start = time.time()
        try:
            if cancel_event is None:
                result = await call
            else:
                waiter = asyncio.ensure_future(cancel_event.wait())
                try:
                    done, _ = await asyncio.wait({call, waiter}, return_when=asyncio.FIRST_COMPLETED)
                finally:
                    waiter.cancel()
                if call not in done:
                    raise GenerationCancelledError("Generation cancelled during model call")
                result = call.result()
        except asyncio.TimeoutError as e:
            raise ModelError(
                ModelErrorReason.TIMEOUT,
                f"Model call exceeded {timeout}s",
                cause=e,
                context={"model": self.model},
            ) from e
        finally:
            if not call.done():
                call.cancel()

        self.request_count += 1
        self.last_request_time = time.time()
        logger.debug(f"[GATEWAY] {self.model} responded in {self.last_request_time - start:.2f}s")
        return result

    def get_stats(self) -> Dict[str, Any]:
        return {
            "request_count": self.request_count,
            "last_request_time": self.last_request_time,
            "model": self.model,
        }
