import json
import os
from typing import Any, Dict, List, Optional

import instructor
import langsmith as ls
from instructor.exceptions import IncompleteOutputException, InstructorRetryException
from pydantic import BaseModel, ValidationError

# Optional provider SDK imports. These are only required if their provider is used.
try:
    from anthropic import Anthropic
except Exception:
    Anthropic = None
try:
    from openai import OpenAI
except Exception:
    OpenAI = None
try:
    from google.genai import Client as Gemini
except Exception:
    Gemini = None

from slidegen.agents.exceptions import MissingConfigError, ModelError, ModelErrorReason
from slidegen.config.logging_config import get_logger

logger = get_logger(__name__)

# Clients and their configuration
CLIENTS = {
    "anthropic": {
        "instructor_fn": instructor.from_anthropic,
        "client_class": Anthropic,
        "instructor_kwargs": {"mode": instructor.Mode.ANTHROPIC_JSON},
        "api_key_env": "ANTHROPIC_API_KEY",
    },
    "openai": {
        "instructor_fn": instructor.from_openai,
        "client_class": OpenAI,
        "instructor_kwargs": {"mode": instructor.Mode.TOOLS},
        "api_key_env": "OPENAI_API_KEY",
    },
    "gemini": {
        "instructor_fn": instructor.from_genai,
        "client_class": Gemini,
        "instructor_kwargs": {"mode": instructor.Mode.GENAI_TOOLS},
        "api_key_env": "GEMINI_API_KEY",
    },
}

# Models, their client type, and their model_name
MODELS = {
    "gemini-2.0-flash": ("gemini", "gemini-2.0-flash"),
    "gemini-2.0-flash-exp": ("gemini", "gemini-2.0-flash-exp"),
    "gemini-2.5-flash": ("gemini", "gemini-2.5-flash"),
    "gemini-2.5-pro": ("gemini", "gemini-2.5-pro"),
    "gpt-4o-mini": ("openai", "gpt-4o-mini"),
    "gpt-4.1-mini": ("openai", "gpt-4.1-mini-2025-04-14"),
    "gpt-4.1": ("openai", "gpt-4.1-2025-04-14"),
    "claude-sonnet-4-5": ("anthropic", "claude-sonnet-4-5-20250929"),
    "claude-3-5-haiku": ("anthropic", "claude-3-5-haiku-20241022"),
}

TIMEOUT_STATUS_CODES = {408, 502, 504}


def resolve_model(model_name: str):
    """Return (client_type, actual_model_name) for an alias or a provider model name."""
    if model_name in MODELS:
        return MODELS[model_name]
    for client_type, actual_name in MODELS.values():
        if actual_name == model_name:
            return client_type, actual_name
    raise ValueError(f"Model {model_name} not supported")


def get_client(model_name: str, api_key: str = None, wrap_with_instructor: bool = True):
    """
    Get a client for a given model. Accepts either a model alias (key in MODELS)
    or the provider's actual model name (value in MODELS mapping).

    If wrap_with_instructor is False, returns a raw provider client, used for
    free-form text where no response_model applies.
    """
    client_type, actual_model_name = resolve_model(model_name)
    client_config = CLIENTS[client_type]

    client_class = client_config["client_class"]
    if client_class is None:
        raise MissingConfigError(f"SDK for provider '{client_type}' is not installed")

    client_kwargs = {}
    api_key = api_key or os.getenv(client_config["api_key_env"])
    if not api_key:
        raise MissingConfigError(f"{client_config['api_key_env']} environment variable is not set")
    client_kwargs["api_key"] = api_key

    raw_client = client_class(**client_kwargs)
    if not wrap_with_instructor:
        return raw_client, actual_model_name

    return client_config["instructor_fn"](raw_client, **client_config["instructor_kwargs"]), actual_model_name


def _status_code(error: Exception) -> Optional[int]:
    if hasattr(error, "status_code") and isinstance(error.status_code, int):
        return error.status_code
    response = getattr(error, "response", None)
    if response is not None and isinstance(getattr(response, "status_code", None), int):
        return response.status_code
    code = getattr(error, "code", None)
    if isinstance(code, int):
        return code
    error_str = str(error)
    if "Error code:" in error_str:
        try:
            return int(error_str.split("Error code:")[1].split()[0])
        except (ValueError, IndexError):
            return None
    return None


def map_provider_error(error: Exception, model: str) -> ModelError:
    """Translate a provider or parsing exception into a ModelError."""
    if isinstance(error, ModelError):
        return error

    context = {"model": model}
    status = _status_code(error)
    error_name = type(error).__name__.lower()

    if status == 429 or "ratelimit" in error_name or "resource_exhausted" in str(error).lower():
        return ModelError(ModelErrorReason.RATE_LIMITED, "Rate limit exceeded", cause=error, context=context)

    if status in TIMEOUT_STATUS_CODES or isinstance(error, TimeoutError) or "timeout" in error_name:
        return ModelError(ModelErrorReason.TIMEOUT, "Model call timed out", cause=error, context=context)

    if isinstance(error, (ValidationError, json.JSONDecodeError, InstructorRetryException, IncompleteOutputException)):
        return ModelError(ModelErrorReason.MALFORMED_OUTPUT, "Model output did not match the schema", cause=error, context=context)

    return ModelError(ModelErrorReason.UNKNOWN, "Model call failed", cause=error, context=context)


def _create_freeform(client, model: str, messages: List[Dict[str, str]], invoke_kwargs: Dict[str, Any]) -> str:
    # OpenAI-style chat.completions
    if hasattr(client, "chat") and hasattr(client.chat, "completions"):
        result = client.chat.completions.create(model=model, messages=messages, **invoke_kwargs)
        return result.choices[0].message.content or ""

    # Anthropic-style
    if hasattr(client, "messages") and hasattr(client.messages, "create"):
        result = client.messages.create(model=model, messages=messages, **invoke_kwargs)
        return "".join(getattr(block, "text", "") for block in result.content)

    # Gemini-style
    if hasattr(client, "models") and hasattr(client.models, "generate_content"):
        prompt = "\n".join(msg["content"] for msg in messages)
        config = {
            "temperature": invoke_kwargs.get("temperature"),
            "max_output_tokens": invoke_kwargs.get("max_tokens"),
        }
        result = client.models.generate_content(model=model, contents=prompt, config=config)
        return result.text or ""

    raise AttributeError(f"Unknown client type: {type(client)}")


def _provider_kwargs(model: str, max_tokens: int, temperature: float, top_p: Optional[float], top_k: Optional[int]) -> Dict[str, Any]:
    client_type, _ = resolve_model(model)
    kwargs: Dict[str, Any] = {"max_tokens": max_tokens, "temperature": temperature}
    if top_p is not None:
        kwargs["top_p"] = top_p
    if top_k is not None and client_type != "openai":
        kwargs["top_k"] = top_k
    return kwargs


def invoke(
    client,
    model: str,
    messages: List[Dict[str, str]],
    response_model=None,
    max_tokens: int = 2048,
    temperature: float = 0.7,
    top_p: Optional[float] = None,
    top_k: Optional[int] = None,
):
    """Single synchronous model call.

    With a response_model the client must be instructor-wrapped and the
    validated model instance is returned; without one the text is returned.
    Every failure is raised as a ModelError.
    """
    try:
        invoke_kwargs = _provider_kwargs(model, max_tokens, temperature, top_p, top_k)
    except ValueError:
        # Unregistered model names still get the common parameters
        invoke_kwargs = {"max_tokens": max_tokens, "temperature": temperature}

    prompt_chars = sum(len(msg.get("content", "")) for msg in messages)
    logger.debug(f"[GATEWAY] invoke model={model} prompt_tokens~{prompt_chars // 4} structured={response_model is not None}")

    with ls.trace(name="llm-invoke",
                  tags=["llm-invoke"],
                  inputs={
                      "messages": messages,
                      "response_model": response_model.model_json_schema() if response_model else None,
                  },
                  metadata={
                      "model": model,
                      "max_tokens": max_tokens,
                  }) as rt:
        try:
            if response_model is None:
                content = _create_freeform(client, model, messages, invoke_kwargs)
                rt.end(outputs={"output": content})
                return content

            if model.startswith("gemini"):
                gen_config = {"temperature": temperature, "max_tokens": max_tokens}
                result = client.chat.completions.create(
                    model=model,
                    messages=messages,
                    response_model=response_model,
                    generation_config=gen_config,
                )
            else:
                result = client.chat.completions.create(
                    model=model,
                    messages=messages,
                    response_model=response_model,
                    **invoke_kwargs
                )
            if not isinstance(result, BaseModel):
                raise ValidationError.from_exception_data(response_model.__name__, [])
            rt.end(outputs={"output": result.model_dump_json()})
            return result
        except Exception as e:
            mapped = map_provider_error(e, model)
            logger.warning(f"[GATEWAY] {model} call failed ({mapped.reason.value}): {e}")
            rt.end(outputs={"output": json.dumps({"error": f"LLM invocation failed: {str(e)}"})})
            raise mapped from e
