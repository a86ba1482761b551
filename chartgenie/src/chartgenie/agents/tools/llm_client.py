"""LLM client wrapper supporting Groq, OpenAI, Gemini and local servers."""

from typing import Any, Dict, List, Optional
from chartgenie.config.settings import get_settings
from chartgenie.config.logging import get_logger
from chartgenie.agents.tools.retry import retry_with_backoff
from chartgenie.errors import LLMCallError

logger = get_logger(__name__)

Messages = List[Dict[str, str]]

# Global client instances
_groq_client: Optional[object] = None
_openai_client: Optional[object] = None
_gemini_client: Optional[object] = None


def _get_groq_client():
    """Get or create the global Groq client (OpenAI-compatible endpoint)."""
    global _groq_client
    if _groq_client is None:
        from openai import OpenAI
        settings = get_settings()
        _groq_client = OpenAI(
            api_key=settings.groq_api_key,
            base_url=settings.groq_base_url,
            timeout=settings.llm_timeout,
        )
        logger.debug(f"Initialized Groq client at {settings.groq_base_url}")
    return _groq_client


def _get_openai_client():
    """Get or create the global OpenAI client."""
    global _openai_client
    if _openai_client is None:
        from openai import OpenAI
        settings = get_settings()
        _openai_client = OpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.llm_timeout,
        )
        logger.debug(f"Initialized OpenAI client with timeout={settings.llm_timeout}s")
    return _openai_client


def _get_gemini_client():
    """Get or create the global Gemini client."""
    global _gemini_client
    if _gemini_client is None:
        try:
            import google.generativeai as genai
        except ImportError:
            raise LLMCallError(
                "google-generativeai package not installed. "
                "Install with: pip install chartgenie[gemini]"
            )
        genai.configure(api_key=get_settings().gemini_api_key)
        _gemini_client = genai
        logger.debug("Initialized Gemini client")
    return _gemini_client


def reset_clients() -> None:
    """Drop cached clients so the next call picks up changed settings."""
    global _groq_client, _openai_client, _gemini_client
    _groq_client = None
    _openai_client = None
    _gemini_client = None


def _completion_content(response: Any, provider: str) -> str:
    """Pull the assistant text out of a chat completion response."""
    if not response.choices:
        raise LLMCallError(f"No choices in response from {provider}")
    message = response.choices[0].message
    if message is None or message.content is None:
        raise LLMCallError(f"No content in response from {provider}")
    logger.debug(f"Received response from {provider} ({len(message.content)} chars)")
    return message.content


def _chat_openai_compatible(client, model: str, messages: Messages, provider: str) -> str:
    from openai import APITimeoutError

    settings = get_settings()
    logger.debug(
        f"Sending chat request to {provider} model {model} "
        f"(temperature={settings.temperature}, timeout={settings.llm_timeout}s)"
    )

    def _make_request():
        response = client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
        )
        return _completion_content(response, provider)

    return retry_with_backoff(
        func=_make_request,
        max_retries=settings.llm_max_retries,
        base_delay=settings.llm_retry_delay,
        timeout_errors=(APITimeoutError, TimeoutError),
        operation_name=f"{provider} call to {model}",
    )


def _chat_groq(messages: Messages) -> str:
    settings = get_settings()
    return _chat_openai_compatible(_get_groq_client(), settings.groq_model, messages, "Groq")


def _chat_openai(messages: Messages) -> str:
    settings = get_settings()
    return _chat_openai_compatible(_get_openai_client(), settings.model_name, messages, "OpenAI")


def _chat_local(messages: Messages) -> str:
    """Send messages to a local OpenAI-compatible API."""
    from openai import OpenAI

    settings = get_settings()
    base_url = settings.llm_url.rstrip('/')
    if not base_url.endswith('/v1'):
        base_url = f"{base_url}/v1"

    client = OpenAI(
        base_url=base_url,
        api_key="not-needed",  # Local APIs often don't require a real key
        timeout=settings.llm_timeout,
    )
    return _chat_openai_compatible(client, settings.model, messages, "local LLM")


def _chat_gemini(messages: Messages) -> str:
    """Send messages to Gemini. System and last user message are combined."""
    settings = get_settings()
    genai = _get_gemini_client()

    system_content = ""
    user_parts = []
    for msg in messages:
        if msg["role"] == "system":
            system_content = msg["content"]
        elif msg["role"] == "user":
            user_parts.append(msg["content"])

    last_user = user_parts[-1] if user_parts else ""
    full_prompt = f"{system_content}\n\n{last_user}" if system_content else last_user

    model = genai.GenerativeModel(model_name=settings.gemini_model)

    def _make_request():
        response = model.generate_content(
            full_prompt,
            generation_config={
                "temperature": settings.temperature,
                "max_output_tokens": settings.max_tokens,
            },
            request_options={"timeout": settings.llm_timeout},
        )
        content = getattr(response, "text", None)
        if not content:
            raise LLMCallError("No content in response from Gemini")
        logger.debug(f"Received response from Gemini ({len(content)} chars)")
        return content

    return retry_with_backoff(
        func=_make_request,
        max_retries=settings.llm_max_retries,
        base_delay=settings.llm_retry_delay,
        timeout_errors=(TimeoutError,),
        operation_name=f"Gemini call to {settings.gemini_model}",
    )


def configured_providers() -> List[str]:
    """Names of the providers with enough configuration to be tried, in priority order."""
    settings = get_settings()
    providers = []
    if settings.groq_api_key:
        providers.append("groq")
    if settings.openai_api_key and settings.model_name:
        providers.append("openai")
    if settings.gemini_api_key and settings.gemini_model:
        providers.append("gemini")
    if settings.llm_url and settings.model:
        providers.append("local")
    return providers


_PROVIDERS = {
    "groq": _chat_groq,
    "openai": _chat_openai,
    "gemini": _chat_gemini,
    "local": _chat_local,
}


def chat(messages: Messages) -> str:
    """
    Send messages to the first configured provider that answers.

    Priority order: Groq > OpenAI > Gemini > local. A failing provider is
    logged and the next one is tried.

    Args:
        messages: List of message dicts with 'role' and 'content' keys

    Returns:
        Content of the assistant's response

    Raises:
        LLMCallError: If no provider is configured or all of them fail
    """
    providers = configured_providers()
    if not providers:
        raise LLMCallError(
            "No LLM API configured. Set GROQ_API_KEY, OPENAI_API_KEY/MODEL_NAME, "
            "GEMINI_API_KEY/GEMINI_MODEL or LLM_URL/MODEL in .env"
        )

    errors = []
    for provider in providers:
        try:
            return _PROVIDERS[provider](messages)
        except Exception as e:
            logger.warning(f"{provider} call failed: {e}. Falling back to next provider...")
            errors.append(f"{provider}: {e}")

    raise LLMCallError("All configured LLM providers failed. " + "; ".join(errors))


def check_llm_connection() -> Dict[str, Any]:
    """
    Probe the configured LLM with a tiny prompt.

    Returns:
        Dict with "status" ("success" or "error"), "providers" and either
        "response" or "error"
    """
    probe = [{"role": "user", "content": "Say 'OK' if you can read this."}]
    providers = configured_providers()
    try:
        response = chat(probe)
    except LLMCallError as e:
        logger.error(f"LLM connection test failed: {e}")
        return {"status": "error", "providers": providers, "error": str(e)}

    logger.info("LLM connection test succeeded")
    return {"status": "success", "providers": providers, "response": response.strip()}
