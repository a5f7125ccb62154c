"""AI enrichment adapter.

Enrichment providers
--------------------
``ollama`` (default)
    Local Ollama server via ``langchain_ollama.ChatOllama``.
    Configure via ``OLLAMA_BASE_URL`` and ``OLLAMA_CHAT_MODEL``.

``openai``
    ``langchain_openai.ChatOpenAI``; requires ``OPENAI_API_KEY``.
    Configure via ``OPENAI_CHAT_MODEL``.

The caller truncates the content before it gets here.  A failed call never
fails the scrape: :func:`annotate_safely` swaps in :data:`AI_UNAVAILABLE`.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from nerdscrape.config import settings

logger = logging.getLogger(__name__)

AI_UNAVAILABLE = "AI analysis unavailable"

# (content, prompt, timeout) -> annotation text
Annotator = Callable[..., str]


# ---------------------------------------------------------------------------
# LLM helper
# ---------------------------------------------------------------------------

def _get_llm(timeout: Optional[float] = None) -> Any:
    """Return a configured LangChain chat model based on ``settings``."""
    if settings.llm_provider == "openai":
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(model=settings.openai_chat_model, temperature=0, timeout=timeout)

    from langchain_ollama import ChatOllama

    return ChatOllama(
        model=settings.ollama_chat_model,
        base_url=settings.ollama_base_url,
        temperature=0,
        client_kwargs={"timeout": timeout},
    )


def _build_prompt(content: str, prompt: str) -> str:
    return f"{prompt}\n\nWebpage content:\n{content}"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def annotate(content: str, prompt: str, timeout: Optional[float] = None) -> str:
    """Ask the configured LLM to analyse *content* according to *prompt*.

    Raises:
        Exception: Whatever the provider raises (connection, auth, timeout).
    """
    llm = _get_llm(timeout)
    response = llm.invoke(_build_prompt(content, prompt))
    text = response.content if hasattr(response, "content") else str(response)
    return str(text).strip()


def annotate_safely(
    content: str,
    prompt: str,
    annotator: Optional[Annotator] = None,
    timeout: Optional[float] = None,
) -> str:
    """Run *annotator* (default :func:`annotate`), degrading to :data:`AI_UNAVAILABLE`."""
    call = annotator or annotate
    try:
        return call(content, prompt, timeout=timeout)
    except Exception as exc:  # noqa: BLE001
        logger.warning("AI analysis failed: %s", exc)
        return AI_UNAVAILABLE
