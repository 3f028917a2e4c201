"""
LLM Factory Module.

Provides the factory used by the generation gateways to create chat model
instances. All gateway calls go through here instead of instantiating
ChatOpenAI directly, so model, temperature and credentials come from one
place.

Usage:
    from src.common.llm_factory import create_llm

    llm = create_llm()
    response = llm.invoke([SystemMessage(content="..."), HumanMessage(content="...")])
"""

import logging
from typing import Any, Optional

from langchain_openai import ChatOpenAI

from src.common.config import Config

logger = logging.getLogger(__name__)


def create_llm(
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    **kwargs: Any,
) -> ChatOpenAI:
    """
    Create a ChatOpenAI instance for a generation gateway.

    Args:
        model: Model name (defaults to Config.GENERATION_MODEL)
        temperature: Sampling temperature (defaults to Config.GENERATION_TEMPERATURE)
        **kwargs: Additional ChatOpenAI parameters

    Returns:
        ChatOpenAI instance. No retries are configured: a failed call
        surfaces immediately to the gateway.
    """
    effective_model = model or Config.GENERATION_MODEL
    effective_temperature = temperature if temperature is not None else Config.GENERATION_TEMPERATURE

    llm_kwargs = {
        "model": effective_model,
        "temperature": effective_temperature,
        "max_retries": 0,
    }
    if Config.OPENAI_API_KEY:
        llm_kwargs["api_key"] = Config.OPENAI_API_KEY
    if Config.OPENAI_BASE_URL:
        llm_kwargs["base_url"] = Config.OPENAI_BASE_URL
    llm_kwargs.update(kwargs)

    logger.debug(f"Creating LLM: model={effective_model}, temperature={effective_temperature}")
    return ChatOpenAI(**llm_kwargs)
