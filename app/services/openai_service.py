"""
Cliente de chat completions da OpenAI com métricas de uso e custo
"""
import time
import logging
from typing import Dict, List, Optional, Any

from openai import OpenAI, APIError, RateLimitError, APITimeoutError

from app.config.settings import settings

logger = logging.getLogger(__name__)

# Preço por 1K tokens (input, output) em USD
OPENAI_PRICING = {
    "gpt-4o-mini": {"input": 0.00015, "output": 0.0006},
    "gpt-4o": {"input": 0.005, "output": 0.015},
    "gpt-4-turbo": {"input": 0.01, "output": 0.03},
    "gpt-3.5-turbo": {"input": 0.0005, "output": 0.0015},
}

DEFAULT_PRICING_MODEL = "gpt-4o-mini"


class OpenAIServiceError(Exception):
    """Falha na chamada à OpenAI"""
    pass


def calculate_openai_cost(model: str, prompt_tokens: int, completion_tokens: int) -> float:
    """Custo em USD; modelos desconhecidos usam o preço do gpt-4o-mini"""
    pricing = OPENAI_PRICING.get(model, OPENAI_PRICING[DEFAULT_PRICING_MODEL])
    input_cost = (prompt_tokens / 1000) * pricing["input"]
    output_cost = (completion_tokens / 1000) * pricing["output"]
    return input_cost + output_cost


def split_tokens(total_tokens: int, prompt_tokens: Optional[int] = None,
                 completion_tokens: Optional[int] = None) -> Dict[str, int]:
    """Usa os tokens informados pela API ou estima 70% prompt / 30% completion"""
    if not prompt_tokens:
        prompt_tokens = int(total_tokens * 0.7)
    if not completion_tokens:
        completion_tokens = int(total_tokens * 0.3)
    return {"prompt": prompt_tokens, "completion": completion_tokens}


class OpenAIChatService:
    """Encapsula o cliente OpenAI usado pelos geradores de conteúdo"""

    def __init__(self, api_key: Optional[str] = None, client: Any = None):
        self.api_key = api_key if api_key is not None else settings.openai_api_key

        if client is not None:
            self.client = client
        elif not self.api_key:
            logger.warning("⚠️ OPENAI_API_KEY não configurada. Geração de conteúdo por IA estará desabilitada.")
            self.client = None
        else:
            self.client = OpenAI(api_key=self.api_key)

    def is_configured(self) -> bool:
        return self.client is not None

    def chat(self, model: str, messages: List[Dict[str, Any]], max_tokens: int,
             temperature: float, **extra) -> Dict[str, Any]:
        """
        Executa um chat completion e devolve o conteúdo com as métricas:
        tokens (total/prompt/completion), custo, request id e tempo de resposta.
        """
        if not self.client:
            raise OpenAIServiceError("OPENAI_API_KEY não configurada")

        start_time = time.time()
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
                **extra
            )
        except (APIError, RateLimitError, APITimeoutError) as e:
            logger.error(f"❌ Erro na API OpenAI ({model}): {str(e)}")
            raise OpenAIServiceError(str(e)) from e

        response_time_ms = int((time.time() - start_time) * 1000)

        content = None
        if response.choices:
            content = response.choices[0].message.content

        usage = response.usage
        total_tokens = (usage.total_tokens if usage else 0) or 0
        tokens = split_tokens(
            total_tokens,
            usage.prompt_tokens if usage else None,
            usage.completion_tokens if usage else None
        )

        result = {
            "content": content.strip() if content else "",
            "model": model,
            "tokens_used": total_tokens,
            "tokens_prompt": tokens["prompt"],
            "tokens_completion": tokens["completion"],
            "cost": calculate_openai_cost(model, tokens["prompt"], tokens["completion"]),
            "request_id": response.id or "",
            "response_time_ms": response_time_ms,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        logger.info(f"✅ OpenAI {model}: {total_tokens} tokens em {response_time_ms}ms")
        return result
