"""AI providers that turn free text into worklog entries."""
import logging
from datetime import date
from typing import Callable

import anthropic
import openai

from .config import AIProviderKind, AppConfig
from .errors import ConfigMissing, EmptyExtraction, TransportFailure
from .extract import extract
from .models import ParseContext, WorklogEntry
from .prompt import build_prompt

logger = logging.getLogger(__name__)


def _transport_failure(exc: Exception, sdk) -> TransportFailure:
    """Map an SDK exception (openai or anthropic share the names) to TransportFailure."""
    if isinstance(exc, sdk.AuthenticationError):
        return TransportFailure(
            "Invalid AI API key",
            hint="Check the key with `jt setup` "
            "(Anthropic: https://console.anthropic.com/, OpenAI: https://platform.openai.com/api-keys)",
        )
    if isinstance(exc, sdk.RateLimitError):
        return TransportFailure(
            "AI rate limit exceeded",
            hint="Try again in a minute or log a template instead: jt t",
        )
    if isinstance(exc, sdk.APIConnectionError):
        return TransportFailure(
            f"Cannot reach the AI service: {exc}",
            hint="Check your network connection and proxy/VPN settings",
        )
    return TransportFailure(f"AI request failed: {exc}")


class AIProvider:
    kind: AIProviderKind
    default_model = ""

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        *,
        client=None,
        clock: Callable[[], date] = date.today,
    ):
        self.model = model or self.default_model
        self.client = client if client is not None else self.make_client(api_key)
        self.clock = clock

    def make_client(self, api_key: str):
        raise NotImplementedError

    def complete(self, prompt: str) -> str:
        raise NotImplementedError

    def parse(self, user_input: str, context: ParseContext) -> list[WorklogEntry]:
        prompt = build_prompt(user_input, context, self.clock())
        logger.debug("Sending %d-char prompt to %s (%s)", len(prompt), self.kind.value, self.model)
        text = self.complete(prompt)
        logger.debug("AI response: %s", text)
        entries = extract(text)
        if not entries:
            raise EmptyExtraction("AI found nothing to log in the input")
        return entries


class OpenAIProvider(AIProvider):
    kind = AIProviderKind.OPENAI
    default_model = "gpt-4o-mini"

    def make_client(self, api_key: str):
        return openai.OpenAI(api_key=api_key)

    def complete(self, prompt: str) -> str:
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )
        except openai.APIError as exc:
            raise _transport_failure(exc, openai) from exc
        if not resp.choices:
            return ""
        return resp.choices[0].message.content or ""


class AnthropicProvider(AIProvider):
    kind = AIProviderKind.ANTHROPIC
    default_model = "claude-haiku-4-5"
    max_tokens = 2000

    def make_client(self, api_key: str):
        return anthropic.Anthropic(api_key=api_key)

    def complete(self, prompt: str) -> str:
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as exc:
            raise _transport_failure(exc, anthropic) from exc
        return "".join(block.text for block in response.content if block.type == "text")


PROVIDERS: dict[AIProviderKind, type[AIProvider]] = {
    AIProviderKind.OPENAI: OpenAIProvider,
    AIProviderKind.ANTHROPIC: AnthropicProvider,
}


def create_ai_provider(config: AppConfig) -> AIProvider:
    api_key = config.resolved_api_key()
    if not api_key:
        raise ConfigMissing("AI API key is not configured")
    return PROVIDERS[config.ai_provider](api_key, config.ai_model)
