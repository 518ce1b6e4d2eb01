"""
AI generation providers.

Each provider exposes generate(system_prompt, user_prompt) -> str and turns
any SDK/vendor failure into GenerationError. The conversion pipeline only
knows about this capability, so adding a vendor means adding a class here
and an entry in PROVIDERS.
"""
import logging

from ..config import DEFAULT_MODELS, normalize_provider

logger = logging.getLogger(__name__)

MAX_TOKENS = 2000
TEMPERATURE = 0.7


class GenerationError(RuntimeError):
    """A single generation call failed (network, non-2xx status, bad body)."""


class GenerationProvider:
    """Base class; subclasses implement _generate."""

    name = "AI"
    default_model = ""

    def __init__(self, api_key: str, model_id: str = ""):
        self.api_key = api_key
        self.model_id = model_id or self.default_model

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        try:
            text = self._generate(system_prompt, user_prompt)
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(f"{self.name} API 오류: {e}") from e

        if not isinstance(text, str) or not text.strip():
            raise GenerationError(f"{self.name} API 오류: empty response")
        return text.strip()

    def _generate(self, system_prompt: str, user_prompt: str) -> str:
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}(model_id={self.model_id!r})"


class OpenAIProvider(GenerationProvider):
    """OpenAI chat completions (also any OpenAI-compatible endpoint)."""

    name = "OpenAI"
    default_model = DEFAULT_MODELS['openai']

    def _generate(self, system_prompt, user_prompt):
        from openai import OpenAI
        client = OpenAI(api_key=self.api_key)

        response = client.chat.completions.create(
            model=self.model_id,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            max_tokens=MAX_TOKENS,
            temperature=TEMPERATURE,
        )
        return response.choices[0].message.content


class AnthropicProvider(GenerationProvider):
    """Anthropic Claude messages API."""

    name = "Claude"
    default_model = DEFAULT_MODELS['claude']

    def _generate(self, system_prompt, user_prompt):
        import anthropic
        client = anthropic.Anthropic(api_key=self.api_key)

        response = client.messages.create(
            model=self.model_id,
            max_tokens=MAX_TOKENS,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        return response.content[0].text


class GeminiProvider(GenerationProvider):
    """Google Gemini via google-generativeai."""

    name = "Gemini"
    default_model = DEFAULT_MODELS['gemini']

    def _generate(self, system_prompt, user_prompt):
        import google.generativeai as genai
        genai.configure(api_key=self.api_key)

        gen_model = genai.GenerativeModel(
            self.model_id,
            system_instruction=system_prompt,
        )
        response = gen_model.generate_content(
            user_prompt,
            generation_config={
                "max_output_tokens": MAX_TOKENS,
                "temperature": TEMPERATURE,
            },
        )
        return response.text


PROVIDERS = {
    'openai': OpenAIProvider,
    'claude': AnthropicProvider,
    'gemini': GeminiProvider,
}


def get_provider(batch_config) -> GenerationProvider:
    """Build the provider named in a BatchConfig."""
    key = normalize_provider(batch_config.provider)
    provider_cls = PROVIDERS.get(key)
    if provider_cls is None:
        raise ValueError(f"Unknown AI provider: {batch_config.provider}")

    provider = provider_cls(batch_config.api_key, batch_config.model_id)
    logger.info("Using %s provider (%s)", provider.name, provider.model_id)
    return provider
