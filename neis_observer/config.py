"""
Configuration management for NEIS Observer.
"""
import os
import json
from collections import namedtuple
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Base paths
BASE_DIR = Path(__file__).parent.parent
PACKAGE_DIR = Path(__file__).parent

# User data
HOME_DIR = Path.home()
SETTINGS_FILE = HOME_DIR / ".neis_observer_settings.json"

# API Configuration
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")

API_KEY_ENV = {
    'openai': "OPENAI_API_KEY",
    'claude': "ANTHROPIC_API_KEY",
    'gemini': "GEMINI_API_KEY",
}

DEFAULT_MODELS = {
    'openai': 'gpt-4o-mini',
    'claude': 'claude-3-5-sonnet-20241022',
    'gemini': 'gemini-2.0-flash',
}

# "anthropic" is accepted as an alias for "claude"
PROVIDER_ALIASES = {
    'anthropic': 'claude',
}

# Conversion defaults
DEFAULT_PROVIDER = os.getenv("NEIS_OBSERVER_PROVIDER", "openai")
DEFAULT_MODEL_ID = os.getenv("NEIS_OBSERVER_MODEL", "")
DEFAULT_TARGET_CHAR_COUNT = 500
DEFAULT_OUTPUT_FOLDER = os.getenv("NEIS_OBSERVER_OUTPUT", "")

# Server configuration
HOST = "127.0.0.1"
PORT = 3000
DEBUG = False


def normalize_provider(provider):
    """Map provider aliases to the canonical key ('openai', 'claude', 'gemini')."""
    key = (provider or '').strip().lower()
    return PROVIDER_ALIASES.get(key, key)


def env_api_key(provider):
    """API key for a provider from the environment, or ''."""
    env_name = API_KEY_ENV.get(normalize_provider(provider))
    return os.getenv(env_name, "") if env_name else ""


# Settings frozen at batch start; the pipeline only ever sees this.
BatchConfig = namedtuple(
    'BatchConfig',
    ['provider', 'api_key', 'model_id', 'target_char_count', 'output_folder'],
)


class Config:
    """User settings: provider, key, model, target length, output folder."""

    def __init__(self, settings_file=None):
        self.settings_file = Path(settings_file) if settings_file else SETTINGS_FILE
        self.api_provider = normalize_provider(DEFAULT_PROVIDER)
        self.api_key = ""
        self.model_id = DEFAULT_MODEL_ID
        self.target_char_count = DEFAULT_TARGET_CHAR_COUNT
        self.output_folder = DEFAULT_OUTPUT_FOLDER

    def to_dict(self):
        return {
            "api_provider": self.api_provider,
            "api_key": self.api_key,
            "model_id": self.model_id,
            "target_char_count": self.target_char_count,
            "output_folder": self.output_folder,
        }

    def update(self, data: dict):
        allowed = self.to_dict()
        for key, value in data.items():
            if key not in allowed:
                continue
            if key == 'api_provider':
                value = normalize_provider(str(value))
            elif key in ('api_key', 'model_id', 'output_folder'):
                value = '' if value is None else str(value)
            elif key == 'target_char_count':
                try:
                    value = int(value)
                except (TypeError, ValueError):
                    continue
                if value <= 0:
                    continue
            setattr(self, key, value)

    def load(self):
        """Merge saved settings over the defaults. Missing file is not an error."""
        if self.settings_file.exists():
            with open(self.settings_file, 'r', encoding='utf-8') as f:
                self.update(json.load(f))
        return self

    def save(self):
        self.settings_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.settings_file, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    def effective_api_key(self):
        return self.api_key or env_api_key(self.api_provider)

    def effective_model_id(self):
        return self.model_id or DEFAULT_MODELS.get(self.api_provider, '')

    def validate(self):
        """Return a list of human-readable problems; empty means usable."""
        problems = []
        if self.api_provider not in DEFAULT_MODELS:
            problems.append(f"Unknown AI provider: {self.api_provider}")
        if not str(self.effective_api_key()).strip():
            problems.append("API 키를 설정해주세요.")
        if not isinstance(self.target_char_count, int) or self.target_char_count <= 0:
            problems.append("목표 글자 수는 양의 정수여야 합니다.")
        return problems

    def snapshot(self, **overrides) -> BatchConfig:
        """Freeze the current settings for one batch."""
        overrides = {k: v for k, v in overrides.items() if v is not None}
        provider = normalize_provider(overrides.get("provider", self.api_provider))

        # Saved key/model belong to the saved provider only
        if provider == self.api_provider:
            api_key = self.effective_api_key()
            model_id = self.model_id
        else:
            api_key = env_api_key(provider)
            model_id = ""

        return BatchConfig(
            provider=provider,
            api_key=overrides.get("api_key", api_key),
            model_id=overrides.get("model_id") or model_id or DEFAULT_MODELS.get(provider, ''),
            target_char_count=int(overrides.get("target_char_count", self.target_char_count)),
            output_folder=overrides.get("output_folder", self.output_folder),
        )


# Global config instance
config = Config()
