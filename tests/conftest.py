"""
Shared test fixtures for NEIS Observer.
Settings are redirected to a temporary file and every AI provider is a fake.
Zero network calls.
"""
import pytest

from neis_observer.services.tsv_parser import ActivityRecord

SAMPLE_TSV = (
    "10101\t김철수\t프로젝트 활동에서 리더 역할을 맡아 팀원들을 이끌었음\n"
    "10102\t이영희\t토론 수업에서 적극적으로 참여하여 논리적으로 주장함\n"
    "10103\t박민수\t과학 탐구 보고서를 작성함\n"
)


class FakeProvider:
    """Stands in for a GenerationProvider.

    responses: list of str (returned) or Exception (raised), used in order;
    when exhausted, a fixed observation is returned.
    """

    name = "Fake"
    model_id = "fake-model"

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    def generate(self, system_prompt, user_prompt):
        self.calls.append((system_prompt, user_prompt))
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response
        return "탐구 역량이 돋보임."


@pytest.fixture
def sample_tsv():
    return SAMPLE_TSV


@pytest.fixture
def sample_activities():
    return [
        ActivityRecord("10101", "김철수", "프로젝트 활동에서 리더 역할을 맡아 팀원들을 이끌었음"),
        ActivityRecord("10102", "이영희", "토론 수업에서 적극적으로 참여하여 논리적으로 주장함"),
        ActivityRecord("10103", "박민수", "과학 탐구 보고서를 작성함"),
    ]


@pytest.fixture
def fake_provider_factory():
    return FakeProvider


@pytest.fixture
def no_sleep():
    """Records requested delays instead of sleeping."""
    delays = []
    return delays


@pytest.fixture
def isolated_config(monkeypatch, tmp_path):
    """Point the global config at a temp settings file with known values."""
    from neis_observer.config import config

    for var in ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GEMINI_API_KEY"):
        monkeypatch.delenv(var, raising=False)

    monkeypatch.setattr(config, "settings_file", tmp_path / "settings.json")
    monkeypatch.setattr(config, "api_provider", "openai")
    monkeypatch.setattr(config, "api_key", "")
    monkeypatch.setattr(config, "model_id", "")
    monkeypatch.setattr(config, "target_char_count", 500)
    monkeypatch.setattr(config, "output_folder", str(tmp_path / "out"))
    return config
