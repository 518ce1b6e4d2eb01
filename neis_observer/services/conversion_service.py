"""
Conversion pipeline: student activity rows -> teacher observation records.

Records are processed strictly one at a time with a fixed pause between
AI calls. A failed call never stops the batch; it becomes a placeholder
record with zero counts.
"""
import time
import logging
from collections import namedtuple

from .neis_text import count_text
from .prompts import SYSTEM_PROMPT, build_user_prompt
from .providers import get_provider
from .tsv_parser import parse_tsv

logger = logging.getLogger(__name__)

# Pause between AI calls (seconds), never after the last record
REQUEST_DELAY = 0.5

FAILURE_TEMPLATE = "[변환 실패: {message}]"
UNKNOWN_ERROR = "알 수 없는 오류"


class NoActivitiesError(ValueError):
    """Input contained no row with 학번, 이름 and 활동내용."""


_ObservationFields = namedtuple('ObservationRecord', [
    'student_id', 'student_name', 'activity_content',
    'observation', 'char_count', 'byte_count', 'error',
])


class ObservationRecord(_ObservationFields):
    """One output row. Counts always come from the observation text."""

    __slots__ = ()

    @classmethod
    def from_observation(cls, activity, observation: str):
        char_count, byte_count = count_text(observation)
        return cls(
            student_id=activity.student_id,
            student_name=activity.student_name,
            activity_content=activity.activity_content,
            observation=observation,
            char_count=char_count,
            byte_count=byte_count,
            error=None,
        )

    @classmethod
    def from_failure(cls, activity, error):
        message = str(error) or UNKNOWN_ERROR
        return cls(
            student_id=activity.student_id,
            student_name=activity.student_name,
            activity_content=activity.activity_content,
            observation=FAILURE_TEMPLATE.format(message=message),
            char_count=0,
            byte_count=0,
            error=message,
        )

    @property
    def failed(self):
        return self.error is not None


class ConversionResult(namedtuple('ConversionResult', ['records', 'error_count'])):
    __slots__ = ()

    @property
    def total(self):
        return len(self.records)

    @property
    def success_count(self):
        return len(self.records) - self.error_count

    def summary(self) -> str:
        """Final notification text shown to the teacher."""
        if self.error_count > 0:
            return f"변환 완료! ({self.success_count}명 성공, {self.error_count}명 실패)"
        return f"{self.total}명의 교사관찰기록 변환 완료!"


def run_conversion(activities, target_char_count: int, generate, progress_callback=None,
                   delay: float = REQUEST_DELAY, sleep=time.sleep) -> ConversionResult:
    """
    Convert every ActivityRecord into an ObservationRecord, in input order.

    Parameters:
    - activities: sequence of ActivityRecord
    - target_char_count: desired observation length, passed to the prompt
    - generate: callable(system_prompt, user_prompt) -> str
    - progress_callback: optional callable(current, total, student_name),
      current starts at 1 and is reported before each AI call
    - delay: seconds to wait between AI calls
    - sleep: sleep function (replaced in tests)

    Returns ConversionResult(records, error_count).
    """
    activities = list(activities)
    total = len(activities)
    records = []
    error_count = 0

    for i, activity in enumerate(activities):
        if progress_callback is not None:
            progress_callback(i + 1, total, activity.student_name)
        logger.info("[%d/%d] Converting %s", i + 1, total, activity.student_id)

        user_prompt = build_user_prompt(activity, target_char_count)
        try:
            observation = generate(SYSTEM_PROMPT, user_prompt)
            record = ObservationRecord.from_observation(activity, observation)
        except Exception as e:
            logger.error("Error processing %s: %s", activity.student_id, e)
            error_count += 1
            record = ObservationRecord.from_failure(activity, e)
        records.append(record)

        if i < total - 1 and delay > 0:
            sleep(delay)

    logger.info("Conversion finished: %d records, %d failed", total, error_count)
    return ConversionResult(records=records, error_count=error_count)


def convert_text(raw_text: str, batch_config, progress_callback=None, provider=None,
                 delay: float = REQUEST_DELAY, sleep=time.sleep) -> ConversionResult:
    """Parse pasted TSV and run the pipeline with the configured provider.

    Raises NoActivitiesError before any AI call when nothing parses.
    """
    activities = parse_tsv(raw_text)
    if not activities:
        raise NoActivitiesError("변환할 데이터가 없습니다.")

    if provider is None:
        provider = get_provider(batch_config)

    return run_conversion(
        activities,
        batch_config.target_char_count,
        provider.generate,
        progress_callback=progress_callback,
        delay=delay,
        sleep=sleep,
    )
