"""
Result report for a conversion batch.

The report is a Markdown note with the results table, a tab-separated copy
for pasting back into a spreadsheet, and average NEIS counts.
"""
import re
import base64
import logging
from datetime import datetime
from pathlib import Path

from .neis_text import round_half_up

logger = logging.getLogger(__name__)

REPORT_TITLE = "교사관찰기록 변환 결과"
FILENAME_PREFIX = "교사관찰기록"

COLUMNS = ['학번', '이름', '활동내용', '교사관찰기록', '글자수', '바이트수']

_NEWLINES = re.compile(r'\r\n|\r|\n')
_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f]')


def escape_markdown_cell(text: str) -> str:
    """Keep free text inside one Markdown table cell."""
    return _NEWLINES.sub(' ', str(text)).replace('|', '\\|')


def clean_tsv_field(text: str) -> str:
    """Replace tabs, newlines and other control characters with spaces."""
    return _CONTROL_CHARS.sub(' ', str(text))


def _row_values(record):
    return [
        record.student_id,
        record.student_name,
        record.activity_content,
        record.observation,
        record.char_count,
        record.byte_count,
    ]


def render_markdown_table(records) -> str:
    lines = [
        '| ' + ' | '.join(COLUMNS) + ' |',
        '|' + '|'.join('------' for _ in COLUMNS) + '|',
    ]
    for record in records:
        cells = [escape_markdown_cell(value) for value in _row_values(record)]
        lines.append('| ' + ' | '.join(cells) + ' |')
    return '\n'.join(lines) + '\n'


def render_tsv(records, include_header: bool = True) -> str:
    """Tab-separated copy of the table. The first three columns parse back
    with parse_tsv; activity text loses any tabs or newlines it had."""
    lines = []
    if include_header:
        lines.append('\t'.join(COLUMNS))
    for record in records:
        lines.append('\t'.join(clean_tsv_field(value) for value in _row_values(record)))
    return '\n'.join(lines)


def encode_for_clipboard(tsv: str) -> str:
    """Base64 of the UTF-8 TSV, for channels that mangle tab characters."""
    return base64.b64encode(tsv.encode('utf-8')).decode('ascii')


def compute_stats(records) -> dict:
    """Totals and arithmetic means over every record, failed ones included."""
    records = list(records)
    total = len(records)
    if total == 0:
        return {"total": 0, "average_chars": 0, "average_bytes": 0}

    return {
        "total": total,
        "average_chars": sum(r.char_count for r in records) / total,
        "average_bytes": sum(r.byte_count for r in records) / total,
    }


def render_report(records, generated_at: datetime = None) -> str:
    generated_at = generated_at or datetime.now()
    stats = compute_stats(records)
    tsv = render_tsv(records, include_header=False)

    return f"""# {REPORT_TITLE}

생성일시: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}
총 인원: {stats['total']}명

## 결과 테이블

{render_markdown_table(records)}
## 스프레드시트 붙여넣기용 (TSV)

열 순서: {', '.join(COLUMNS)}

```tsv
{tsv}
```

<details>
<summary>Base64 (클립보드 전송용)</summary>

```
{encode_for_clipboard(tsv)}
```

</details>

## 통계

| 항목 | 값 |
|------|-----|
| 총 인원 | {stats['total']}명 |
| 평균 글자 수 | {round_half_up(stats['average_chars'])}자 |
| 평균 바이트 수 | {round_half_up(stats['average_bytes'])} 바이트 |
"""


def report_filename(now: datetime) -> str:
    return f"{FILENAME_PREFIX}_{now.strftime('%Y-%m-%d')}_{now.strftime('%H%M')}.md"


def write_report(records, output_folder: str = "", now: datetime = None) -> str:
    """
    Write the report note and return its path.

    The folder is created when missing. An existing file with the same name
    is never overwritten; OSError propagates to the caller.
    """
    now = now or datetime.now()
    folder = Path(output_folder) if output_folder else Path.cwd()
    folder.mkdir(parents=True, exist_ok=True)

    filepath = folder / report_filename(now)
    with open(filepath, 'x', encoding='utf-8') as f:
        f.write(render_report(records, now))

    logger.info("Report saved: %s", filepath)
    return str(filepath)
