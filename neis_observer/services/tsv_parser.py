"""
Parse student activity rows pasted from a spreadsheet.

Expected format, one student per line:
    학번 <TAB> 이름 <TAB> 활동내용 [<TAB> more activity columns...]
"""
from collections import namedtuple

ActivityRecord = namedtuple('ActivityRecord', ['student_id', 'student_name', 'activity_content'])

MIN_FIELDS = 3
PREVIEW_LIMIT = 5
PREVIEW_CONTENT_CHARS = 50


def parse_tsv(data: str) -> list:
    """Parse tab-separated text into ActivityRecords, keeping input order.

    Lines with fewer than three fields are dropped without error. Columns
    after the second are joined with a single space into activity_content.
    """
    activities = []
    if not data:
        return activities

    for line in data.strip().split('\n'):
        parts = line.split('\t')
        if len(parts) < MIN_FIELDS:
            continue
        activities.append(ActivityRecord(
            student_id=parts[0].strip(),
            student_name=parts[1].strip(),
            activity_content=' '.join(parts[2:]).strip(),
        ))

    return activities


def preview_activities(data: str, limit: int = PREVIEW_LIMIT) -> str:
    """Short human-readable summary of what parse_tsv will produce."""
    activities = parse_tsv(data)
    if not activities:
        return "유효한 데이터가 없습니다. 형식: 학번 탭 이름 탭 활동내용"

    lines = [f"총 {len(activities)}명의 학생 데이터:", ""]
    for activity in activities[:limit]:
        snippet = activity.activity_content[:PREVIEW_CONTENT_CHARS]
        lines.append(f"- {activity.student_id} {activity.student_name}: {snippet}...")
    if len(activities) > limit:
        lines.append("")
        lines.append(f"... 외 {len(activities) - limit}명")

    return '\n'.join(lines)
