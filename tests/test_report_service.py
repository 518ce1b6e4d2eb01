"""
Test: Markdown/TSV rendering, statistics and writing the result note.
"""
import base64
from datetime import datetime

import pytest

from neis_observer.services.conversion_service import ObservationRecord
from neis_observer.services.report_service import (
    render_markdown_table, render_tsv, render_report, compute_stats,
    encode_for_clipboard, escape_markdown_cell, clean_tsv_field,
    report_filename, write_report,
)
from neis_observer.services.tsv_parser import ActivityRecord, parse_tsv

NOW = datetime(2024, 3, 15, 9, 5, 30)


@pytest.fixture
def records(sample_activities):
    return [
        ObservationRecord.from_observation(sample_activities[0], "리더십이 돋보임."),
        ObservationRecord.from_failure(sample_activities[1], "OpenAI API 오류: 500"),
        ObservationRecord.from_observation(sample_activities[2], "탐구 | 보고서\n작성함."),
    ]


class TestEscaping:
    def test_pipe_escaped(self):
        assert escape_markdown_cell("a|b") == "a\\|b"

    def test_newlines_replaced(self):
        assert escape_markdown_cell("a\nb\r\nc\rd") == "a b c d"

    def test_numbers(self):
        assert escape_markdown_cell(12) == "12"

    def test_tsv_control_characters(self):
        assert clean_tsv_field("a\tb\nc\rd\x00e") == "a b c d e"


class TestMarkdownTable:
    def test_header(self, records):
        lines = render_markdown_table(records).splitlines()
        assert lines[0] == "| 학번 | 이름 | 활동내용 | 교사관찰기록 | 글자수 | 바이트수 |"
        assert lines[1].startswith("|------|")

    def test_one_line_per_record(self, records):
        lines = render_markdown_table(records).splitlines()
        assert len(lines) == 2 + len(records)

    def test_row_order_matches_input(self, records):
        lines = render_markdown_table(records).splitlines()[2:]
        assert [line.split(" | ")[0] for line in lines] == ["| 10101", "| 10102", "| 10103"]

    def test_free_text_escaped(self, records):
        row = render_markdown_table(records).splitlines()[4]
        assert "탐구 \\| 보고서 작성함." in row
        assert row.endswith(f"| {records[2].char_count} | {records[2].byte_count} |")

    def test_failed_row(self, records):
        row = render_markdown_table(records).splitlines()[3]
        assert "[변환 실패: OpenAI API 오류: 500] | 0 | 0 |" in row

    def test_empty(self):
        assert len(render_markdown_table([]).splitlines()) == 2


class TestTsv:
    def test_header_and_rows(self, records):
        lines = render_tsv(records).split("\n")
        assert lines[0] == "학번\t이름\t활동내용\t교사관찰기록\t글자수\t바이트수"
        assert len(lines) == 4
        assert all(line.count("\t") == 5 for line in lines)

    def test_without_header(self, records):
        assert len(render_tsv(records, include_header=False).split("\n")) == 3

    def test_ids_and_names_survive_reparse(self, records):
        reparsed = parse_tsv(render_tsv(records, include_header=False))
        assert [(r.student_id, r.student_name) for r in reparsed] == [
            (r.student_id, r.student_name) for r in records
        ]

    def test_activity_content_is_lossy_on_reparse(self):
        activity = ActivityRecord("1", "홍길동", "봉사\t활동\n기록")
        record = ObservationRecord.from_observation(activity, "성실함.")
        reparsed = parse_tsv(render_tsv([record], include_header=False))[0]
        # Tabs/newlines became spaces and trailing columns fold into the content
        assert reparsed.activity_content.startswith("봉사 활동 기록")
        assert reparsed.activity_content != activity.activity_content

    def test_clipboard_encoding(self, records):
        tsv = render_tsv(records)
        assert base64.b64decode(encode_for_clipboard(tsv)).decode("utf-8") == tsv


class TestStats:
    def test_includes_failed_records(self, records):
        stats = compute_stats(records)
        assert stats["total"] == 3
        expected_chars = (records[0].char_count + 0 + records[2].char_count) / 3
        assert stats["average_chars"] == pytest.approx(expected_chars)

    def test_empty(self):
        assert compute_stats([]) == {"total": 0, "average_chars": 0, "average_bytes": 0}


class TestRenderReport:
    def test_sections(self, records):
        report = render_report(records, NOW)
        assert report.startswith("# 교사관찰기록 변환 결과")
        assert "생성일시: 2024-03-15 09:05:30" in report
        assert "총 인원: 3명" in report
        assert "## 결과 테이블" in report
        assert "열 순서: 학번, 이름, 활동내용, 교사관찰기록, 글자수, 바이트수" in report
        assert "```tsv\n10101\t김철수" in report
        assert encode_for_clipboard(render_tsv(records, include_header=False)) in report
        assert "| 총 인원 | 3명 |" in report

    def test_exported_tsv_reparses_to_same_students(self, records):
        report = render_report(records, NOW)
        block = report.split("```tsv\n", 1)[1].split("\n```", 1)[0]
        reparsed = parse_tsv(block)
        assert [(r.student_id, r.student_name) for r in reparsed] == [
            (r.student_id, r.student_name) for r in records
        ]

    def test_clipboard_copy_reparses_to_same_students(self, records):
        report = render_report(records, NOW)
        encoded = report.split("<summary>Base64 (클립보드 전송용)</summary>\n\n```\n", 1)[1].split("\n```", 1)[0]
        reparsed = parse_tsv(base64.b64decode(encoded).decode("utf-8"))
        assert [r.student_id for r in reparsed] == ["10101", "10102", "10103"]

    def test_averages_rounded_half_up(self, sample_activities):
        records = [
            ObservationRecord.from_observation(sample_activities[0], "ab"),
            ObservationRecord.from_observation(sample_activities[1], "abc"),
        ]
        report = render_report(records, NOW)
        assert "| 평균 글자 수 | 3자 |" in report
        assert "| 평균 바이트 수 | 3 바이트 |" in report


class TestWriteReport:
    def test_filename(self):
        assert report_filename(NOW) == "교사관찰기록_2024-03-15_0905.md"

    def test_writes_into_new_folder(self, tmp_path, records):
        folder = tmp_path / "results" / "2024"
        path = write_report(records, str(folder), NOW)
        assert path == str(folder / "교사관찰기록_2024-03-15_0905.md")
        with open(path, encoding="utf-8") as f:
            assert f.read() == render_report(records, NOW)

    def test_defaults_to_current_directory(self, tmp_path, monkeypatch, records):
        monkeypatch.chdir(tmp_path)
        path = write_report(records, "", NOW)
        assert (tmp_path / "교사관찰기록_2024-03-15_0905.md").exists()
        assert path.endswith("교사관찰기록_2024-03-15_0905.md")

    def test_does_not_overwrite(self, tmp_path, records):
        write_report(records, str(tmp_path), NOW)
        with pytest.raises(FileExistsError):
            write_report(records, str(tmp_path), NOW)

    def test_write_failure_propagates(self, tmp_path, records):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a folder")
        with pytest.raises(OSError):
            write_report(records, str(blocker / "sub"), NOW)
