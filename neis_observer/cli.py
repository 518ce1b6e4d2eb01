"""
Command-line entry point for NEIS Observer.

    neis-observer convert rows.tsv --chars 500
    pbpaste | neis-observer convert -
    neis-observer estimate 500
    neis-observer preview rows.tsv
    neis-observer count "프로젝트 활동에서 리더 역할을 맡음"
    neis-observer setup
"""
import sys
import logging
import argparse

from .config import config, DEFAULT_MODELS, normalize_provider
from .services.conversion_service import convert_text, NoActivitiesError
from .services.neis_text import count_text, estimate_bytes, round_half_up
from .services.report_service import write_report, compute_stats, render_tsv
from .services.tsv_parser import preview_activities

logger = logging.getLogger(__name__)


def _read_input(path):
    if path == '-':
        return sys.stdin.read()
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def _print_progress(current, total, student_name):
    print(f"[{current}/{total}] {student_name} 변환 중...")


def cmd_convert(args):
    config.load()
    if args.chars is not None and args.chars <= 0:
        print("❌ 목표 글자 수는 양의 정수여야 합니다.")
        return 1

    batch_config = config.snapshot(
        provider=args.provider,
        model_id=args.model,
        target_char_count=args.chars,
        output_folder=args.output,
    )
    if not batch_config.api_key:
        print("❌ API 키를 설정해주세요. (neis-observer setup 또는 .env)")
        return 1

    data = _read_input(args.input)

    print("=" * 60)
    print("📚 학생활동 → 교사관찰기록 변환")
    print("=" * 60)
    print(f"🤖 Provider: {batch_config.provider} ({batch_config.model_id})")
    print(f"📝 목표 글자 수: {batch_config.target_char_count}자 "
          f"(예상 {estimate_bytes(batch_config.target_char_count)} 바이트)")
    print()

    try:
        result = convert_text(data, batch_config, progress_callback=_print_progress)
    except NoActivitiesError as e:
        print(f"❌ {e}")
        return 1

    try:
        report_path = write_report(result.records, batch_config.output_folder)
    except OSError as e:
        print(f"❌ 결과 저장 실패: {e}")
        print(result.summary())
        print(render_tsv(result.records, include_header=False))
        return 1
    stats = compute_stats(result.records)

    print()
    print("=" * 60)
    print(f"✅ {result.summary()}")
    print(f"💾 결과 저장: {report_path}")
    print(f"평균 글자 수: {round_half_up(stats['average_chars'])}자, 평균 바이트 수: {round_half_up(stats['average_bytes'])} 바이트")
    for record in result.records:
        if record.failed:
            print(f"   - {record.student_id} {record.student_name}: {record.error}")
    return 0


def cmd_estimate(args):
    if args.chars <= 0:
        print("❌ 목표 글자 수는 양의 정수여야 합니다.")
        return 1
    print(f"예상 바이트 수: {estimate_bytes(args.chars)} 바이트")
    return 0


def cmd_preview(args):
    print(preview_activities(_read_input(args.input)))
    return 0


def cmd_count(args):
    chars, byte_count = count_text(args.text)
    print(f"글자 수: {chars}자, 바이트 수: {byte_count} 바이트")
    return 0


def cmd_setup(args):
    config.load()
    print("\n📋 NEIS Observer Setup\n")

    provider = input(f"AI provider {sorted(DEFAULT_MODELS)} [{config.api_provider}]: ").strip()
    if provider:
        provider = normalize_provider(provider)
        if provider not in DEFAULT_MODELS:
            print(f"❌ Unknown AI provider: {provider}")
            return 1
        config.update({"api_provider": provider})

    api_key = input("API key (blank keeps current / uses .env): ").strip()
    if api_key:
        config.update({"api_key": api_key})

    model_id = input(f"Model ID [{config.effective_model_id()}]: ").strip()
    if model_id:
        config.update({"model_id": model_id})

    target = input(f"Target character count [{config.target_char_count}]: ").strip()
    if target:
        config.update({"target_char_count": target})

    output = input(f"Output folder [{config.output_folder or 'current directory'}]: ").strip()
    if output:
        config.update({"output_folder": output})

    config.save()
    print("\n✅ Configuration saved!")
    for problem in config.validate():
        print(f"⚠️  {problem}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="neis-observer",
        description="학생활동 → 교사관찰기록 변환 (NEIS 글자수/바이트수)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    sub = parser.add_subparsers(dest="command")

    p = sub.add_parser("convert", help="Convert tab-separated rows and write a report")
    p.add_argument("input", help="TSV file, or - for stdin")
    p.add_argument("--chars", type=int, help="Target character count")
    p.add_argument("--provider", help="openai, claude or gemini")
    p.add_argument("--model", help="Model ID")
    p.add_argument("--output", help="Output folder for the report")
    p.set_defaults(func=cmd_convert)

    p = sub.add_parser("estimate", help="Estimated NEIS bytes for a target length")
    p.add_argument("chars", type=int)
    p.set_defaults(func=cmd_estimate)

    p = sub.add_parser("preview", help="Show how input rows will be parsed")
    p.add_argument("input", help="TSV file, or - for stdin")
    p.set_defaults(func=cmd_preview)

    p = sub.add_parser("count", help="NEIS character and byte count of a text")
    p.add_argument("text")
    p.set_defaults(func=cmd_count)

    p = sub.add_parser("setup", help="Configure provider, API key and defaults")
    p.set_defaults(func=cmd_setup)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not getattr(args, "func", None):
        parser.print_help()
        return 1
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
