#!/usr/bin/env python3
"""
NEIS Observer - 학생활동 → 교사관찰기록 변환
==========================================
Run: python3 -m neis_observer.app
Then POST pasted spreadsheet rows to http://localhost:3000/api/convert
and poll /api/status.
"""

import logging
from datetime import datetime

from flask import Flask
from flask_cors import CORS

from .config import config, HOST, PORT, DEBUG
from .routes import register_routes
from .services.conversion_service import convert_text, REQUEST_DELAY
from .services.providers import get_provider
from .services.report_service import write_report

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)

# Pause between AI calls; tests set this to 0
CONVERSION_DELAY = REQUEST_DELAY

# ══════════════════════════════════════════════════════════════
# CONVERSION STATE MANAGEMENT
# ══════════════════════════════════════════════════════════════

conversion_state = {
    "is_running": False,
    "progress": 0,
    "total": 0,
    "current_student": "",
    "log": [],
    "complete": False,
    "error": None,
    "error_count": 0,
    "report_path": None,
    "message": "",
}


def reset_state():
    conversion_state.update({
        "is_running": False,
        "progress": 0,
        "total": 0,
        "current_student": "",
        "log": [],
        "complete": False,
        "error": None,
        "error_count": 0,
        "report_path": None,
        "message": "",
    })


def _on_progress(current, total, student_name):
    conversion_state["progress"] = current
    conversion_state["total"] = total
    conversion_state["current_student"] = student_name
    conversion_state["log"].append(f"{current}/{total} - {student_name} 변환 중...")


# ══════════════════════════════════════════════════════════════
# CONVERSION THREAD
# ══════════════════════════════════════════════════════════════

def run_conversion_thread(data, batch_config):
    """Convert pasted rows and write the report; runs in a background thread.

    Every failure ends up in conversion_state["error"]; nothing is raised.
    """
    conversion_state["is_running"] = True
    try:
        provider = get_provider(batch_config)
        result = convert_text(
            data,
            batch_config,
            progress_callback=_on_progress,
            provider=provider,
            delay=CONVERSION_DELAY,
        )
        conversion_state["error_count"] = result.error_count

        report_path = write_report(result.records, batch_config.output_folder, datetime.now())
        conversion_state["report_path"] = report_path
        conversion_state["message"] = result.summary()
        conversion_state["log"].append(result.summary())
        conversion_state["log"].append(f"결과 저장: {report_path}")
    except Exception as e:
        logger.exception("Conversion failed")
        conversion_state["error"] = str(e)
        conversion_state["log"].append(f"❌ Error: {e}")
    finally:
        conversion_state["is_running"] = False
        conversion_state["complete"] = True


register_routes(app, conversion_state, run_conversion_thread, reset_state)


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config.load()
    problems = config.validate()
    if problems:
        logger.warning("Settings incomplete: %s", "; ".join(problems))
    app.run(host=HOST, port=PORT, debug=DEBUG)


if __name__ == '__main__':
    main()
