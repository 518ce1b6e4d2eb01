"""
Conversion API routes for NEIS Observer.
Handles input preview, byte estimates, starting a batch and polling status.

The conversion thread and its state live in app.py; they are handed to this
blueprint through init_conversion_routes.
"""
import threading

from flask import Blueprint, request, jsonify

from ..config import config
from ..services.neis_text import count_text, estimate_bytes
from ..services.tsv_parser import parse_tsv, preview_activities

conversion_bp = Blueprint('conversion', __name__)

# These will be set by app.py during initialization
conversion_state = None
run_conversion_thread = None
reset_state = None

_start_lock = threading.Lock()


def init_conversion_routes(state_ref, thread_fn, reset_fn):
    """Initialize conversion routes with references from main app."""
    global conversion_state, run_conversion_thread, reset_state
    conversion_state = state_ref
    run_conversion_thread = thread_fn
    reset_state = reset_fn


@conversion_bp.route('/api/preview', methods=['POST'])
def preview():
    """Parse pasted rows without converting anything."""
    data = (request.get_json(silent=True) or {}).get('data', '')
    activities = parse_tsv(data)
    return jsonify({
        "count": len(activities),
        "rows": [a._asdict() for a in activities],
        "preview": preview_activities(data),
    })


@conversion_bp.route('/api/estimate')
def estimate():
    chars = request.args.get('chars', type=int)
    if chars is None or chars <= 0:
        return jsonify({"error": "chars must be a positive integer"}), 400
    return jsonify({"chars": chars, "estimated_bytes": estimate_bytes(chars)})


@conversion_bp.route('/api/count', methods=['POST'])
def count():
    text = (request.get_json(silent=True) or {}).get('text', '')
    chars, byte_count = count_text(text)
    return jsonify({"chars": chars, "bytes": byte_count})


@conversion_bp.route('/api/convert', methods=['POST'])
def start_conversion():
    """Validate input and settings, then convert in a background thread."""
    if conversion_state is None:
        return jsonify({"error": "Conversion not initialized"}), 500
    payload = request.get_json(silent=True) or {}
    data = payload.get('data', '')

    problems = config.validate()
    if problems:
        return jsonify({"error": problems[0], "problems": problems}), 400

    target = payload.get('target_char_count', config.target_char_count)
    try:
        target = int(target)
    except (TypeError, ValueError):
        target = 0
    if target <= 0:
        return jsonify({"error": "target_char_count must be a positive integer"}), 400

    if not parse_tsv(data):
        return jsonify({"error": "변환할 데이터가 없습니다."}), 400

    batch_config = config.snapshot(target_char_count=target)

    # Check-and-start must be atomic across request threads
    with _start_lock:
        if conversion_state.get("is_running"):
            return jsonify({"error": "Conversion already running"}), 409
        reset_state()
        conversion_state["is_running"] = True
        thread = threading.Thread(target=run_conversion_thread, args=(data, batch_config), daemon=True)
        thread.start()

    return jsonify({"status": "started", "target_char_count": target})


@conversion_bp.route('/api/status')
def get_status():
    """Get current conversion status."""
    if conversion_state is None:
        return jsonify({"error": "Conversion not initialized"}), 500
    return jsonify(conversion_state)
