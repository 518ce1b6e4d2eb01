"""
Settings-related API routes for NEIS Observer.
Handles provider/key/model selection, target length and output folder.
"""
from flask import Blueprint, request, jsonify

from ..config import config, DEFAULT_MODELS
from ..services.neis_text import WIDE_BYTES, NARROW_BYTES

settings_bp = Blueprint('settings', __name__)


def _mask_key(key):
    if not key:
        return ""
    if len(key) <= 8:
        return "*" * len(key)
    return key[:3] + "*" * (len(key) - 7) + key[-4:]


@settings_bp.route('/api/settings', methods=['GET'])
def get_settings():
    """Current settings with the API key masked."""
    data = config.to_dict()
    data["api_key"] = _mask_key(config.effective_api_key())
    data["has_api_key"] = bool(config.effective_api_key())
    data["default_model"] = DEFAULT_MODELS.get(config.api_provider, "")
    data["providers"] = sorted(DEFAULT_MODELS)
    return jsonify(data)


@settings_bp.route('/api/settings', methods=['POST'])
def save_settings():
    """Partial update; unknown keys are ignored."""
    data = request.get_json(silent=True) or {}

    if 'target_char_count' in data:
        try:
            target = int(data['target_char_count'])
        except (TypeError, ValueError):
            target = 0
        if target <= 0:
            return jsonify({"error": "target_char_count must be a positive integer"}), 400

    # A masked key echoed back from GET is not a new key
    if data.get('api_key') and data['api_key'] == _mask_key(config.effective_api_key()):
        data = {k: v for k, v in data.items() if k != 'api_key'}

    config.update(data)
    config.save()
    return jsonify({"status": "saved", "problems": config.validate()})


@settings_bp.route('/api/neis-info')
def neis_info():
    """NEIS counting rules, as shown on the settings screen."""
    return jsonify({
        "chars": "모든 문자를 1개로 계산 (한글, 영문, 숫자, 공백, 특수문자)",
        "bytes": {
            "한글, 한자": WIDE_BYTES,
            "영문, 숫자, 특수문자, 공백, 줄바꿈": NARROW_BYTES,
        },
    })
