"""
NEIS Observer
=============

Converts student activity notes pasted from a spreadsheet into teacher
observation records (교사관찰기록) with an AI provider, measured with the
NEIS character/byte convention.

Structure:
- routes/: API route blueprints
- services/: Business logic services
- config.py: Configuration management
- app.py: Flask application
- cli.py: Command-line entry point
"""

from .config import config, Config, BatchConfig

__version__ = "1.0.0"

__all__ = ['config', 'Config', 'BatchConfig']
