"""
NEIS Observer Services
======================

Business logic for converting student activities into teacher observations.

Services:
- neis_text: NEIS character/byte counting
- tsv_parser: spreadsheet row parsing
- prompts: system and per-student prompts
- providers: OpenAI / Claude / Gemini generation
- conversion_service: the sequential conversion pipeline
- report_service: Markdown/TSV report rendering
"""

# Services are imported directly when needed to avoid circular imports
# Example: from neis_observer.services.neis_text import count_text

__all__ = [
    'neis_text',
    'tsv_parser',
    'prompts',
    'providers',
    'conversion_service',
    'report_service',
]
