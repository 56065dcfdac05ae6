"""
Presentation layer — Rendering resolved doclets for the terminal.
"""

from .formatters import format_doclets, format_table, format_json, safe_print, truncate

__all__ = ['format_doclets', 'format_table', 'format_json', 'safe_print', 'truncate']
