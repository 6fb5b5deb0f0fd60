"""
Content — Static text content for CLI display

Text is data, not code embedded in methods.
"""

from .help_text import HELP_TEXT, EXTERNAL_SECTION

__all__ = ['HELP_TEXT', 'EXTERNAL_SECTION']
