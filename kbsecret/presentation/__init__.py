"""
Presentation — Display layer for kbsecret

- Messages: labelled Fatal / Warning / Info lines (rich)
- Output: encoding-safe printing of record data
"""

from .messages import MessageWriter, LABEL_STYLES
from .output import safe_print

__all__ = [
    "MessageWriter", "LABEL_STYLES",
    "safe_print",
]
