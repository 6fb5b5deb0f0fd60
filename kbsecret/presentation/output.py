"""
Output — Encoding-safe printing of record contents

Record fields are user data and may contain characters the output stream
cannot encode. Those are replaced with '?' instead of aborting a listing
halfway through.
"""

import sys


def safe_print(text: str, end: str = '\n', file=None) -> None:
    """
    Print with graceful encoding fallback.

    Args:
        text: Text to print (may contain any Unicode)
        end: String appended after text (default: newline)
        file: Output stream (default: sys.stdout)
    """
    if file is None:
        file = sys.stdout

    try:
        print(text, end=end, file=file)
    except UnicodeEncodeError:
        encoding = getattr(file, 'encoding', 'utf-8') or 'utf-8'
        encoded = text.encode(encoding, errors='replace')
        print(encoded.decode(encoding), end=end, file=file)
