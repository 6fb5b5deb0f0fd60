"""
Messages — Labelled status lines on the error stream

    Fatal: Unknown session: `work`.
    Warning: You didn't include yourself in the user list.
    Info: Created session 'work'.

Labels are colored through a rich Console bound to the stream passed in.
Color is off when NO_COLOR was set at startup or the stream is not a
terminal. Message bodies are printed verbatim (no markup, no highlighting).

The Console is handed its own environment mapping built from the startup
snapshot, so FORCE_COLOR, COLUMNS and friends in os.environ are ignored.
"""

from rich.console import Console
from rich.text import Text


LABEL_STYLES = {
    "Fatal": "red",
    "Warning": "yellow",
    "Info": "green",
}


class MessageWriter:
    """Writes Fatal / Warning / Info lines and debug tracebacks."""

    def __init__(self, stream, no_color: bool = False, term: str = ""):
        self.console = Console(
            file=stream,
            no_color=no_color,
            highlight=False,
            soft_wrap=True,
            emoji=False,
            _environ={"TERM": term} if term else {},
        )

    def line(self, label: str, message: str):
        text = Text.assemble((label, LABEL_STYLES.get(label, "")), f": {message}")
        self.console.print(text)

    def fatal(self, message: str):
        self.line("Fatal", message)

    def warning(self, message: str):
        self.line("Warning", message)

    def info(self, message: str):
        self.line("Info", message)

    def traceback(self):
        """Render the exception currently being handled."""
        self.console.print_exception()
