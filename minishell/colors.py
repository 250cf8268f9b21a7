import sys
from typing import Optional, TextIO

COLORS = {
    "RESET": "\033[0m",
    "RED": "\033[91m",
    "GREEN": "\033[92m",
    "YELLOW": "\033[93m",
    "BLUE": "\033[94m",
    "MAGENTA": "\033[95m",
    "CYAN": "\033[96m",
}


def colorize(
    text: str, color_name: str, stream: Optional[TextIO] = None, enabled: bool = True
) -> str:
    stream = stream or sys.stdout
    if not enabled or not stream.isatty():
        return text
    return f"{COLORS.get(color_name, '')}{text}{COLORS['RESET']}"


def report_error(message: str, use_colors: bool = True) -> None:
    print(colorize(message, "RED", sys.stderr, use_colors), file=sys.stderr, flush=True)
