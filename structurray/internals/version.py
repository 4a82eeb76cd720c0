from __future__ import annotations
import sys, platform, datetime

from structurray import __version__ as app_ver, __dev__ as is_dev

def _ensure_utf8_stdout() -> None:
    reconfigure = getattr(sys.stdout, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(encoding="utf-8")

def _get_versions() -> dict[str, str]:
    import lark

    return {
        "app": app_ver,
        "python": platform.python_version(),
        "lark": getattr(lark, "__version__", "unknown"),
    }

def print_banner() -> None:
    _ensure_utf8_stdout()
    v = _get_versions()
    today = datetime.date.today().isoformat()

    # Only use ANSI styling if stdout is a TTY (interactive terminal)
    use_ansi = sys.stdout.isatty()

    if use_ansi:
        BOLD, DIM, RESET = "\x1b[1m", "\x1b[2m", "\x1b[0m"
    else:
        BOLD, DIM, RESET = "", "", ""

    dev_marker = " (dev)" if is_dev else ""
    print(
        f"{BOLD} structurray pseudo-array generator{RESET} • {v['app']}{dev_marker}\n"
        f"{DIM}Python {v['python']} • lark {v['lark']} • {today}{RESET}\n"
    )
