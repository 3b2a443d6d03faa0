import subprocess

_TRUTHY = {"1", "true", "yes", "on"}


def check_graphviz_installed():
    try:
        subprocess.run(["dot", "-V"], check=True, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        return True
    except (subprocess.CalledProcessError, FileNotFoundError):
        return False


def is_truthy(value) -> bool:
    return value is not None and value.strip().lower() in _TRUTHY


def has_blank_line(s: str) -> bool:
    """True if any line of s is empty after trimming whitespace. Only "\\n"
    ends a line, and a final newline does not start an empty line."""
    if s == "":
        return False
    lines = s.split("\n")
    if s.endswith("\n"):
        lines.pop()
    return any(line.strip() == "" for line in lines)
