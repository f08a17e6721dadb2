import subprocess
import sys

# ============================================================
# Helpers
# ============================================================

def run_cmd(cmd):
    """Run command and return stdout."""
    result = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
    if result.returncode != 0:
        raise RuntimeError(result.stderr.strip())
    return result.stdout.strip()


def format_bytes(b: float) -> str:
    """Human-readable byte size."""
    for unit in ("B", "KiB", "MiB", "GiB", "TiB"):
        if abs(b) < 1024:
            return f"{b:.1f} {unit}"
        b /= 1024
    return f"{b:.1f} PiB"


def print_error_and_exit(message: str, code: int = 1):
    """Print a labelled error to stderr and terminate the process."""
    print(f"\033[91m✗ Error: {message}\033[0m", file=sys.stderr)
    sys.exit(code)
