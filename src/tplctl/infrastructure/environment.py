"""Host environment probing: platform facts and tool versions."""

from __future__ import annotations

import platform
import subprocess

_PROBE_TIMEOUT = 10.0


def probe_version(executable: str) -> str | None:
    """Return ``<executable> --version`` output, or None if it can't run."""
    try:
        completed = subprocess.run(
            [executable, "--version"],
            capture_output=True,
            text=True,
            timeout=_PROBE_TIMEOUT,
            check=True,
        )
    except (OSError, subprocess.SubprocessError):
        return None
    output = completed.stdout.strip()
    return output or None


def system_info() -> dict[str, str]:
    """OS, CPU architecture, and Python version of the running host."""
    return {
        "os": f"{platform.system()} {platform.release()}".strip(),
        "cpu": platform.machine() or "unknown",
        "python": platform.python_version(),
    }
