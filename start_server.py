#!/usr/bin/env python3
"""Launch the wasteroute API under uvicorn, honouring the platform's PORT variable."""

import os
import subprocess
import sys

DEFAULT_PORT = 8000


def resolve_port(raw: str | None) -> int:
    if not raw:
        return DEFAULT_PORT
    try:
        return int(raw)
    except ValueError:
        print(f"Warning: ignoring non-numeric PORT '{raw}', using {DEFAULT_PORT}", file=sys.stderr)
        return DEFAULT_PORT


def main() -> int:
    port = resolve_port(os.environ.get("PORT"))

    # Running from a checkout without `pip install -e .`
    src_dir = os.path.abspath("src")
    if os.path.isdir(src_dir):
        existing = os.environ.get("PYTHONPATH")
        os.environ["PYTHONPATH"] = os.pathsep.join(filter(None, [src_dir, existing]))

    cmd = [
        sys.executable, "-m", "uvicorn", "wasteroute.main:app",
        "--host", "0.0.0.0",
        "--port", str(port),
        "--proxy-headers",
        "--forwarded-allow-ips", "*",
    ]
    print(f"Starting wasteroute on port {port}...", file=sys.stderr)
    try:
        return subprocess.call(cmd)
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())
