"""Run ruff, mypy and pytest for agent-hoppscotch and report one JSON summary.

Usage:
    python scripts/quality_gate.py              # run everything
    python scripts/quality_gate.py --skip-tests # lint + types only
    python scripts/quality_gate.py --fix        # let ruff fix what it can first
"""

from __future__ import annotations

import argparse
import json
import re
import subprocess
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent

# The mcp_server package needs the optional extra; keep it out of the type gate.
MYPY_TARGETS = [
    "hoppscotch_cli/_utils.py",
    "hoppscotch_cli/api.py",
    "hoppscotch_cli/client.py",
    "hoppscotch_cli/config.py",
    "hoppscotch_cli/envelopes.py",
    "hoppscotch_cli/exceptions.py",
    "hoppscotch_cli/formatters/",
    "hoppscotch_cli/operations.py",
    "hoppscotch_cli/types.py",
]


def _run(cmd: list[str]) -> subprocess.CompletedProcess:
    return subprocess.run(cmd, capture_output=True, text=True, cwd=str(ROOT), timeout=300)


def _check(cmd: list[str], count_pattern: str, count_key: str) -> dict:
    """Run one tool; count the output lines matching *count_pattern* on failure."""
    t0 = time.monotonic()
    r = _run([sys.executable, "-m", *cmd])
    result: dict = {
        "status": "pass" if r.returncode == 0 else "fail",
        "duration_s": round(time.monotonic() - t0, 1),
    }
    if r.returncode != 0:
        text = r.stdout + r.stderr
        result[count_key] = sum(1 for line in text.splitlines() if re.search(count_pattern, line))
        result["output"] = text.strip()[-2000:]
    return result


def check_pytest() -> dict:
    t0 = time.monotonic()
    r = _run([sys.executable, "-m", "pytest", "tests/", "-q", "--no-header", "--tb=short"])
    counts = {"passed": 0, "failed": 0}
    # Summary line: "3 failed, 585 passed in 2.1s"
    for line in reversed(r.stdout.strip().splitlines()):
        found = {k: re.search(rf"(\d+)\s+{k}", line) for k in counts}
        if any(found.values()):
            counts.update({k: int(m.group(1)) for k, m in found.items() if m})
            break
    result: dict = {
        "status": "pass" if r.returncode == 0 else "fail",
        "duration_s": round(time.monotonic() - t0, 1),
        **counts,
    }
    if r.returncode != 0:
        result["output"] = r.stdout.strip()[-2000:]
    return result


def main() -> None:
    parser = argparse.ArgumentParser(description="Run all quality checks")
    parser.add_argument("--skip-tests", action="store_true", help="Skip pytest")
    parser.add_argument("--fix", action="store_true", help="Auto-fix ruff issues first")
    args = parser.parse_args()

    t0 = time.monotonic()
    if args.fix:
        _run([sys.executable, "-m", "ruff", "check", "--fix", "."])

    checks: dict[str, dict] = {}
    print("Running ruff lint...", file=sys.stderr)
    checks["ruff_lint"] = _check(["ruff", "check", "."], r"^\S+:\d+:\d+:", "errors")
    print("Running ruff format...", file=sys.stderr)
    checks["ruff_format"] = _check(
        ["ruff", "format", "--check", "."], r"^Would reformat", "files_to_reformat"
    )
    print("Running mypy...", file=sys.stderr)
    checks["mypy"] = _check(["mypy", *MYPY_TARGETS], r": error:", "errors")
    if args.skip_tests:
        checks["pytest"] = {"status": "skip", "reason": "--skip-tests"}
    else:
        print("Running pytest...", file=sys.stderr)
        checks["pytest"] = check_pytest()

    overall = "pass" if all(c["status"] in ("pass", "skip") for c in checks.values()) else "fail"
    print(
        json.dumps(
            {
                "overall": overall,
                "checks": checks,
                "total_duration_s": round(time.monotonic() - t0, 1),
            },
            indent=2,
        )
    )


if __name__ == "__main__":
    main()
