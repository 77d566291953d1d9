"""Run the capture tool over a file of targets, one subprocess per target."""
import asyncio
import os
import signal
import sys
from collections import Counter
from pathlib import Path
from typing import Callable, Iterator, Optional

from pydantic import ValidationError

from http_screenshotter.capture import EXIT_MISMATCH, EXIT_OK
from http_screenshotter.console import console
from http_screenshotter.models import CaptureReport, Target

CAPTURED = "captured"
MISMATCH = "mismatch"
FAILED = "failed"
TIMEOUT = "timeout"
INVALID = "invalid"
OUTCOMES = (CAPTURED, MISMATCH, FAILED, TIMEOUT, INVALID)


class InvalidTargetLine(ValueError):
    def __init__(self, lineno: int, line: str, reason: str):
        super().__init__(f"line {lineno}: {reason}: {line!r}")
        self.lineno = lineno
        self.line = line


def parse_target_line(lineno: int, line: str) -> list[str]:
    """Split ``protocol host [port]`` into capture arguments, validating them."""
    fields = line.split()
    if len(fields) not in (2, 3):
        raise InvalidTargetLine(lineno, line, "expected 'protocol host [port]'")
    try:
        Target.from_args(*fields)
    except ValidationError as e:
        raise InvalidTargetLine(lineno, line, str(e.errors()[0]["msg"])) from e
    return fields


def read_targets(path: Path) -> Iterator[tuple[int, str]]:
    with open(path) as file:
        for lineno, line in enumerate(file, start=1):
            line = line.split("#", 1)[0].strip()
            if line:
                yield lineno, line


def _kill(proc) -> None:
    # the capture runs in its own session so the browser dies with it
    if hasattr(os, "killpg"):
        try:
            os.killpg(proc.pid, signal.SIGKILL)
            return
        except ProcessLookupError:
            return
    proc.kill()


async def run_one(
    directory: str, args: list[str], timeout: float
) -> tuple[str, Optional[CaptureReport]]:
    cmd = [sys.executable, "-m", "http_screenshotter.cli.capture", directory, *args]
    if not console.quiet:
        cmd.append("--verbose")

    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=None if not console.quiet else asyncio.subprocess.DEVNULL,
        start_new_session=True,
    )
    try:
        stdout, _ = await asyncio.wait_for(proc.communicate(), timeout)
    except asyncio.TimeoutError:
        console.log(f"Killing stalled screenshot of {' '.join(args)}")
        _kill(proc)
        await proc.wait()
        return TIMEOUT, None

    if proc.returncode == EXIT_MISMATCH:
        return MISMATCH, None
    if proc.returncode != EXIT_OK:
        console.log(f"No screenshot taken of {' '.join(args)}: exit {proc.returncode}")
        return FAILED, None

    lines = stdout.decode().strip().splitlines()
    try:
        report = CaptureReport.model_validate_json(lines[-1])
    except (IndexError, ValidationError) as e:
        console.log(f"Invalid JSON returned for {' '.join(args)}: {e}")
        return FAILED, None
    return CAPTURED, report


async def run_batch(
    targets_file: Path,
    directory: str,
    timeout: float,
    on_report: Optional[Callable[[CaptureReport], None]] = None,
) -> Counter:
    """Capture every target in ``targets_file`` sequentially and tally outcomes."""
    stats = Counter({outcome: 0 for outcome in OUTCOMES})

    for lineno, line in read_targets(targets_file):
        try:
            args = parse_target_line(lineno, line)
        except InvalidTargetLine as e:
            console.log(str(e))
            stats[INVALID] += 1
            continue

        outcome, report = await run_one(directory, args, timeout)
        stats[outcome] += 1
        if report is not None and on_report is not None:
            on_report(report)

    return stats
