#!/usr/bin/env python3
"""Smoke-test report integrity under repeated concurrent runs."""

from __future__ import annotations

import argparse
import random
import string
import sys
import tempfile
from collections import Counter
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from contracts.report import parse_report
from dispatch.dispatcher import run_letter_count


def _write_inputs(base: Path, count: int, rng: random.Random) -> dict[str, dict[str, int]]:
    alphabet = string.ascii_letters + string.digits + " \n.,;"
    expected: dict[str, dict[str, int]] = {}
    for idx in range(count):
        text = "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 20_000)))
        path = base / f"input_{idx:03d}.txt"
        path.write_text(text, encoding="ascii")
        letters = Counter(ch.lower() for ch in text if ch in string.ascii_letters)
        expected[str(path)] = {letter: letters.get(letter, 0) for letter in string.ascii_lowercase}
    return expected


def _run_once(base: Path, expected: dict[str, dict[str, int]]) -> str | None:
    output = base / "results.txt"
    summary = run_letter_count(list(expected), output)
    if summary.failed:
        return f"unexpected failures: {summary.failed}"

    blocks = parse_report(output.read_text(encoding="utf-8"))
    if len(blocks) != len(expected):
        return f"expected {len(expected)} blocks, found {len(blocks)}"
    for block in blocks:
        if block.table.as_dict() != expected.get(block.source):
            return f"wrong counts for {block.source}"
    return None


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--files", type=int, default=32)
    parser.add_argument("--rounds", type=int, default=20)
    parser.add_argument("--seed", type=int, default=1234)
    args = parser.parse_args(argv)

    rng = random.Random(args.seed)
    with tempfile.TemporaryDirectory() as tmp:
        base = Path(tmp)
        expected = _write_inputs(base, args.files, rng)
        for round_no in range(1, args.rounds + 1):
            problem = _run_once(base, expected)
            if problem:
                print(f"round {round_no}: {problem}")
                return 1

    print(f"Concurrency smoke-test passed ({args.rounds} rounds x {args.files} files).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
