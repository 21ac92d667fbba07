"""Command that parses a puppet file and prints its metadata."""

from __future__ import annotations

import argparse
import time
from pathlib import Path
from typing import Optional, Sequence

from .inp import ParseInpError, parse_inp


def _format_elapsed(seconds: float) -> str:
    nanos = seconds * 1e9
    if nanos >= 1e9:
        return f"{seconds:.2f}s"
    if nanos >= 1e6:
        return f"{nanos / 1e6:.2f}ms"
    if nanos >= 1e3:
        return f"{nanos / 1e3:.2f}µs"
    return f"{nanos:.2f}ns"


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse the puppet file named on the command line and print what it holds."""
    parser = argparse.ArgumentParser(prog="parse-inp", description="Parse a puppet file and print its metadata.")
    parser.add_argument("inp_path", type=Path, help="Path to the .inp or .inx file.")
    args = parser.parse_args(argv)

    data = args.inp_path.read_bytes()

    start = time.perf_counter()
    try:
        model = parse_inp(data)
    except ParseInpError as err:
        print(err)
        return 0
    elapsed = time.perf_counter() - start
    print(f"parse_inp() took: {_format_elapsed(elapsed)}")

    print(f"== Puppet Meta ==\n{model.puppet.meta}")
    if not model.vendors:
        print("(No Vendor Data)\n")
    else:
        print("== Vendor Data ==")
        for vendor in model.vendors:
            print(vendor)
    return 0