import argparse
import logging
import sys

from .report import print_report, SEPARATOR
from .trace import simulate, TraceError

logger = logging.getLogger("memsim")

def build_parser():
    parser = argparse.ArgumentParser(
            prog="memsim",
            description="Simulate first-fit contiguous memory allocation driven by a REQUEST/RELEASE trace",
            )
    parser.add_argument('input_file', nargs='?', help='trace file, first line is total memory in KB')
    parser.add_argument('--strict', action="store_true", help='abort on unknown or malformed trace lines instead of skipping them')
    parser.add_argument('--check', action="store_true", help='verify block list invariants after every command')
    parser.add_argument('-v','--verbose', action="store_true", help='debug diagnostics on stderr')
    return parser

def main(argv=None):
    args = build_parser().parse_args(argv)

    # diagnostics go to whatever sys.stderr is at call time
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    prev_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if args.verbose else logging.WARNING)
    try:
        return run(args)
    finally:
        logger.removeHandler(handler)
        logger.setLevel(prev_level)

def run(args):
    if args.input_file is None:
        print("Usage: memsim <input_file>")
        print("Example: memsim memory_requests.txt")
        return 0

    print(SEPARATOR)
    print("Memory Allocation Simulator (First-Fit)")
    print(SEPARATOR + "\n")
    print(f"Reading from: {args.input_file}")

    try:
        sim = simulate(args.input_file, strict=args.strict, check=args.check)
    except FileNotFoundError:
        logger.error(f"Error: File not found - {args.input_file}")
        return 0
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading file: {e}")
        sim = getattr(e, "partial", None)
    except TraceError as e:
        logger.error(str(e))
        sim = getattr(e, "partial", None)

    if sim is not None:
        print_report(sim)
    return 0

if __name__ == "__main__":
    sys.exit(main())
