#!/usr/bin/env python3
"""
varstring inspector

Usage:
    python vstr.py <text> [--file PATH] [--config PATH] [--trace N] [--describe] [--stats]

Examples:
    python vstr.py "Hello, world!"                 # Print the value
    python vstr.py "Hello, world!" --describe      # Also show representation details
    python vstr.py --file notes.txt --stats        # Load bytes from a file, show heap stats
    python vstr.py "some text" --config vs.toml    # Use settings from a TOML file
"""

import sys
import argparse

from varstring import (
    StringValue, StringValueError, load_config, set_trace_level,
    dump_value, dump_stats,
)
from varstring import config


def inspect_value(data, show_describe: bool = False, show_stats: bool = False,
                  out=None):
    """Build a StringValue from `data` (str or bytes) and print it with optional diagnostics."""
    if out is None:
        out = sys.stdout

    value = StringValue(data)
    value.display(out)
    out.write("\n")

    if show_describe:
        dump_value(value, file=out)

    if show_stats:
        dump_stats(file=out)

    return value


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Inspect how varstring stores a string",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s "Hello, world!"                 Print the value
  %(prog)s "Hello, world!" --describe      Show representation details
  %(prog)s --file notes.txt --stats        Read bytes from a file, show heap stats
  %(prog)s "text" --config vs.toml         Use settings from a TOML file
        """
    )

    parser.add_argument("text", nargs="?", help="Text to store")
    parser.add_argument("-f", "--file", help="Read the content from a file instead")
    parser.add_argument("-c", "--config", help="TOML file with [thresholds] and [varstring] tables")
    parser.add_argument("--trace", type=int, help="Trace level (0 none, 1 ops, 2 detail)")
    parser.add_argument("--describe", action="store_true",
                        help="Print kind, length and capacity")
    parser.add_argument("--stats", action="store_true",
                        help="Print heap statistics")

    args = parser.parse_args(argv)

    if args.text is None and args.file is None:
        parser.error("either text or --file is required")

    try:
        if args.config:
            config.configure(load_config(args.config))
        if args.trace is not None:
            set_trace_level(args.trace)

        if args.file:
            with open(args.file, 'rb') as f:
                data = f.read()
        else:
            data = args.text

        inspect_value(data, show_describe=args.describe, show_stats=args.stats)
    except (StringValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Internal error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
