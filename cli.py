# cli.py: command line front end for the Intcode simulator
# Reads comma-separated programs, runs them, drives amplification circuits and summarises traces.

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from intcode_sim.core.computer import IO_TIMEOUT, Computer
from intcode_sim.core.errors import IntcodeError
from intcode_sim.core.observe import TraceSink
from intcode_sim.tools.amplifier import (
    FEED_FORWARD_PHASES,
    FEEDBACK_PHASES,
    NoSolution,
    find_max_signal,
)
from intcode_sim.tools.program_loader import format_program, load_programs
from intcode_sim.tools.trace_analyse import analyze, print_summary


# -----------------------------------------------------------------------------
# Utilities
# -----------------------------------------------------------------------------

def _parse_assignment(text: str) -> Tuple[int, int]:
    addr, sep, value = text.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected ADDR=VALUE, got '{text}'")
    try:
        return int(addr), int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected integers in '{text}'") from None


def _parse_phases(text: str) -> Tuple[int, ...]:
    try:
        return tuple(int(tok) for tok in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma-separated integers, got '{text}'") from None


def _load(path: str) -> Optional[List[List[int]]]:
    try:
        return load_programs(path)
    except (OSError, ValueError) as e:
        print(f"Error: cannot load programs from '{path}': {e}", file=sys.stderr)
        return None


# -----------------------------------------------------------------------------
# Command handlers
# -----------------------------------------------------------------------------

def cmd_run(args: argparse.Namespace) -> int:
    programs = _load(args.program)
    if programs is None:
        return 2

    sink = TraceSink(path=args.trace_file) if args.trace_file else None
    if sink:
        print(f"Tracing to '{args.trace_file}'")

    metrics = []
    for idx, program in enumerate(programs):
        program = list(program)
        for addr, value in args.set or []:
            if not 0 <= addr < len(program):
                print(f"Error: --set address {addr} outside program {idx}", file=sys.stderr)
                return 2
            program[addr] = value

        computer = Computer(program, io_timeout=args.timeout, name=f"pgm-{idx}")
        if sink:
            computer.set_trace_sink(sink)
        if args.input:
            computer.provide_input(args.input)

        try:
            outputs = computer.collect_outputs()
        except IntcodeError as e:
            print(f"pgm {idx}: fault at ip={computer.ip}: {e}", file=sys.stderr)
            return 1

        memory = computer.into_memory()
        print(f"pgm {idx} outputs: {format_program(outputs)}")
        print(f"pgm {idx} mem[0]: {memory[0] if memory else 0}")
        if args.memory:
            print(f"pgm {idx} memory: {format_program(memory)}")
        metrics.append(dict(computer.metrics, computer=computer.name))

    if args.trace_metrics:
        Path(args.trace_metrics).write_text(json.dumps(metrics, indent=2), encoding="utf-8")
        print(f"Metrics saved to '{args.trace_metrics}'")
    return 0


def cmd_amplify(args: argparse.Namespace) -> int:
    programs = _load(args.program)
    if programs is None:
        return 2

    if args.phases is not None:
        phases = args.phases
    else:
        phases = FEEDBACK_PHASES if args.feedback else FEED_FORWARD_PHASES

    for idx, program in enumerate(programs):
        try:
            signal, permutation = find_max_signal(program, phases, feedback=args.feedback,
                                                  io_timeout=args.timeout)
        except (IntcodeError, NoSolution, ValueError) as e:
            print(f"pgm {idx}: {e}", file=sys.stderr)
            return 1
        print(f"pgm {idx}: max signal {signal} with {list(permutation)}")
    return 0


def cmd_trace(args: argparse.Namespace) -> int:
    try:
        summary = analyze(args.trace)
    except (OSError, ValueError) as e:
        print(f"Error: cannot read trace '{args.trace}': {e}", file=sys.stderr)
        return 2
    print_summary(summary)
    return 0


# -----------------------------------------------------------------------------
# Argument parsing
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Intcode Simulator CLI")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    # run
    pr = sub.add_parser("run", help="Run each program in a file to completion")
    pr.add_argument("program", help="File with one comma-separated program per line")
    pr.add_argument("-i", "--input", type=int, nargs="+", help="Values fed to the input channel")
    pr.add_argument("--set", type=_parse_assignment, action="append", metavar="ADDR=VALUE",
                    help="Patch a program word before running (repeatable)")
    pr.add_argument("--memory", action="store_true", help="Print the final memory")
    pr.add_argument("--timeout", type=float, default=IO_TIMEOUT, help="Seconds an I/O instruction may block")
    pr.add_argument("--trace-file", help="Write JSONL trace to file")
    pr.add_argument("--trace-metrics", help="Write metrics JSON to file")

    # amplify
    pa = sub.add_parser("amplify", help="Search phase permutations of a five-stage amplification circuit")
    pa.add_argument("program", help="File with one comma-separated program per line")
    pa.add_argument("--feedback", action="store_true", help="Close the circuit into a feedback ring")
    pa.add_argument("--phases", type=_parse_phases,
                    help="Comma-separated phase settings (default 0..4, or 5..9 with --feedback)")
    pa.add_argument("--timeout", type=float, default=IO_TIMEOUT, help="Seconds an I/O instruction may block")

    # trace
    pt = sub.add_parser("trace", help="Summarise a JSONL trace file")
    pt.add_argument("trace", help="Trace file written by 'run --trace-file'")

    return p


# -----------------------------------------------------------------------------
# Main
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "run":
        return cmd_run(args)
    elif args.cmd == "amplify":
        return cmd_amplify(args)
    elif args.cmd == "trace":
        return cmd_trace(args)
    else:
        parser.error("Unknown command")
        return 2


if __name__ == "__main__":
    sys.exit(main())
