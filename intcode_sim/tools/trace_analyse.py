# intcode_sim/tools/trace_analyse.py
import json
import sys
from collections import Counter
from typing import Any, Dict

from ..core.opcodes import Opcode, ParameterMode, encode_instruction


def analyze(path: str) -> Dict[str, Any]:
    ops = Counter()
    words = Counter()           # instruction word (opcode + modes) -> count
    computers = Counter()
    io = Counter()
    max_base = None
    min_base = None

    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            ev = json.loads(line)
            op = ev.get("op_name", "?")
            ops[op] += 1
            if "op_code" in ev:
                modes = [ParameterMode(m) for m in ev.get("modes", [])]
                words[encode_instruction(Opcode(ev["op_code"]), *modes)] += 1
            computers[ev.get("computer", "?")] += 1
            if op in ("INPUT", "OUTPUT"):
                io[op] += 1
            base = ev.get("relative_base")
            if base is not None:
                max_base = base if max_base is None else max(max_base, base)
                min_base = base if min_base is None else min(min_base, base)

    return {
        "instr_count": sum(ops.values()),
        "top_opcodes": ops.most_common(10),
        "top_instructions": words.most_common(10),
        "by_computer": dict(computers),
        "inputs": io["INPUT"],
        "outputs": io["OUTPUT"],
        "relative_base_range": (min_base, max_base),
    }


def print_summary(summary: Dict[str, Any]):
    print("Instructions:", summary["instr_count"])
    print("Top opcodes:", summary["top_opcodes"])
    print("Top instruction words:", summary["top_instructions"])
    print("By computer:", summary["by_computer"])
    print("Inputs/outputs:", summary["inputs"], "/", summary["outputs"])
    print("Relative base range:", summary["relative_base_range"])


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python -m intcode_sim.tools.trace_analyse <trace.jsonl>")
        sys.exit(2)
    print_summary(analyze(sys.argv[1]))
