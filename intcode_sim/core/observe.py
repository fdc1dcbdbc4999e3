# core/observe.py
import json
import threading
from typing import Any, Dict, Optional


class TraceSink:
    """
    Appends one JSON line per event to a file path, or the event dict to a
    list-like collector. Safe to share between computers on different threads.
    """

    def __init__(self, path: Optional[str] = None, collector: Optional[list] = None):
        self.path = path
        self.collector = collector
        self._lock = threading.Lock()

    def emit(self, event: Dict[str, Any]):
        line = json.dumps(event, separators=(",", ":"))
        with self._lock:
            if self.path:
                with open(self.path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
            elif self.collector is not None:
                self.collector.append(event)


def new_metrics() -> Dict[str, Any]:
    return {
        "instr_count": 0,
        "by_opcode": {},            # op_name -> count
        "inputs": 0,
        "outputs": 0,
        "errors": 0,
    }
