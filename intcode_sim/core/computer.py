# computer.py: Intcode computer with step/run loop, channel I/O and tracing
import itertools
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from .channel import Channel, ChannelClosed, ChannelTimeout
from .errors import Halt, InputTimeout, IntcodeError, OutputTimeout
from .memory import MAX_WORDS, Memory, to_index
from .observe import TraceSink, new_metrics
from .opcodes import Instruction, Opcode, decode_instruction
from .params import raw_parameters, reads, reads_then_write

log = logging.getLogger(__name__)

# Seconds an Input/Output instruction may block on its channel
IO_TIMEOUT = 5.0

RUNNING = "running"
HALTED = "halted"
FAULTED = "faulted"

_ids = itertools.count()


class Computer:
    """
    Intcode machine: one private Memory, an instruction pointer and a
    relative base. Input and output go through blocking Channels so that
    several computers can be wired together on separate threads.

    Supports:
      - ADD, MULTIPLY, LESS_THAN, EQUALS (two reads, one write)
      - INPUT / OUTPUT over channels, bounded by io_timeout
      - JUMP_IF_TRUE / JUMP_IF_FALSE
      - RELATIVE_BASE_OFFSET and relative parameter mode
      - HALT
    """

    def __init__(
        self,
        program: Iterable[int],
        input_capacity: int = 0,
        output_capacity: int = 0,
        io_timeout: Optional[float] = IO_TIMEOUT,
        name: Optional[str] = None,
        capacity: int = MAX_WORDS,
    ):
        self.memory = Memory(program, capacity=capacity)
        self.ip: int = 0
        self.relative_base: int = 0
        self.state = RUNNING
        self.name = name or f"intcode-{next(_ids)}"

        self.io_timeout = io_timeout
        self.output_capacity = output_capacity
        self._input = Channel(input_capacity)
        self._output = Channel(output_capacity)

        # Observability
        self.trace_sink = None          # type: Optional[TraceSink]
        self.metrics = new_metrics()

    # -----------------------------------------------------------------------
    # Channels
    # -----------------------------------------------------------------------
    def input(self) -> Channel:
        return self._input

    def output(self) -> Channel:
        return self._output

    def provide_input(self, values: Iterable[int]) -> threading.Thread:
        """
        Feed `values` into the input channel from a background thread. Stops
        quietly if the channel closes first. Returns the feeder thread.
        """
        channel = self._input
        values = list(values)

        def feed():
            for value in values:
                try:
                    channel.send(value)
                except ChannelClosed:
                    log.debug("%s: input closed, dropping remaining feed", self.name)
                    return

        feeder = threading.Thread(target=feed, daemon=True, name=f"{self.name}-feed")
        feeder.start()
        return feeder

    def _receive(self) -> int:
        try:
            value = self._input.recv(timeout=self.io_timeout)
        except ChannelTimeout:
            raise InputTimeout() from None
        except ChannelClosed:
            raise InputTimeout("channel closed") from None
        self.metrics["inputs"] += 1
        return value

    def _transmit(self, value: int):
        try:
            self._output.send(value, timeout=self.io_timeout)
        except ChannelTimeout:
            raise OutputTimeout() from None
        except ChannelClosed:
            raise OutputTimeout("channel closed") from None
        self.metrics["outputs"] += 1

    # Device hook
    def set_trace_sink(self, sink):
        self.trace_sink = sink

    def _emit_trace(self, instruction: Instruction, raw: Optional[List[int]], relative_base: int):
        op = instruction.opcode
        self.metrics["instr_count"] += 1
        self.metrics["by_opcode"][op.name] = 1 + self.metrics["by_opcode"].get(op.name, 0)
        if not self.trace_sink:
            return
        event = {
            "ts": time.time(),
            "computer": self.name,
            "ip": self.ip,
            "op_code": int(op),
            "op_name": op.name,
            "modes": [int(m) for m in instruction.modes[:op.arity]],
            "raw": raw,
            "relative_base": relative_base,
        }
        self.trace_sink.emit(event)

    # -----------------------------------------------------------------------
    # Execute the instruction at the instruction pointer
    # -----------------------------------------------------------------------
    def step(self):
        """
        Execute one instruction. On success the instruction pointer moves to
        the next instruction (or the jump target); on any error it is left on
        the faulting instruction.
        """
        instruction = decode_instruction(self.memory.read(self.ip))
        op, modes = instruction
        next_ip = self.ip + 1 + op.arity
        # trace state as seen at the start of the instruction
        raw = raw_parameters(self, op.arity) if self.trace_sink else None
        base = self.relative_base

        # ---- Arithmetic & comparison ----
        if op == Opcode.ADD:
            a, b, out = reads_then_write(self, modes, 3)
            out.set(a + b)

        elif op == Opcode.MULTIPLY:
            a, b, out = reads_then_write(self, modes, 3)
            out.set(a * b)

        elif op == Opcode.LESS_THAN:
            a, b, out = reads_then_write(self, modes, 3)
            out.set(1 if a < b else 0)

        elif op == Opcode.EQUALS:
            a, b, out = reads_then_write(self, modes, 3)
            out.set(1 if a == b else 0)

        # ---- I/O ----
        elif op == Opcode.INPUT:
            # memory is untouched if the receive fails
            value = self._receive()
            (out,) = reads_then_write(self, modes, 1)
            out.set(value)

        elif op == Opcode.OUTPUT:
            (value,) = reads(self, modes, 1)
            self._transmit(value)

        # ---- Control flow ----
        elif op == Opcode.JUMP_IF_TRUE:
            test, target = reads(self, modes, 2)
            if test != 0:
                next_ip = to_index(target)

        elif op == Opcode.JUMP_IF_FALSE:
            test, target = reads(self, modes, 2)
            if test == 0:
                next_ip = to_index(target)

        elif op == Opcode.RELATIVE_BASE_OFFSET:
            (offset,) = reads(self, modes, 1)
            self.relative_base += offset

        elif op == Opcode.HALT:
            self._emit_trace(instruction, raw, base)
            raise Halt(self.ip)

        self._emit_trace(instruction, raw, base)
        self.ip = next_ip

    def run(self):
        """
        Step until HALT. Any other error is re-raised unchanged with the
        instruction pointer left on the faulting instruction.

        Both channels are closed when the run ends. After a clean halt the
        output channel is swapped for a fresh one that is already closed.
        """
        log.debug("%s: run from ip=%d", self.name, self.ip)
        try:
            while True:
                self.step()
        except Halt:
            self.state = HALTED
            log.debug("%s: halted at ip=%d after %d instructions",
                      self.name, self.ip, self.metrics["instr_count"])
            self._output.close()
            self._output = Channel(self.output_capacity)
        except IntcodeError as exc:
            self.state = FAULTED
            self.metrics["errors"] += 1
            log.warning("%s: fault at ip=%d: %s", self.name, self.ip, exc)
            raise
        finally:
            self._input.close()
            self._output.close()

    def collect_outputs(self) -> List[int]:
        """
        Run to completion while draining the output channel on a second
        thread. Returns every output in emission order, or raises the run's
        error. Ordering is only guaranteed while this is the sole consumer.
        """
        outputs: List[int] = []
        channel = self._output
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix=self.name) as pool:
            drained = pool.submit(outputs.extend, channel)
            ran = pool.submit(self.run)
        ran.result()
        drained.result()
        return outputs

    def into_memory(self) -> List[int]:
        return self.memory.snapshot()
