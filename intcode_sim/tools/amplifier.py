# amplifier.py: five Intcode computers chained (or looped) through relays
import itertools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from ..core.channel import Channel, ChannelClosed
from ..core.computer import IO_TIMEOUT, Computer
from ..core.errors import IntcodeError

log = logging.getLogger(__name__)

N_AMPS = 5
FEED_FORWARD_PHASES = (0, 1, 2, 3, 4)
FEEDBACK_PHASES = (5, 6, 7, 8, 9)


class NoSolution(Exception):
    pass


def relay(upstream: Channel, downstream: Channel):
    """
    Forward every value from `upstream` to `downstream`. Either side closing
    ends the relay; upstream is closed on the way out so a sender blocked on
    it is released.
    """
    try:
        for value in upstream:
            try:
                downstream.send(value)
            except ChannelClosed:
                return
    finally:
        upstream.close()


class AmplificationCircuit:
    """
    Five computers running the same program, each seeded with its phase
    setting. Amp i's output is relayed into amp i+1's input; in feedback
    mode the driver closes the ring by feeding amp 4's output back to amp 0.
    """

    def __init__(self, phase_settings: Sequence[int], program: Sequence[int],
                 io_timeout: Optional[float] = IO_TIMEOUT, trace_sink=None):
        if len(phase_settings) != N_AMPS:
            raise ValueError(f"expected {N_AMPS} phase settings, got {len(phase_settings)}")
        self.phase_settings = tuple(phase_settings)
        self.amplifiers: List[Computer] = []
        for i, phase in enumerate(self.phase_settings):
            amp = Computer(program, input_capacity=1, io_timeout=io_timeout, name=f"amp-{i}")
            if trace_sink is not None:
                amp.set_trace_sink(trace_sink)
            # fresh computer with a buffer takes its phase without blocking
            amp.input().try_send(phase)
            self.amplifiers.append(amp)

    def _drive(self, circuit_in: Channel, circuit_out: Channel, feedback: bool) -> Optional[int]:
        signal = 0
        result = None
        while True:
            try:
                circuit_in.send(signal)
            except ChannelClosed:
                # amp 0 has finished its run
                break
            try:
                signal = circuit_out.recv()
            except ChannelClosed:
                # amp 4 has finished its run
                break
            result = signal
            if not feedback:
                break
        return result

    def run(self, feedback: bool = False) -> Optional[int]:
        """
        Run every amplifier to completion and return the last signal read
        from amp 4, or None if it never produced one.

        Once the driver stops, both ends of the circuit are closed, so an
        amplifier still sending or waiting fails fast with a closed channel.
        Faults after a signal was read are logged and dropped; the first
        amplifier fault is raised only when no signal was read.
        """
        circuit_in = self.amplifiers[0].input()
        circuit_out = self.amplifiers[-1].output()

        n_threads = 2 * N_AMPS
        with ThreadPoolExecutor(max_workers=n_threads, thread_name_prefix="amp") as pool:
            # if either end of a hookup closes, that relay is done
            for left, right in zip(self.amplifiers, self.amplifiers[1:]):
                pool.submit(relay, left.output(), right.input())

            runs = [pool.submit(amp.run) for amp in self.amplifiers]

            try:
                result = self._drive(circuit_in, circuit_out, feedback)
            finally:
                circuit_in.close()
                circuit_out.close()

        faults = [(amp, fut.exception()) for amp, fut in zip(self.amplifiers, runs)
                  if fut.exception() is not None]
        if result is None and faults:
            amp, exc = faults[0]
            log.warning("%s faulted during circuit run: %s", amp.name, exc)
            raise exc
        for amp, exc in faults:
            log.debug("%s stopped after the circuit signal was read: %s", amp.name, exc)
        return result


def find_max_signal(program: Sequence[int], phases: Sequence[int] = FEED_FORWARD_PHASES,
                    feedback: bool = False,
                    io_timeout: Optional[float] = IO_TIMEOUT) -> Tuple[int, Tuple[int, ...]]:
    """
    Try every permutation of `phases` and return (max_signal, permutation).
    Only a strictly larger signal replaces the current best, so ties keep the
    earliest permutation.
    """
    best: Optional[Tuple[int, Tuple[int, ...]]] = None
    for permutation in itertools.permutations(phases):
        circuit = AmplificationCircuit(permutation, program, io_timeout=io_timeout)
        try:
            signal = circuit.run(feedback=feedback)
        except IntcodeError as exc:
            log.debug("phases %s: no signal (%s)", permutation, exc)
            continue
        if signal is None:
            continue
        if best is None or signal > best[0]:
            best = (signal, permutation)

    if best is None:
        raise NoSolution("no phase permutation produced a signal")
    log.info("max signal %d with phases %s", best[0], best[1])
    return best
