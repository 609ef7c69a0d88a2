"""
Ordered gate sequences.

A Circuit is a list of gates for a fixed number of qubits. Every gate is
checked against the qubit count when it is appended, so a circuit that has
been built can always run to completion.

The gate list is what drawing and export tools read: each gate exposes its
label, its operand qubits (`gate.qubits`) and its parameters.

Circuits may also carry checks: predicates on the state at a given point
in the sequence. They are evaluated with `assert` while the circuit runs and
are therefore skipped under `python -O`.
"""

import logging
from collections import Counter
from typing import Callable, Dict, Iterable, List, Tuple

from .core import QuantumState, apply_gate
from .errors import InvalidQubitIndex

logger = logging.getLogger(__name__)


class Circuit:
    """
    A sequence of gates on `num_qubits` qubits.

    Example:
        >>> from qumod.gates import H, CNOT
        >>> bell = Circuit(2).append(H(1)).append(CNOT(1, 2))
        >>> state = bell.run(QuantumState.zero(2))
    """

    def __init__(self, num_qubits: int, gates: Iterable = ()):
        if num_qubits < 1:
            raise ValueError(f"a circuit needs at least one qubit, got {num_qubits}")
        self.num_qubits = num_qubits
        self._gates: List = []
        self._checks: List[Tuple[int, Callable[[QuantumState], bool], str]] = []
        self.extend(gates)

    def check_qubits(self, *qubits: int):
        for q in qubits:
            if not 1 <= q <= self.num_qubits:
                raise InvalidQubitIndex(q, self.num_qubits)

    def append(self, gate) -> "Circuit":
        self.check_qubits(*gate.qubits)
        self._gates.append(gate)
        return self

    def extend(self, gates: Iterable) -> "Circuit":
        for gate in gates:
            self.append(gate)
        return self

    def check(self, predicate: Callable[[QuantumState], bool], description: str) -> "Circuit":
        """Assert `predicate(state)` at the current position when running."""
        self._checks.append((len(self._gates), predicate, description))
        return self

    @property
    def gates(self) -> Tuple:
        return tuple(self._gates)

    def __len__(self):
        return len(self._gates)

    def __iter__(self):
        return iter(self._gates)

    def count_ops(self) -> Dict[str, int]:
        """Number of gates per label."""
        return dict(Counter(gate.label for gate in self._gates))

    def run(self, state: QuantumState) -> QuantumState:
        """Apply every gate in order and return the final state."""
        if state.num_qubits < self.num_qubits:
            raise InvalidQubitIndex(self.num_qubits, state.num_qubits)
        logger.debug("running %d gates on %d qubits", len(self._gates), state.num_qubits)

        checks = iter(self._checks)
        pending = next(checks, None)
        for position, gate in enumerate(self._gates + [None]):
            while pending is not None and pending[0] == position:
                _, predicate, description = pending
                assert predicate(state), description
                pending = next(checks, None)
            if gate is not None:
                state = apply_gate(gate, state)
        return state

    def __repr__(self):
        return f"Circuit(num_qubits={self.num_qubits}, gates={len(self._gates)})"
