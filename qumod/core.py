"""
Core quantum simulation functionality.

This module holds the amplitude vector and the gate kernel that updates it.

The state of n qubits is a dense vector of 2^n complex amplitudes. Qubit k
(counting from 1) is bit k-1 of the basis-state index, so qubit 1 is the
least significant bit. Gates are applied by pairing basis indices that differ
only in the target bit; no 2^n x 2^n matrix is ever built.

States are never modified in place. Every kernel function copies the
amplitudes, updates the copy and returns a new QuantumState.
"""

import logging
from functools import lru_cache
from typing import Dict, Iterable, Optional, Sequence

import numpy as np

from .errors import InvalidQubitIndex

logger = logging.getLogger(__name__)

# Tolerance for norm and unitarity checks
ATOL = 1e-9


@lru_cache(maxsize=None)
def basis_indices(num_qubits: int) -> np.ndarray:
    """Return the read-only array [0, 1, ..., 2^num_qubits - 1]."""
    index = np.arange(2 ** num_qubits, dtype=np.int64)
    index.setflags(write=False)
    return index


def qubit_mask(qubits: Iterable[int]) -> int:
    """Bit mask with the bit of every listed qubit set."""
    mask = 0
    for q in qubits:
        mask |= 1 << (q - 1)
    return mask


class QuantumState:
    """
    Dense amplitude vector for a fixed number of qubits.

    The amplitudes must have unit norm and are stored read-only; use the
    kernel functions (or a Circuit) to obtain transformed states.
    """

    def __init__(self, amplitudes, num_qubits: Optional[int] = None):
        amplitudes = np.array(amplitudes, dtype=complex).reshape(-1)
        size = amplitudes.shape[0]
        if num_qubits is None:
            num_qubits = size.bit_length() - 1
        if num_qubits < 1 or size != 2 ** num_qubits:
            raise ValueError(
                f"amplitude vector of length {size} does not describe "
                f"a register of at least one qubit"
            )
        norm = np.linalg.norm(amplitudes)
        if abs(norm - 1) > ATOL:
            raise ValueError(
                f"amplitudes have norm {norm:.12g}; use QuantumState.from_amplitudes "
                f"to normalize"
            )
        amplitudes.setflags(write=False)
        self._amplitudes = amplitudes
        self.num_qubits = num_qubits

    @classmethod
    def zero(cls, num_qubits: int) -> "QuantumState":
        """The all-zero basis state |0...0>."""
        return cls.basis(num_qubits, 0)

    @classmethod
    def basis(cls, num_qubits: int, index: int) -> "QuantumState":
        """The computational basis state with the given integer index."""
        if not 0 <= index < 2 ** num_qubits:
            raise ValueError(
                f"basis index {index} out of range for {num_qubits} qubits"
            )
        amplitudes = np.zeros(2 ** num_qubits, dtype=complex)
        amplitudes[index] = 1.0
        return cls(amplitudes, num_qubits)

    @classmethod
    def from_amplitudes(cls, amplitudes) -> "QuantumState":
        """
        Build a state from arbitrary amplitudes.

        The vector is normalized, so [1, 1] gives an equal superposition.
        """
        amplitudes = np.array(amplitudes, dtype=complex).reshape(-1)
        norm = np.linalg.norm(amplitudes)
        if norm == 0:
            raise ValueError("cannot normalize the zero vector")
        return cls(amplitudes / norm)

    @property
    def amplitudes(self) -> np.ndarray:
        """Read-only view of the amplitude vector."""
        return self._amplitudes

    @property
    def dimension(self) -> int:
        return self._amplitudes.shape[0]

    def copy_amplitudes(self) -> np.ndarray:
        """Return a writable copy of the amplitudes."""
        return self._amplitudes.copy()

    def check_qubits(self, *qubits: int):
        """Raise InvalidQubitIndex unless every qubit lies in [1, n]."""
        for q in qubits:
            if not 1 <= q <= self.num_qubits:
                raise InvalidQubitIndex(q, self.num_qubits)

    def norm(self) -> float:
        return float(np.linalg.norm(self._amplitudes))

    def probabilities(self) -> np.ndarray:
        """Probability of every basis state."""
        return np.abs(self._amplitudes) ** 2

    def probability_one(self, qubit: int) -> float:
        """Probability that measuring the qubit gives 1."""
        self.check_qubits(qubit)
        bit = 1 << (qubit - 1)
        ones = (basis_indices(self.num_qubits) & bit) != 0
        return float(self.probabilities()[ones].sum())

    def register_distribution(self, qubits: Sequence[int],
                              atol: float = ATOL) -> Dict[int, float]:
        """
        Marginal distribution of the integer held in a register.

        Args:
            qubits: Register qubits, least significant first
            atol: Values with smaller probability are left out

        Returns:
            Mapping value -> probability
        """
        self.check_qubits(*qubits)
        index = basis_indices(self.num_qubits)
        values = np.zeros_like(index)
        for position, q in enumerate(qubits):
            values |= ((index >> (q - 1)) & 1) << position
        totals = np.bincount(values, weights=self.probabilities(),
                             minlength=2 ** len(qubits))
        return {int(v): float(p) for v, p in enumerate(totals) if p > atol}

    def register_value(self, qubits: Sequence[int], atol: float = 1e-6) -> int:
        """
        The value of a register that is in a definite basis state.

        Raises:
            ValueError: If the register is in a superposition of values
        """
        distribution = self.register_distribution(qubits, atol=atol)
        if len(distribution) != 1:
            raise ValueError(f"register holds a superposition: {distribution}")
        (value,) = distribution
        return value

    def __repr__(self):
        return f"QuantumState(num_qubits={self.num_qubits})"


# =============================================================================
# Gate kernel
# =============================================================================

def _pair_indices(state: QuantumState, target_bit: int, control_mask: int):
    """Indices with the target bit clear and every control bit set."""
    index = basis_indices(state.num_qubits)
    low = index[(index & target_bit) == 0]
    if control_mask:
        low = low[(low & control_mask) == control_mask]
    return low


def _transform(state: QuantumState, target: int, matrix: np.ndarray,
               controls: Sequence[int] = ()) -> QuantumState:
    state.check_qubits(target, *controls)
    bit = 1 << (target - 1)
    low = _pair_indices(state, bit, qubit_mask(controls))
    high = low | bit

    amplitudes = state.copy_amplitudes()
    a0 = amplitudes[low]
    a1 = amplitudes[high]
    amplitudes[low] = matrix[0, 0] * a0 + matrix[0, 1] * a1
    amplitudes[high] = matrix[1, 0] * a0 + matrix[1, 1] * a1
    return QuantumState(amplitudes, state.num_qubits)


def _swap(state: QuantumState, a: int, b: int,
          controls: Sequence[int] = ()) -> QuantumState:
    state.check_qubits(a, b, *controls)
    bit_a, bit_b = 1 << (a - 1), 1 << (b - 1)
    index = basis_indices(state.num_qubits)
    # Bit a set and bit b clear; the partner has them the other way round
    first = index[((index & bit_a) != 0) & ((index & bit_b) == 0)]
    mask = qubit_mask(controls)
    if mask:
        first = first[(first & mask) == mask]
    second = first ^ (bit_a | bit_b)

    amplitudes = state.copy_amplitudes()
    amplitudes[first], amplitudes[second] = amplitudes[second], amplitudes[first]
    return QuantumState(amplitudes, state.num_qubits)


def apply_single(gate, state: QuantumState) -> QuantumState:
    """
    Apply a single-qubit gate.

    Every pair of amplitudes whose basis indices differ only in the target
    bit is replaced by the gate matrix times that pair.
    """
    return _transform(state, gate.target, gate.matrix)


def apply_controlled(controls: Sequence[int], inner, state: QuantumState) -> QuantumState:
    """
    Apply `inner` only on basis states where every control bit is 1.

    Any number of controls is accepted; CNOT, Toffoli and n-controlled gates
    are all this one operation. Nested controlled gates merge their controls.

    Raises:
        InvalidGateSpec: If a control coincides with another control or a target
        InvalidQubitIndex: If any qubit lies outside [1, n]
    """
    from .gates import GateKind, _check_distinct

    controls = tuple(controls)
    _check_distinct(controls + tuple(inner.qubits), "a controlled gate")
    kind = inner.kind
    if kind is GateKind.SINGLE:
        return _transform(state, inner.target, inner.matrix, controls)
    elif kind is GateKind.SWAP:
        return _swap(state, inner.a, inner.b, controls)
    elif kind is GateKind.CONTROLLED:
        return apply_controlled(controls + inner.controls, inner.inner, state)
    elif kind is GateKind.QFT:
        # Control every elementary gate of the decomposition
        for gate in inner.decompose():
            state = apply_controlled(controls, gate, state)
        return state
    raise TypeError(f"unknown gate kind {kind!r}")


def apply_swap(a: int, b: int, state: QuantumState) -> QuantumState:
    """Exchange the amplitudes of basis states that differ only in bits a and b."""
    from .gates import _check_distinct

    _check_distinct((a, b), "a swap")
    return _swap(state, a, b)


def apply_gate(gate, state: QuantumState) -> QuantumState:
    """Apply any gate, dispatching on its kind tag."""
    from .gates import GateKind

    kind = gate.kind
    if kind is GateKind.SINGLE:
        return apply_single(gate, state)
    elif kind is GateKind.CONTROLLED:
        return apply_controlled(gate.controls, gate.inner, state)
    elif kind is GateKind.SWAP:
        return apply_swap(gate.a, gate.b, state)
    elif kind is GateKind.QFT:
        for elementary in gate.decompose():
            state = apply_gate(elementary, state)
        return state
    raise TypeError(f"unknown gate kind {kind!r}")
