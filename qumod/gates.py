"""
Quantum gate definitions.

This module contains the standard single-qubit matrices (Pauli, Hadamard,
phase, rotation) and the gate values that the kernel applies:

    SingleQubitGate(target, matrix, label)
    ControlledGate(controls, inner)
    SwapGate(a, b)
    QFTGate(qubits, inverse)

Gates are immutable. Each carries a `kind` tag used by core.apply_gate,
and `qubits`, the operand qubits in order, for drawing and export.
"""

import enum
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .errors import InvalidGateSpec

# =============================================================================
# Single-qubit matrices
# =============================================================================

X_gate = np.array([[0, 1],      # Pauli X gate (NOT gate)
                   [1, 0]])

Y_gate = np.array([[ 0, -1j],   # Pauli Y gate
                   [1j,   0]])

Z_gate = np.array([[1,  0],     # Pauli Z gate = P(π) = S²
                   [0, -1]])

H_gate = np.array([[1,  1],     # Hadamard gate
                   [1, -1]]) * np.sqrt(1/2)

S_gate = np.array([[1,  0],     # Phase gate = P(π/2) = T²
                   [0, 1j]])

T_gate = np.array([[1,                 0],   # T gate = P(π/4)
                   [0, np.exp(1j * np.pi / 4)]])

Tinv_gate = np.array([[1,                  0],   # T† gate = P(-π/4)
                      [0, np.exp(-1j * np.pi / 4)]])


def P_gate(phi):
    """Phase shift gate P(φ) = diag(1, e^{iφ})"""
    return np.array([[1,              0],
                     [0, np.exp(phi * 1j)]])


def Rx_gate(theta):
    """X rotation gate Rx(θ)"""
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return np.array([[c,    -1j * s],
                     [-1j * s,    c]])


def Ry_gate(theta):
    """Y rotation gate Ry(θ)"""
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return np.array([[c, -s],
                     [s,  c]])


def Rz_gate(theta):
    """Z rotation gate Rz(θ)"""
    return np.array([[np.exp(-1j * theta / 2),                    0],
                     [                      0, np.exp(1j * theta / 2)]])


# =============================================================================
# Gate values
# =============================================================================

class GateKind(enum.Enum):
    SINGLE = "single"
    CONTROLLED = "controlled"
    SWAP = "swap"
    QFT = "qft"


def _check_distinct(qubits, what):
    if len(qubits) != len(set(qubits)):
        raise InvalidGateSpec(f"the same qubit cannot occur twice in {what}: {qubits}")


@dataclass(frozen=True, eq=False)
class SingleQubitGate:
    """A 2x2 unitary acting on one target qubit."""

    target: int
    matrix: np.ndarray
    label: str = "U"

    kind = GateKind.SINGLE

    def __post_init__(self):
        from .core import ATOL

        matrix = np.array(self.matrix, dtype=complex)
        if matrix.shape != (2, 2):
            raise InvalidGateSpec(f"gate {self.label} matrix has shape {matrix.shape}, expected (2, 2)")
        if not np.allclose(matrix @ matrix.conj().T, np.eye(2), atol=ATOL):
            raise InvalidGateSpec(f"gate {self.label} matrix is not unitary")
        matrix.setflags(write=False)
        object.__setattr__(self, "matrix", matrix)

    @property
    def qubits(self) -> Tuple[int, ...]:
        return (self.target,)

    def apply(self, state):
        from .core import apply_gate
        return apply_gate(self, state)


@dataclass(frozen=True, eq=False)
class ControlledGate:
    """
    `inner` applied only where every control qubit is |1>.

    A controlled gate wrapping another controlled gate is flattened, so
    `controls` always lists every control and `inner` is never CONTROLLED.
    """

    controls: Tuple[int, ...]
    inner: object

    kind = GateKind.CONTROLLED

    def __post_init__(self):
        controls = tuple(self.controls)
        inner = self.inner
        if inner.kind is GateKind.CONTROLLED:
            controls = controls + inner.controls
            inner = inner.inner
        if not controls:
            raise InvalidGateSpec("a controlled gate needs at least one control")
        _check_distinct(controls + tuple(inner.qubits), "a controlled gate")
        object.__setattr__(self, "controls", controls)
        object.__setattr__(self, "inner", inner)

    @property
    def label(self) -> str:
        return "C" * len(self.controls) + self.inner.label

    @property
    def qubits(self) -> Tuple[int, ...]:
        return self.controls + tuple(self.inner.qubits)

    def apply(self, state):
        from .core import apply_gate
        return apply_gate(self, state)


@dataclass(frozen=True, eq=False)
class SwapGate:
    """Exchange the states of qubits a and b."""

    a: int
    b: int

    kind = GateKind.SWAP
    label = "SWAP"

    def __post_init__(self):
        _check_distinct((self.a, self.b), "a swap")

    @property
    def qubits(self) -> Tuple[int, ...]:
        return (self.a, self.b)

    def apply(self, state):
        from .core import apply_gate
        return apply_gate(self, state)


@dataclass(frozen=True, eq=False)
class QFTGate:
    """
    Fourier transform over a register, kept as one composite gate.

    Applying it (plain or controlled) expands it into the elementary
    Hadamard, controlled-phase and swap gates of qft.qft_gates.
    """

    qubits: Tuple[int, ...]
    inverse: bool = False

    kind = GateKind.QFT

    def __post_init__(self):
        qubits = tuple(self.qubits)
        if not qubits:
            raise InvalidGateSpec("QFT needs at least one qubit")
        _check_distinct(qubits, "a QFT")
        object.__setattr__(self, "qubits", qubits)

    @property
    def label(self) -> str:
        return "QFT†" if self.inverse else "QFT"

    def decompose(self):
        from .qft import qft_gates
        return qft_gates(self.qubits, inverse=self.inverse)

    def apply(self, state):
        from .core import apply_gate
        return apply_gate(self, state)


# =============================================================================
# Gate factories
# =============================================================================

def X(q):
    return SingleQubitGate(q, X_gate, "X")


def Y(q):
    return SingleQubitGate(q, Y_gate, "Y")


def Z(q):
    return SingleQubitGate(q, Z_gate, "Z")


def H(q):
    return SingleQubitGate(q, H_gate, "H")


def S(q):
    return SingleQubitGate(q, S_gate, "S")


def T(q):
    return SingleQubitGate(q, T_gate, "T")


def Tdg(q):
    return SingleQubitGate(q, Tinv_gate, "T†")


def P(q, phi):
    return SingleQubitGate(q, P_gate(phi), "P")


def Rx(q, theta):
    return SingleQubitGate(q, Rx_gate(theta), "Rx")


def Ry(q, theta):
    return SingleQubitGate(q, Ry_gate(theta), "Ry")


def Rz(q, theta):
    return SingleQubitGate(q, Rz_gate(theta), "Rz")


def CNOT(control, target):
    """Controlled NOT gate (XOR)"""
    return ControlledGate((control,), X(target))


def CZ(control, target):
    return ControlledGate((control,), Z(target))


def CP(theta, control, target):
    """Controlled phase gate CP(θ) = diag(1, 1, 1, e^{iθ})"""
    return ControlledGate((control,), P(target, theta))


def TOFFOLI(c1, c2, target):
    """Toffoli gate (CCNOT): target ^= c1 AND c2"""
    return ControlledGate((c1, c2), X(target))


def SWAP(a, b):
    return SwapGate(a, b)


def CSWAP(control, a, b):
    """Fredkin gate: swap a and b when control is |1>"""
    return ControlledGate((control,), SwapGate(a, b))
