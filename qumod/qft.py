"""
Quantum Fourier Transform (QFT) implementation.

The QFT maps the integer j held in a k-qubit register to

    |j⟩ → (1/√2^k) Σₘ exp(2πijm/2^k) |m⟩

Registers are given least significant qubit first. The transform is built
from Hadamards, controlled-phase rotations and a final reversal of the
register by swaps, all applied through the gate kernel.

After the forward transform, register position p (1-indexed) carries the
phase exp(2πij/2^(k-p+1)) on its |1⟩ component. Fourier-basis addition in
the arithmetic module relies on exactly this layout.
"""

import logging
from typing import List, Sequence

import numpy as np

from .circuit import Circuit
from .core import QuantumState
from .gates import H, CP, SWAP, ControlledGate

logger = logging.getLogger(__name__)


def qft_gates(qubits: Sequence[int], inverse: bool = False) -> List:
    """
    Elementary gates of the QFT on a register.

    Args:
        qubits: Register qubits, least significant first
        inverse: If True, the inverse transform (reversed order, negated angles)

    Returns:
        List of gates in application order
    """
    qubits = list(qubits)
    n = len(qubits)
    sign = -1 if inverse else 1
    gates = []

    # Most significant qubit first; each collects phases from the lower bits
    for i in range(n - 1, -1, -1):
        gates.append(H(qubits[i]))
        for j in range(i - 1, -1, -1):
            theta = sign * 2 * np.pi / 2 ** (i - j + 1)
            gates.append(CP(theta, qubits[j], qubits[i]))

    # Swap qubits to reverse order
    for i in range(n // 2):
        gates.append(SWAP(qubits[i], qubits[n - 1 - i]))

    if inverse:
        # H and SWAP are self-inverse, so reversing the negated sequence suffices
        gates.reverse()
    return gates


def controlled_qft_gates(control: int, qubits: Sequence[int],
                         inverse: bool = False) -> List:
    """The QFT with every elementary gate individually controlled by `control`."""
    return [ControlledGate((control,), gate) for gate in qft_gates(qubits, inverse)]


def qft(state: QuantumState, qubits: Sequence[int], inverse: bool = False) -> QuantumState:
    """
    Apply the QFT (or its inverse) to a register of the state.

    All other qubits are left untouched.
    """
    circuit = Circuit(state.num_qubits, qft_gates(qubits, inverse))
    logger.debug("QFT%s on %d qubits: %d gates", "†" if inverse else "",
                 len(qubits), len(circuit))
    return circuit.run(state)


def controlled_qft(control: int, state: QuantumState, qubits: Sequence[int],
                   inverse: bool = False) -> QuantumState:
    """Apply the QFT (or its inverse) to a register only where `control` is |1⟩."""
    circuit = Circuit(state.num_qubits, controlled_qft_gates(control, qubits, inverse))
    return circuit.run(state)
