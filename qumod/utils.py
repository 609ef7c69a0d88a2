"""
Utility functions for quantum states and registers.

This module provides helper functions for:
- Quantum state comparison (accounting for global phase)
- Converting between integers, bit lists and basis-state indices
"""

from typing import List, Sequence

import numpy as np


# =============================================================================
# Quantum state utilities
# =============================================================================

def allclose_up_to_global_phase(v, w, atol: float = 1e-9) -> bool:
    """
    Check if two quantum states are equal up to a global phase.

    Global phase has no physical significance, but comparing magnitudes
    alone would hide relative phases, so a pivot amplitude fixes the phase.

    Args:
        v: First quantum state (QuantumState or array-like)
        w: Second quantum state (QuantumState or array-like)
        atol: Absolute tolerance for comparison

    Returns:
        True if states are equal up to global phase
    """
    v = np.asarray(getattr(v, "amplitudes", v)).reshape(-1)
    w = np.asarray(getattr(w, "amplitudes", w)).reshape(-1)

    # Find a stable pivot amplitude in w
    idx = np.argmax(np.abs(w))
    if np.abs(w[idx]) < atol:
        return np.allclose(v, w, atol=atol)

    phase = v[idx] / w[idx]
    return np.allclose(v, phase * w, atol=atol)


def state_fidelity(v, w) -> float:
    """
    Fidelity F = |⟨v|w⟩|² between two pure states, from 0 (orthogonal)
    to 1 (identical up to phase).
    """
    v = np.asarray(getattr(v, "amplitudes", v)).reshape(-1)
    w = np.asarray(getattr(w, "amplitudes", w)).reshape(-1)
    return float(np.abs(np.vdot(v, w)) ** 2)


# =============================================================================
# Binary utilities
# =============================================================================

def int_to_bits(value: int, width: int) -> List[int]:
    """The low `width` bits of `value`, least significant first."""
    return [(value >> position) & 1 for position in range(width)]


def bits_to_int(bits: Sequence[int]) -> int:
    """Inverse of int_to_bits: bits[0] is the least significant."""
    return sum(bit << position for position, bit in enumerate(bits))


def register_index(qubits: Sequence[int], value: int) -> int:
    """
    Basis-state index bits that put `value` into a register.

    Bit i of `value` goes to qubit qubits[i]. OR together the results for
    several registers to get the index of a product basis state.

    Example:
        >>> register_index([3, 4], 2)   # qubit 4 set
        8
    """
    if not 0 <= value < 2 ** len(qubits):
        raise ValueError(f"value {value} does not fit in {len(qubits)} qubits")
    index = 0
    for q, bit in zip(qubits, int_to_bits(value, len(qubits))):
        index |= bit << (q - 1)
    return index
