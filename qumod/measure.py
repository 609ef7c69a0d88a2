"""
Measurement in the computational basis.

A measurement draws one outcome for one qubit, zeroes the amplitudes that
disagree with it and rescales the rest to unit norm. The random source is
passed in, so tests can seed it or force an outcome.
"""

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from .core import QuantumState, basis_indices
from .utils import bits_to_int

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MeasurementResult:
    """Outcome of measuring one qubit."""

    outcome: int
    state: QuantumState
    probability: float


def _random_source(rng):
    if rng is None or isinstance(rng, (int, np.integer)):
        return np.random.default_rng(rng)
    return rng


def measure(state: QuantumState, qubit: int, rng=None) -> MeasurementResult:
    """
    Measure one qubit and collapse the state.

    Args:
        state: State to measure
        qubit: Qubit index in [1, n]
        rng: None, an integer seed, or any object with a `random()` method
             returning floats in [0, 1). Outcome 1 is drawn when
             `rng.random() < P(1)`.

    Returns:
        MeasurementResult with the outcome, the collapsed state and the
        probability of that outcome
    """
    state.check_qubits(qubit)
    rng = _random_source(rng)

    bit = 1 << (qubit - 1)
    ones = (basis_indices(state.num_qubits) & bit) != 0
    p1 = float(state.probabilities()[ones].sum())
    p1 = min(max(p1, 0.0), 1.0)

    outcome = int(rng.random() < p1)
    probability = p1 if outcome else 1.0 - p1
    keep = ones if outcome else ~ones

    amplitudes = np.where(keep, state.amplitudes, 0) / np.sqrt(probability)
    logger.debug("measured qubit %d -> %d (p=%.6f)", qubit, outcome, probability)
    return MeasurementResult(outcome, QuantumState(amplitudes, state.num_qubits), probability)


def measure_register(state: QuantumState, qubits: Sequence[int],
                     rng=None) -> Tuple[int, QuantumState]:
    """
    Measure a register qubit by qubit and return its integer value.

    Bit i of the value is the outcome for qubits[i] (least significant first).

    Returns:
        Tuple (value, collapsed state)
    """
    rng = _random_source(rng)
    bits = []
    for q in qubits:
        result = measure(state, q, rng)
        bits.append(result.outcome)
        state = result.state
    return bits_to_int(bits), state
