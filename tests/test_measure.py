"""Tests for measurement."""

import dataclasses

import numpy as np
import pytest

from qumod import (
    QuantumState, apply_single, apply_controlled, H, X,
    measure, measure_register, register_index,
    InvalidQubitIndex,
)


def bell_state():
    state = apply_single(H(1), QuantumState.zero(2))
    return apply_controlled([1], X(2), state)


class TestMeasure:
    """Tests for single-qubit measurement."""

    def test_basis_state_is_certain(self, rng):
        result = measure(QuantumState.basis(2, 0b10), 2, rng)
        assert result.outcome == 1
        assert result.probability == pytest.approx(1.0)

    def test_forced_one(self, force_one):
        result = measure(apply_single(H(1), QuantumState.zero(1)), 1, force_one)
        assert result.outcome == 1
        assert result.probability == pytest.approx(0.5)
        assert np.allclose(result.state.amplitudes, [0, 1])

    def test_forced_zero(self, force_zero):
        result = measure(apply_single(H(1), QuantumState.zero(1)), 1, force_zero)
        assert result.outcome == 0
        assert np.allclose(result.state.amplitudes, [1, 0])

    def test_collapse_preserves_entanglement(self, force_one):
        """Measuring one half of a Bell pair fixes the other half."""
        result = measure(bell_state(), 1, force_one)
        assert np.allclose(result.state.amplitudes, [0, 0, 0, 1])

    def test_survivors_are_only_rescaled(self, force_one):
        gen = np.random.default_rng(3)
        original = QuantumState.from_amplitudes(gen.normal(size=8) + 1j * gen.normal(size=8))
        result = measure(original, 2, force_one)

        keep = (np.arange(8) & 0b010) != 0
        p1 = np.sum(np.abs(original.amplitudes[keep]) ** 2)
        expected = np.where(keep, original.amplitudes, 0) / np.sqrt(p1)
        assert result.probability == pytest.approx(p1)
        assert np.allclose(result.state.amplitudes, expected)
        assert np.isclose(result.state.norm(), 1)

    def test_seeded_measurements_are_reproducible(self):
        state = apply_single(H(1), QuantumState.zero(1))
        first = [measure(state, 1, np.random.default_rng(5)).outcome for _ in range(3)]
        second = [measure(state, 1, 5).outcome for _ in range(3)]
        assert first == second

    def test_measurement_statistics(self, rng):
        """Measurement statistics should match probabilities."""
        state = apply_single(H(1), QuantumState.zero(1))
        n_trials = 1000
        ones = sum(measure(state, 1, rng).outcome for _ in range(n_trials))
        # Should be approximately 50/50, allow 10% margin
        assert 0.4 < ones / n_trials < 0.6

    def test_result_is_immutable(self, rng):
        result = measure(QuantumState.zero(1), 1, rng)
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.outcome = 1

    def test_out_of_range_qubit(self, rng):
        with pytest.raises(InvalidQubitIndex):
            measure(QuantumState.zero(2), 3, rng)


class TestMeasureRegister:
    """Reading a register out qubit by qubit."""

    @pytest.mark.parametrize("value", [0, 5, 7])
    def test_basis_register(self, value: int, rng):
        register = [2, 3, 4]
        state = QuantumState.basis(4, register_index(register, value) | 1)
        measured, collapsed = measure_register(state, register, rng)
        assert measured == value
        assert np.allclose(collapsed.amplitudes, state.amplitudes)

    def test_bits_are_little_endian(self, force_one):
        """Bit i of the value comes from qubits[i]."""
        state = apply_single(H(3), QuantumState.basis(3, 0b001))
        measured, _ = measure_register(state, [3, 1], force_one)
        assert measured == 0b11

    def test_register_collapses_consistently(self, rng):
        """Both halves of a Bell pair always agree."""
        for _ in range(20):
            measured, _ = measure_register(bell_state(), [1, 2], rng)
            assert measured in (0b00, 0b11)
