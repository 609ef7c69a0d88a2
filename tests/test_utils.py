"""Tests for state comparison and register encoding helpers."""

import numpy as np
import pytest

from qumod import (
    QuantumState, apply_single, H, X, Z,
    allclose_up_to_global_phase, state_fidelity,
    int_to_bits, bits_to_int, register_index,
)


class TestStateComparison:
    """Tests for comparisons that ignore global phase."""

    def test_global_phase_is_ignored(self):
        state = QuantumState.from_amplitudes([1, 1j, 0, 1])
        assert allclose_up_to_global_phase(state, np.exp(0.4j) * state.amplitudes)

    def test_relative_phase_is_not_ignored(self):
        plus = apply_single(H(1), QuantumState.zero(1))
        minus = apply_single(Z(1), plus)
        assert not allclose_up_to_global_phase(plus, minus)

    def test_fidelity_identical_up_to_phase(self):
        state = QuantumState.from_amplitudes([3, 4j])
        assert state_fidelity(state, -1j * state.amplitudes) == pytest.approx(1.0)

    def test_fidelity_orthogonal(self):
        zero = QuantumState.zero(1)
        one = apply_single(X(1), zero)
        assert state_fidelity(zero, one) == pytest.approx(0.0)

    def test_fidelity_of_plus_with_zero(self):
        plus = apply_single(H(1), QuantumState.zero(1))
        assert state_fidelity(plus, QuantumState.zero(1)) == pytest.approx(0.5)


class TestBits:
    """Tests for little-endian bit and register encodings."""

    @pytest.mark.parametrize(
        "value,width,bits",
        [(6, 3, [0, 1, 1]), (1, 4, [1, 0, 0, 0]), (0, 2, [0, 0]), (13, 2, [1, 0])],
        ids=["six", "one_padded", "zero", "truncated"],
    )
    def test_int_to_bits(self, value: int, width: int, bits):
        assert int_to_bits(value, width) == bits

    def test_bits_to_int(self):
        assert bits_to_int([0, 1, 1]) == 6
        assert bits_to_int([]) == 0
        assert bits_to_int(int_to_bits(11, 4)) == 11

    def test_register_index_scatters_bits(self):
        assert register_index([3, 4], 2) == 0b1000
        assert register_index([5, 1], 3) == 0b10001

    def test_register_value_must_fit(self):
        with pytest.raises(ValueError):
            register_index([1, 2], 4)
