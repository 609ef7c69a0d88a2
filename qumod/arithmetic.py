"""
Reversible modular arithmetic built from QFT addition.

Every circuit here is controlled by one qubit and is the identity when that
qubit is |0⟩. The tower, each level built from the previous ones:

    cadd          register += y (mod 2^n)              no ancilla
    is_less_than  indicator ^= (register < y)          1 ancilla
    caddmodN      register = (register + y) mod N      2 indicators + 1 ancilla
    cmultmodN     |x⟩|0⟩ → |x·y mod N⟩|0⟩              4 ancillas
    cexpomodN     |x⟩|0⟩ → |x·y^a mod N⟩|0⟩            4 ancillas

Registers are lists of qubit indices, least significant first.

Each circuit comes as a `build_*` function that appends gates to a Circuit
and as a runner that builds a circuit for the state and runs it. Operand
and modulus checks happen while building, so a failing call never touches
the state. Scratch qubits are declared through an AncillaAllocation, which
rejects overlapping qubits and adds |0⟩ checks at circuit entry and exit.

References:
- T. G. Draper, "Addition on a Quantum Computer", 2000. arXiv:quant-ph/0008033
- S. Beauregard, "Circuit for Shor's algorithm using 2n+3 qubits", 2002
"""

import logging
from typing import Dict, Mapping, Sequence, Tuple

import numpy as np

from .circuit import Circuit
from .core import QuantumState, basis_indices, qubit_mask
from .errors import AncillaReuseError, OperandOutOfRange, RegisterWidthMismatch
from .gates import CNOT, CP, CSWAP, TOFFOLI, X
from .numtheory import modular_inverse
from .qft import controlled_qft_gates

logger = logging.getLogger(__name__)

# Largest probability of finding a declared ancilla in |1⟩ that still counts as clean
CLEAN_ATOL = 1e-8


# =============================================================================
# Ancilla bookkeeping
# =============================================================================

class AncillaAllocation:
    """
    Role-tagged qubits of one composite circuit invocation.

    Args:
        ancillas: Mapping role -> qubit for scratch qubits that must be |0⟩
                  on entry and on exit
        **operands: Other qubits of the invocation, each a single index or a
                    register (sequence of indices)

    Raises:
        AncillaReuseError: If any qubit appears under two roles
    """

    def __init__(self, ancillas: Mapping[str, int], **operands):
        self.ancillas: Dict[str, int] = dict(ancillas)
        self.roles: Dict[int, str] = {}

        for role, qubits in operands.items():
            if isinstance(qubits, (int, np.integer)):
                self._claim(int(qubits), role)
            else:
                for position, q in enumerate(qubits):
                    self._claim(q, f"{role}[{position}]")
        for role, q in self.ancillas.items():
            self._claim(q, role)

    def _claim(self, qubit: int, role: str):
        if qubit in self.roles:
            raise AncillaReuseError(qubit, self.roles[qubit], role)
        self.roles[qubit] = role

    @property
    def zero_qubits(self) -> Tuple[int, ...]:
        return tuple(self.ancillas.values())

    def residue(self, state: QuantumState) -> float:
        """Probability that at least one ancilla is not |0⟩."""
        mask = qubit_mask(self.zero_qubits)
        dirty = (basis_indices(state.num_qubits) & mask) != 0
        return float(state.probabilities()[dirty].sum())

    def is_clean(self, state: QuantumState, atol: float = CLEAN_ATOL) -> bool:
        return self.residue(state) <= atol

    def guard(self, circuit: Circuit, where: str) -> Circuit:
        """Add a check to the circuit that every ancilla is |0⟩ at this point."""
        if not self.ancillas:
            return circuit
        return circuit.check(
            self.is_clean, f"{where}: ancillas {self.ancillas} are not |0⟩"
        )


def _branch_probability(state: QuantumState, ones: Sequence[int],
                        zeros: Sequence[int]) -> float:
    """Probability that every qubit in `ones` is 1 and every qubit in `zeros` is 0."""
    index = basis_indices(state.num_qubits)
    one_mask, zero_mask = qubit_mask(ones), qubit_mask(zeros)
    selected = ((index & one_mask) == one_mask) & ((index & zero_mask) == 0)
    return float(state.probabilities()[selected].sum())


def _register(qubits: Sequence[int], what: str) -> Tuple[int, ...]:
    qubits = tuple(qubits)
    if not qubits:
        raise RegisterWidthMismatch(f"{what} has no qubits")
    return qubits


def _check_modulus(N: int, width: int):
    if not 0 < N <= 2 ** width:
        raise RegisterWidthMismatch(
            f"modulus {N} does not fit a {width}-qubit register"
        )


def _check_below_modulus(state: QuantumState, reg: Sequence[int], N: int):
    """Raise unless every value the register can be measured in is below N."""
    values = state.register_distribution(reg, atol=CLEAN_ATOL)
    if max(values) >= N:
        raise OperandOutOfRange(
            f"register {tuple(reg)} may hold {max(values)}, which is not below {N}"
        )


# =============================================================================
# Controlled addition in the Fourier basis
# =============================================================================

def build_cadd(circuit: Circuit, control: int, bits: Sequence[int], y: int) -> Circuit:
    """
    Controlled addition of a classical constant: bits += y (mod 2^n).

    The register is Fourier transformed, position k (1-indexed) is rotated
    by 2π·y/2^(n-k+1), and the transform is undone. Overflow wraps around.
    """
    bits = _register(bits, "register")
    AncillaAllocation({}, control=control, register=bits)
    n = len(bits)
    y %= 2 ** n

    circuit.extend(controlled_qft_gates(control, bits))
    for k in range(1, n + 1):
        theta = 2 * np.pi * y / 2 ** (n - k + 1)
        circuit.append(CP(theta, control, bits[k - 1]))
    circuit.extend(controlled_qft_gates(control, bits, inverse=True))
    return circuit


def cadd(control: int, bits: Sequence[int], state: QuantumState, y: int) -> QuantumState:
    """
    Add y to the register modulo 2^n when `control` is |1⟩.

    Example:
        >>> state = QuantumState.basis(4, register_index([2, 3, 4], 5) | 1)
        >>> cadd(1, [2, 3, 4], state, 3).register_value([2, 3, 4])
        0
    """
    circuit = build_cadd(Circuit(state.num_qubits), control, bits, y)
    return circuit.run(state)


# =============================================================================
# Comparator
# =============================================================================

def build_is_less_than(circuit: Circuit, control: int, bits: Sequence[int], y: int,
                       indicator: int, ancilla: int) -> Circuit:
    """
    Flip `indicator` when the register value is less than y.

    `ancilla` extends the register by one most significant bit. Adding
    2^(n+1) - y to the extended register sets that bit exactly when the
    value is below y; the bit is copied into the indicator and y is added
    back, leaving register and ancilla as they were.
    """
    bits = _register(bits, "register")
    n = len(bits)
    if not 0 <= y <= 2 ** n:
        raise OperandOutOfRange(f"comparison constant {y} is outside [0, {2 ** n}]")
    allocation = AncillaAllocation({"ancilla": ancilla}, control=control,
                                   register=bits, indicator=indicator)
    extended = bits + (ancilla,)

    allocation.guard(circuit, "is_less_than entry")
    build_cadd(circuit, control, extended, 2 ** (n + 1) - y)
    circuit.append(CNOT(ancilla, indicator))
    build_cadd(circuit, control, extended, y)
    allocation.guard(circuit, "is_less_than exit")
    return circuit


def is_less_than(control: int, bits: Sequence[int], state: QuantumState, y: int,
                 indicator: int, ancilla: int) -> QuantumState:
    """Flip `indicator` when `control` is |1⟩ and the register holds a value < y."""
    circuit = build_is_less_than(Circuit(state.num_qubits), control, bits, y,
                                 indicator, ancilla)
    return circuit.run(state)


# =============================================================================
# Modular addition
# =============================================================================

def build_caddmodN(circuit: Circuit, control: int, bits: Sequence[int], y: int, N: int,
                   c1: int, c2: int, ancilla: int) -> Circuit:
    """
    Controlled modular addition: bits = (bits + y) mod N for values below N.

    Values x >= N are left unchanged. With y' = y mod N the circuit sets
    c1 = (x < N) and c2 = (x < N - y'). When c1 = 1 it adds y' - N if
    c2 = 0 (the sum wraps) and y' if c2 = 1. The indicators are then
    cleared from the result r: r < y' holds exactly in the wrapped case,
    so comparing against y' and CNOT(c1, c2) zero c2, and comparing r
    against N zeroes c1.

    c1 = 0 with c2 = 1 cannot occur, since x >= N implies x >= N - y'.
    """
    bits = _register(bits, "register")
    n = len(bits)
    _check_modulus(N, n)
    allocation = AncillaAllocation({"c1": c1, "c2": c2, "ancilla": ancilla},
                                   control=control, register=bits)
    y %= N
    logger.debug("caddmodN y=%d N=%d on %d qubits", y, N, n)

    allocation.guard(circuit, "caddmodN entry")
    build_is_less_than(circuit, control, bits, N, c1, ancilla)
    build_is_less_than(circuit, control, bits, N - y, c2, ancilla)
    circuit.check(
        lambda state: _branch_probability(state, ones=(c2,), zeros=(c1,)) <= CLEAN_ATOL,
        "caddmodN: indicators reached c1=0, c2=1",
    )

    # Wraparound branch: c1=1, c2=0
    circuit.append(X(c2))
    circuit.append(TOFFOLI(c1, c2, ancilla))
    build_cadd(circuit, ancilla, bits, y - N)
    circuit.append(TOFFOLI(c1, c2, ancilla))
    circuit.append(X(c2))

    # Plain branch: c1=1, c2=1
    circuit.append(TOFFOLI(c1, c2, ancilla))
    build_cadd(circuit, ancilla, bits, y)
    circuit.append(TOFFOLI(c1, c2, ancilla))

    build_is_less_than(circuit, control, bits, y, c2, ancilla)
    circuit.append(CNOT(c1, c2))
    build_is_less_than(circuit, control, bits, N, c1, ancilla)
    allocation.guard(circuit, "caddmodN exit")
    return circuit


def caddmodN(control: int, bits: Sequence[int], state: QuantumState, y: int, N: int,
             c1: int, c2: int, ancilla: int) -> QuantumState:
    """
    Add y modulo N to the register when `control` is |1⟩.

    c1, c2 and ancilla must be |0⟩ and are returned to |0⟩.
    """
    circuit = build_caddmodN(Circuit(state.num_qubits), control, bits, y, N,
                             c1, c2, ancilla)
    return circuit.run(state)


# =============================================================================
# Modular multiplication and exponentiation
# =============================================================================

def _multiplier_allocation(control: int, reg1: Sequence[int], reg2: Sequence[int],
                           N: int, ancillas: Sequence[int]):
    reg1 = _register(reg1, "reg1")
    reg2 = _register(reg2, "reg2")
    if len(reg1) != len(reg2):
        raise RegisterWidthMismatch(
            f"reg1 has {len(reg1)} qubits but reg2 has {len(reg2)}"
        )
    _check_modulus(N, len(reg1))
    ancillas = tuple(ancillas)
    if len(ancillas) != 4:
        raise RegisterWidthMismatch(
            f"modular multiplication needs 4 ancillas, got {len(ancillas)}"
        )

    scratch = dict(zip(("c1", "c2", "ancilla", "select"), ancillas))
    # The co-register is scratch too: |0⟩ before and after
    scratch.update((f"reg2[{i}]", q) for i, q in enumerate(reg2))
    allocation = AncillaAllocation(scratch, control=control, reg1=reg1)
    return reg1, reg2, ancillas, allocation


def _accumulate(circuit: Circuit, control: int, source: Sequence[int],
                target: Sequence[int], summands: Sequence[int], N: int,
                ancillas: Sequence[int]):
    """target += Σ summands[i]·source[i] (mod N), controlled by `control`."""
    c1, c2, ancilla, select = ancillas
    for q, summand in zip(source, summands):
        circuit.append(TOFFOLI(control, q, select))
        build_caddmodN(circuit, select, target, summand, N, c1, c2, ancilla)
        circuit.append(TOFFOLI(control, q, select))


def build_cmultmodN(circuit: Circuit, control: int, reg1: Sequence[int],
                    reg2: Sequence[int], y: int, N: int,
                    ancillas: Sequence[int]) -> Circuit:
    """
    Controlled modular multiplication |x⟩|0⟩ → |x·y mod N⟩|0⟩.

    The product is accumulated into reg2 by shift-and-add (bit i of x adds
    2^i·y mod N), the registers are swapped, and reg2, now holding x, is
    cleared by adding -2^i·y⁻¹ mod N for every bit i of the product.

    Args:
        control: Control qubit
        reg1: Register holding x < N, least significant first
        reg2: Co-register of the same width, |0⟩ on entry and exit
        y: Classical multiplier, coprime to N
        N: Modulus, at most 2^len(reg1)
        ancillas: Four scratch qubits (c1, c2, ancilla, select)

    Raises:
        RegisterWidthMismatch: If reg1 and reg2 differ in width or N does not fit
        AncillaReuseError: If any qubits coincide
        ModularInverseUndefined: If gcd(y, N) != 1
    """
    reg1, reg2, ancillas, allocation = _multiplier_allocation(control, reg1, reg2, N, ancillas)
    y_inv = modular_inverse(y, N)
    y %= N
    n = len(reg1)
    logger.debug("cmultmodN y=%d (inverse %d) N=%d on %d-qubit registers", y, y_inv, N, n)

    allocation.guard(circuit, "cmultmodN entry")
    _accumulate(circuit, control, reg1, reg2,
                [(2 ** i * y) % N for i in range(n)], N, ancillas)
    for q1, q2 in zip(reg1, reg2):
        circuit.append(CSWAP(control, q1, q2))
    _accumulate(circuit, control, reg1, reg2,
                [(N - (2 ** i * y_inv) % N) % N for i in range(n)], N, ancillas)
    allocation.guard(circuit, "cmultmodN exit")
    return circuit


def cmultmodN(control: int, reg1: Sequence[int], reg2: Sequence[int],
              state: QuantumState, y: int, N: int,
              ancillas: Sequence[int]) -> QuantumState:
    """
    Multiply reg1 by y modulo N in place when `control` is |1⟩.

    Raises:
        OperandOutOfRange: If reg1 has nonzero amplitude on a value >= N
        RegisterWidthMismatch, AncillaReuseError, ModularInverseUndefined:
            As for build_cmultmodN
    """
    circuit = build_cmultmodN(Circuit(state.num_qubits), control, reg1, reg2, y, N, ancillas)
    _check_below_modulus(state, reg1, N)
    return circuit.run(state)


def build_cexpomodN(circuit: Circuit, control: int, reg1: Sequence[int],
                    reg2: Sequence[int], y: int, a: int, N: int,
                    ancillas: Sequence[int], method: str = "square") -> Circuit:
    """
    Controlled modular exponentiation |x⟩ → |x·y^a mod N⟩.

    Args:
        method: "square" multiplies by y^(2^j) mod N for every set bit j of a
                (a logarithmic number of multipliers); "repeated" applies the
                multiplier by y a times.
    """
    if a < 0:
        raise OperandOutOfRange(f"exponent must be non-negative, got {a}")
    if method not in ("square", "repeated"):
        raise ValueError(f"unknown exponentiation method {method!r}")
    _multiplier_allocation(control, reg1, reg2, N, ancillas)
    modular_inverse(y, N)

    if method == "repeated":
        for _ in range(a):
            build_cmultmodN(circuit, control, reg1, reg2, y, N, ancillas)
        return circuit

    factor = y % N
    multipliers = 0
    while a:
        if a & 1:
            build_cmultmodN(circuit, control, reg1, reg2, factor, N, ancillas)
            multipliers += 1
        a >>= 1
        factor = factor * factor % N
    logger.debug("cexpomodN used %d multipliers", multipliers)
    return circuit


def cexpomodN(control: int, reg1: Sequence[int], reg2: Sequence[int],
              state: QuantumState, y: int, a: int, N: int,
              ancillas: Sequence[int], method: str = "square") -> QuantumState:
    """
    Multiply reg1 by y^a modulo N in place when `control` is |1⟩.

    Raises:
        OperandOutOfRange: If reg1 has nonzero amplitude on a value >= N
    """
    circuit = build_cexpomodN(Circuit(state.num_qubits), control, reg1, reg2,
                              y, a, N, ancillas, method=method)
    _check_below_modulus(state, reg1, N)
    return circuit.run(state)
