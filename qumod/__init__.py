"""
qumod - A state-vector simulator for reversible modular arithmetic circuits.

This package simulates small quantum circuits on a dense amplitude vector
and builds the modular arithmetic used by phase estimation and order
finding on top of it.

Qubits are numbered from 1; qubit 1 is the least significant bit of the
basis-state index, and registers are listed least significant qubit first.

Modules:
    core        - Amplitude vector and gate kernel
    gates       - Gate values and standard gate matrices
    circuit     - Ordered gate sequences
    measure     - Measurement with an injectable random source
    qft         - Quantum Fourier Transform, plain and controlled
    arithmetic  - cadd, comparator, caddmodN, cmultmodN, cexpomodN
    numtheory   - Extended Euclid, modular inverse, continued fractions
    utils       - State comparison and register encoding

Quick Start:
    >>> from qumod import *
    >>> state = QuantumState.zero(2)
    >>> state = apply_single(H(1), state)
    >>> state = apply_controlled([1], X(2), state)
    >>> result = measure(state, 1, rng=7)   # Bell pair: both qubits agree
"""

import logging

# Core functionality
from .core import (
    QuantumState,
    apply_single,
    apply_controlled,
    apply_swap,
    apply_gate,
)

# Errors
from .errors import (
    QumodError,
    InvalidQubitIndex,
    InvalidGateSpec,
    RegisterWidthMismatch,
    AncillaReuseError,
    ModularInverseUndefined,
    OperandOutOfRange,
)

# Gates
from .gates import (
    GateKind,
    SingleQubitGate,
    ControlledGate,
    SwapGate,
    QFTGate,
    X_gate,
    Y_gate,
    Z_gate,
    H_gate,
    S_gate,
    T_gate,
    Tinv_gate,
    P_gate,
    Rx_gate,
    Ry_gate,
    Rz_gate,
    X,
    Y,
    Z,
    H,
    S,
    T,
    Tdg,
    P,
    Rx,
    Ry,
    Rz,
    CNOT,
    CZ,
    CP,
    TOFFOLI,
    SWAP,
    CSWAP,
)

from .circuit import Circuit

# Measurement
from .measure import (
    MeasurementResult,
    measure,
    measure_register,
)

# QFT
from .qft import (
    qft,
    controlled_qft,
    qft_gates,
    controlled_qft_gates,
)

# Modular arithmetic
from .arithmetic import (
    AncillaAllocation,
    build_cadd,
    cadd,
    build_is_less_than,
    is_less_than,
    build_caddmodN,
    caddmodN,
    build_cmultmodN,
    cmultmodN,
    build_cexpomodN,
    cexpomodN,
)

# Number theory
from .numtheory import (
    gcd,
    is_coprime,
    extended_gcd,
    modular_inverse,
    continued_fraction_expansion,
    convergents,
)

# Utilities
from .utils import (
    allclose_up_to_global_phase,
    state_fidelity,
    int_to_bits,
    bits_to_int,
    register_index,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    # Core
    "QuantumState",
    "apply_single",
    "apply_controlled",
    "apply_swap",
    "apply_gate",
    # Errors
    "QumodError",
    "InvalidQubitIndex",
    "InvalidGateSpec",
    "RegisterWidthMismatch",
    "AncillaReuseError",
    "ModularInverseUndefined",
    "OperandOutOfRange",
    # Gates
    "GateKind",
    "SingleQubitGate",
    "ControlledGate",
    "SwapGate",
    "QFTGate",
    "X_gate",
    "Y_gate",
    "Z_gate",
    "H_gate",
    "S_gate",
    "T_gate",
    "Tinv_gate",
    "P_gate",
    "Rx_gate",
    "Ry_gate",
    "Rz_gate",
    "X",
    "Y",
    "Z",
    "H",
    "S",
    "T",
    "Tdg",
    "P",
    "Rx",
    "Ry",
    "Rz",
    "CNOT",
    "CZ",
    "CP",
    "TOFFOLI",
    "SWAP",
    "CSWAP",
    # Circuit
    "Circuit",
    # Measurement
    "MeasurementResult",
    "measure",
    "measure_register",
    # QFT
    "qft",
    "controlled_qft",
    "qft_gates",
    "controlled_qft_gates",
    # Arithmetic
    "AncillaAllocation",
    "build_cadd",
    "cadd",
    "build_is_less_than",
    "is_less_than",
    "build_caddmodN",
    "caddmodN",
    "build_cmultmodN",
    "cmultmodN",
    "build_cexpomodN",
    "cexpomodN",
    # Number theory
    "gcd",
    "is_coprime",
    "extended_gcd",
    "modular_inverse",
    "continued_fraction_expansion",
    "convergents",
    # Utils
    "allclose_up_to_global_phase",
    "state_fidelity",
    "int_to_bits",
    "bits_to_int",
    "register_index",
]
