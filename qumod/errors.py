"""
Exceptions raised by qumod.

Every error here is a precondition violation. It is raised while a gate or
circuit is being constructed, before any amplitude is touched, and it is
never retried.
"""


class QumodError(ValueError):
    """Base class for all qumod precondition errors."""


class InvalidQubitIndex(QumodError):
    """A qubit index lies outside [1, n] for the state or circuit at hand."""

    def __init__(self, qubit, num_qubits):
        self.qubit = qubit
        self.num_qubits = num_qubits
        super().__init__(f"qubit {qubit} is outside [1, {num_qubits}]")


class InvalidGateSpec(QumodError):
    """A gate matrix is not a 2x2 unitary, or a gate repeats an operand."""


class RegisterWidthMismatch(QumodError):
    """Two registers that must have equal width do not, or a modulus does not fit."""


class AncillaReuseError(QumodError):
    """Control, register and ancilla qubits of one circuit are not pairwise distinct."""

    def __init__(self, qubit, first_role, second_role):
        self.qubit = qubit
        super().__init__(
            f"qubit {qubit} is used both as {first_role} and as {second_role}"
        )


class ModularInverseUndefined(QumodError):
    """gcd(a, n) != 1, so a has no inverse modulo n."""

    def __init__(self, a, n, g):
        self.a = a
        self.n = n
        self.gcd = g
        super().__init__(f"{a} has no inverse modulo {n} (gcd is {g})")


class OperandOutOfRange(QumodError):
    """A classical constant or a register value lies outside what a circuit accepts."""
