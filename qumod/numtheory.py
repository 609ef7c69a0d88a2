"""
Classical number theory used by the arithmetic circuits.

- Extended Euclidean algorithm and modular inverses, needed to uncompute
  modular multiplication
- Continued fractions, used to turn a measured phase into a period
"""

from typing import List, Tuple

from .errors import ModularInverseUndefined


def gcd(a: int, b: int) -> int:
    """
    Greatest common divisor using Euclidean algorithm.

    Args:
        a, b: Integers

    Returns:
        GCD of a and b (non-negative)
    """
    a, b = abs(a), abs(b)
    while b:
        a, b = b, a % b
    return a


def is_coprime(a: int, N: int) -> bool:
    """True if gcd(a, N) == 1."""
    return gcd(a, N) == 1


def extended_gcd(a: int, b: int) -> Tuple[int, int, int]:
    """
    Extended Euclidean algorithm, iterative.

    Returns:
        Tuple (g, s, t) with g = gcd(a, b) >= 0 and g == s*a + t*b
    """
    old_r, r = a, b
    old_s, s = 1, 0
    old_t, t = 0, 1

    while r != 0:
        quotient = old_r // r
        old_r, r = r, old_r - quotient * r
        old_s, s = s, old_s - quotient * s
        old_t, t = t, old_t - quotient * t

    if old_r < 0:
        old_r, old_s, old_t = -old_r, -old_s, -old_t
    return old_r, old_s, old_t


def modular_inverse(a: int, n: int) -> int:
    """
    Compute the inverse of a modulo n.

    Args:
        a: Number to invert
        n: Modulus (positive)

    Returns:
        x in [0, n) such that (a * x) mod n == 1 mod n

    Raises:
        ModularInverseUndefined: If gcd(a, n) != 1
    """
    if n <= 0:
        raise ValueError(f"modulus must be positive, got {n}")
    g, s, _ = extended_gcd(a % n, n)
    if g != 1:
        raise ModularInverseUndefined(a, n, g)
    return s % n


# =============================================================================
# Continued fractions
# =============================================================================

def continued_fraction_expansion(x: float, max_terms: int = 20) -> List[int]:
    """
    Compute continued fraction expansion of x.

    Returns list of coefficients [a0, a1, a2, ...] where
    x ≈ a0 + 1/(a1 + 1/(a2 + ...))
    """
    coeffs = []
    for _ in range(max_terms):
        coeffs.append(int(x))
        frac = x - int(x)
        if frac < 1e-10:
            break
        x = 1 / frac
    return coeffs


def convergents(coeffs: List[int]) -> List[Tuple[int, int]]:
    """
    Compute convergents from continued fraction coefficients.

    Each convergent is a rational approximation to the original number.

    Returns:
        List of (numerator, denominator) pairs
    """
    convs = []
    h_prev, h_curr = 0, 1
    k_prev, k_curr = 1, 0

    for a in coeffs:
        h_new = a * h_curr + h_prev
        k_new = a * k_curr + k_prev
        convs.append((h_new, k_new))
        h_prev, h_curr = h_curr, h_new
        k_prev, k_curr = k_curr, k_new

    return convs
