"""
Tolerance tiers for numerical validation.

Defines precision expectations used by the test suite when comparing
estimates against hand-derived reference values or closed-form identities.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Closed-form products and ratios (KM steps, expected events)
EXACT_FP64 = ToleranceTier(
    rtol=1e-12,
    atol=1e-14,
    name='exact_fp64',
    description='Double precision, closed-form arithmetic',
)

# Identities that go through a matrix solve or a special function
IDENTITY_FP64 = ToleranceTier(
    rtol=1e-9,
    atol=1e-9,
    name='identity_fp64',
    description='Double precision, algebraic identities (e.g. two-group log-rank)',
)

# Published reference values quoted to a few significant digits
REFERENCE_PRINTED = ToleranceTier(
    rtol=1e-3,
    atol=1e-3,
    name='reference_printed',
    description='Reference output printed to 3-4 significant digits',
)


def get_tolerance(name: str) -> ToleranceTier:
    """Look up a tolerance tier by name."""
    tiers = {
        t.name: t for t in (EXACT_FP64, IDENTITY_FP64, REFERENCE_PRINTED)
    }
    if name not in tiers:
        raise ValueError(
            f"Unknown tolerance tier '{name}'. Choose from {sorted(tiers)}."
        )
    return tiers[name]
