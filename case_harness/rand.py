"""Seeded pseudo-random numbers for reproducible fuzzing."""

MASK = 0xFFFFFFFF


def rand(seed: int) -> tuple[int, int]:
    """Return a 32-bit pseudo-random value and the updated seed.

    The value is assembled from the high byte of four linear congruential
    steps, whose low bits are too regular to use directly.
    """
    seed &= MASK
    value = 0
    for _ in range(4):
        seed = (seed * 1103515245 + 12345) & MASK
        value = (value << 8) | (seed >> 24)
    return value, seed
