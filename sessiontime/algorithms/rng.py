import time

MODULUS = 2 ** 31
MULTIPLIER = 1103515245
INCREMENT = 12345

def wall_clock_seed() -> int:
    return int(time.time() * 1000)

class SeededRandom:
    """Linear-congruential generator; the same seed replays the same sequence."""

    def __init__(self, seed: int):
        self.state = int(seed) % MODULUS

    def next(self) -> float:
        self.state = (self.state * MULTIPLIER + INCREMENT) % MODULUS
        return self.state / MODULUS

    def next_int(self, n: int) -> int:
        return int(self.next() * n)
