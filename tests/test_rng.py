from sessiontime.algorithms.rng import SeededRandom


def test_first_values_follow_lcg():
    rng = SeededRandom(1)
    assert rng.next() == 1103527590 / 2 ** 31
    assert rng.state == 1103527590


def test_same_seed_same_sequence():
    a, b = SeededRandom(2024), SeededRandom(2024)
    assert [a.next() for _ in range(50)] == [b.next() for _ in range(50)]


def test_values_in_unit_interval_and_int_range():
    rng = SeededRandom(99)
    for _ in range(1000):
        assert 0 <= rng.next() < 1
        assert 0 <= rng.next_int(7) < 7


def test_large_seed_is_reduced():
    assert SeededRandom(2 ** 31 + 5).state == 5
