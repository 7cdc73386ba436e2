import random
import unittest

from backend.app.core.errors import ValidationError
from backend.app.engine.pairing import (
    pair_sequential,
    parse_bracket_type,
    round_robin_pairs,
    shuffled,
    total_rounds_for,
    validate_teams,
)
from backend.app.models.enums import BracketType


class TestValidation(unittest.TestCase):
    def test_rejects_fewer_than_two_teams(self):
        with self.assertRaises(ValidationError):
            validate_teams([])
        with self.assertRaises(ValidationError):
            validate_teams([7])

    def test_rejects_duplicate_teams(self):
        with self.assertRaises(ValidationError):
            validate_teams([1, 2, 1])

    def test_accepts_any_sequence(self):
        self.assertEqual(validate_teams((3, 1, 2)), [3, 1, 2])

    def test_bracket_type_parsing(self):
        self.assertEqual(parse_bracket_type("round_robin"), BracketType.ROUND_ROBIN)
        self.assertEqual(parse_bracket_type("single_elimination"), BracketType.SINGLE_ELIMINATION)
        with self.assertRaises(ValidationError):
            parse_bracket_type("double_elimination")


class TestTotalRounds(unittest.TestCase):
    def test_round_robin_is_always_one_round(self):
        for n in (2, 3, 8, 17):
            self.assertEqual(total_rounds_for(BracketType.ROUND_ROBIN, n), 1)

    def test_single_elimination_is_ceil_log2(self):
        expected = {2: 1, 3: 2, 4: 2, 5: 3, 8: 3, 9: 4, 16: 4, 17: 5}
        for n, rounds in expected.items():
            self.assertEqual(total_rounds_for(BracketType.SINGLE_ELIMINATION, n), rounds, n)


class TestSequentialPairing(unittest.TestCase):
    def test_even_count_pairs_neighbours(self):
        planned = pair_sequential([1, 2, 3, 4])
        self.assertEqual(
            [(p.match_number, p.team1_id, p.team2_id) for p in planned],
            [(1, 1, 2), (2, 3, 4)]
        )
        self.assertFalse(any(p.is_bye for p in planned))

    def test_odd_count_gives_bye_to_last_team(self):
        planned = pair_sequential([10, 20, 30, 40, 50])
        self.assertEqual(len(planned), 3)
        self.assertTrue(planned[-1].is_bye)
        self.assertEqual(planned[-1].team1_id, 50)
        self.assertEqual(sum(p.is_bye for p in planned), 1)

    def test_match_count_is_half_rounded_up(self):
        for n in range(2, 20):
            planned = pair_sequential(list(range(n)))
            self.assertEqual(len(planned), (n + 1) // 2)
            self.assertEqual(sum(p.is_bye for p in planned), n % 2)


class TestRoundRobinPairs(unittest.TestCase):
    def test_three_teams(self):
        planned = round_robin_pairs([1, 2, 3])
        self.assertEqual(
            [(p.team1_id, p.team2_id) for p in planned],
            [(1, 2), (1, 3), (2, 3)]
        )
        self.assertEqual([p.match_number for p in planned], [1, 2, 3])

    def test_every_pair_exactly_once(self):
        for n in range(2, 12):
            planned = round_robin_pairs(list(range(n)))
            self.assertEqual(len(planned), n * (n - 1) // 2)
            pairs = {frozenset((p.team1_id, p.team2_id)) for p in planned}
            self.assertEqual(len(pairs), len(planned))
            self.assertFalse(any(p.is_bye for p in planned))


class TestShuffle(unittest.TestCase):
    def test_shuffle_is_a_permutation_and_leaves_input_alone(self):
        teams = list(range(1, 33))
        result = shuffled(teams, random.Random(42))
        self.assertEqual(sorted(result), teams)
        self.assertEqual(teams, list(range(1, 33)))

    def test_seeded_shuffle_is_reproducible(self):
        teams = list(range(1, 17))
        self.assertEqual(shuffled(teams, random.Random(7)), shuffled(teams, random.Random(7)))


if __name__ == '__main__':
    unittest.main()
