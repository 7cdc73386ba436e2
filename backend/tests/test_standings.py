import unittest
from types import SimpleNamespace

from backend.app.engine.standings import compute_standings, pick_champion

A, B, C, D, E, F = 1, 2, 3, 4, 5, 6


def played(team1, team2, winner):
    return SimpleNamespace(team1_id=team1, team2_id=team2, winner_team_id=winner, status="completed")


def pending(team1, team2):
    return SimpleNamespace(team1_id=team1, team2_id=team2, winner_team_id=None, status="scheduled")


class TestStandings(unittest.TestCase):
    def test_three_team_example(self):
        """A beats B and C, B beats C: A 6 pts, B 3 pts, C 0 pts."""
        table = compute_standings([played(A, B, A), played(A, C, A), played(B, C, B)])

        self.assertEqual([row.team_id for row in table], [A, B, C])
        self.assertEqual((table[0].points, table[0].wins), (6, 2))
        self.assertEqual((table[1].points, table[1].wins), (3, 1))
        self.assertEqual((table[2].points, table[2].wins, table[2].losses), (0, 0, 2))
        self.assertTrue(all(row.matches_played == 2 for row in table))
        self.assertEqual(pick_champion(table), A)

    def test_draw_gives_one_point_each(self):
        table = compute_standings([played(A, B, None)])
        self.assertEqual({row.team_id: (row.points, row.draws) for row in table}, {A: (1, 1), B: (1, 1)})

    def test_points_tie_broken_by_wins(self):
        # A: three draws = 3 pts, 0 wins. E: one win = 3 pts, 1 win
        matches = [
            played(A, B, None),
            played(A, C, None),
            played(A, D, None),
            played(E, F, E),
        ]
        table = compute_standings(matches)

        self.assertEqual([row.team_id for row in table[:2]], [E, A])
        self.assertEqual(table[0].points, table[1].points)
        self.assertEqual(pick_champion(table), E)

    def test_equal_points_and_wins_keep_appearance_order(self):
        table = compute_standings([played(C, D, C), played(A, B, A)])
        self.assertEqual([row.team_id for row in table[:2]], [C, A])

    def test_unplayed_teams_are_listed(self):
        table = compute_standings([played(A, B, B), pending(A, C), pending(B, C)])
        rows = {row.team_id: row for row in table}
        self.assertEqual(set(rows), {A, B, C})
        self.assertEqual(rows[C].matches_played, 0)
        self.assertEqual(table[0].team_id, B)

    def test_no_champion_without_completed_matches(self):
        table = compute_standings([pending(A, B), pending(A, C)])
        self.assertEqual(len(table), 3)
        self.assertIsNone(pick_champion(table))
        self.assertIsNone(pick_champion([]))

    def test_custom_point_values(self):
        table = compute_standings([played(A, B, A), played(A, C, None)], win_points=2, draw_points=1)
        rows = {row.team_id: row.points for row in table}
        self.assertEqual(rows, {A: 3, B: 0, C: 1})


if __name__ == '__main__':
    unittest.main()
