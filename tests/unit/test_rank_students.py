"""Leaderboard ranking order and ties."""

from __future__ import annotations

from campus.rankings.service import rank_students


def _row(uid, points, name=None):
    return {"uid": uid, "display_name": name, "gen": "30", "total_points": points}


class TestRankStudents:
    def test_orders_by_points_desc(self):
        ranked = rank_students([_row("a", 1.0), _row("b", 3.5), _row("c", 2.0)])
        assert [r["uid"] for r in ranked] == ["b", "c", "a"]
        assert [r["rank"] for r in ranked] == [1, 2, 3]

    def test_ties_share_rank_and_sort_by_name(self):
        ranked = rank_students([
            _row("a", 5.0, "Yaw"),
            _row("b", 5.0, "Abena"),
            _row("c", 7.0, "Kwame"),
            _row("d", 1.0, "Esi"),
        ])
        assert [(r["uid"], r["rank"]) for r in ranked] == [("c", 1), ("b", 2), ("a", 2), ("d", 4)]

    def test_empty(self):
        assert rank_students([]) == []
