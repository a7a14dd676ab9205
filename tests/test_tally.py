"""
Tests for the tally engine

apply_ballot must add exactly one vote per office with a real choice and
nothing else; the derived views are recomputed from whatever roster they
are handed.
"""

from election import tally
from election.constants import default_roster
from election.models import ABSTAIN, Candidate, Office


def _votes(candidates):
    return {c.id: c.votes for c in candidates}


class TestApplyBallot:

    def test_increments_each_chosen_candidate_once(self):
        roster = default_roster()
        before = _votes(roster)
        selections = {
            Office.PRESIDENT: "p2",
            Office.VICE_PRESIDENT: "vp1",
            Office.SECRETARY: ABSTAIN,
            Office.AUDITOR: "aud2",
            Office.SGT_AT_ARMS: ABSTAIN,
        }

        after = _votes(tally.apply_ballot(roster, selections))

        changed = {cid for cid in before if after[cid] != before[cid]}
        assert changed == {"p2", "vp1", "aud2"}
        for cid in changed:
            assert after[cid] == before[cid] + 1

    def test_all_abstain_changes_nothing(self):
        roster = default_roster()
        selections = {office: ABSTAIN for office in Office}
        assert _votes(tally.apply_ballot(roster, selections)) == _votes(roster)

    def test_input_roster_is_not_mutated(self):
        roster = default_roster()
        tally.apply_ballot(roster, {Office.PRESIDENT: "p1"})
        assert roster[0].votes == 42

    def test_cross_office_choice_is_ignored(self):
        """An Auditor id filed under President counts for nobody"""
        roster = default_roster()
        after = tally.apply_ballot(roster, {Office.PRESIDENT: "aud1"})
        assert _votes(after) == _votes(roster)

    def test_unknown_id_is_ignored(self):
        roster = default_roster()
        after = tally.apply_ballot(roster, {Office.PRESIDENT: "removed-candidate"})
        assert _votes(after) == _votes(roster)

    def test_roster_order_preserved(self):
        roster = default_roster()
        after = tally.apply_ballot(roster, {Office.SGT_AT_ARMS: "saa2"})
        assert [c.id for c in after] == [c.id for c in roster]


class TestAggregates:

    def test_total_votes(self):
        assert tally.total_votes(default_roster()) == 299

    def test_ballots_cast_estimate_floors(self):
        # 299 / 5 = 59.8
        assert tally.ballots_cast_estimate(default_roster()) == 59

    def test_ballots_cast_estimate_empty(self):
        assert tally.ballots_cast_estimate([]) == 0

    def test_leaderboard_descending(self):
        board = tally.office_leaderboard(default_roster(), Office.VICE_PRESIDENT)
        assert [c.id for c in board] == ["vp2", "vp1"]

    def test_leaderboard_ties_keep_roster_order(self):
        roster = [
            Candidate(id="x", name="X", office=Office.AUDITOR, bio="", image_url="u", votes=3),
            Candidate(id="y", name="Y", office=Office.AUDITOR, bio="", image_url="u", votes=5),
            Candidate(id="z", name="Z", office=Office.AUDITOR, bio="", image_url="u", votes=3),
        ]
        board = tally.office_leaderboard(roster, Office.AUDITOR)
        assert [c.id for c in board] == ["y", "x", "z"]

    def test_breakdown_covers_every_office_in_ballot_order(self):
        breakdown = tally.office_breakdown(default_roster())
        assert list(breakdown) == list(Office)
        assert all(len(board) == 2 for board in breakdown.values())

    def test_breakdown_with_empty_office(self):
        roster = [c for c in default_roster() if c.office != Office.SECRETARY]
        assert tally.office_breakdown(roster)[Office.SECRETARY] == []

    def test_global_leader_spans_offices(self):
        assert tally.global_leader(default_roster()).id == "aud1"

    def test_global_leader_tie_goes_to_roster_order(self):
        roster = [
            Candidate(id="first", name="F", office=Office.SECRETARY, bio="", image_url="u", votes=9),
            Candidate(id="second", name="S", office=Office.PRESIDENT, bio="", image_url="u", votes=9),
        ]
        assert tally.global_leader(roster).id == "first"

    def test_global_leader_empty_roster(self):
        assert tally.global_leader([]) is None

    def test_removed_candidate_absent_from_every_aggregate(self):
        roster = default_roster()
        remaining = [c for c in roster if c.id != "aud1"]

        assert tally.total_votes(remaining) == 299 - 55
        assert "aud1" not in [c.id for c in tally.office_leaderboard(remaining, Office.AUDITOR)]
        assert tally.global_leader(remaining).id == "p1"
        summary = tally.summarize(remaining)
        auditor = next(o for o in summary["offices"] if o["office"] == "Auditor")
        assert [row["id"] for row in auditor["standings"]] == ["aud2"]
        assert auditor["total_votes"] == 31


class TestSummarize:

    def test_summary_shape(self):
        summary = tally.summarize(default_roster(), ballots_submitted=4)

        assert summary["total_votes"] == 299
        assert summary["ballots_cast_estimate"] == 59
        assert summary["ballots_submitted"] == 4
        assert summary["candidate_count"] == 10
        assert summary["global_leader"]["id"] == "aud1"
        assert [o["office"] for o in summary["offices"]] == [o.value for o in Office]

    def test_vote_shares(self):
        summary = tally.summarize(default_roster())
        president = summary["offices"][0]
        # 42 / 80 and 38 / 80
        assert [row["share"] for row in president["standings"]] == [52.5, 47.5]
        assert president["leader"]["id"] == "p1"

    def test_exact_count_omitted_when_not_given(self):
        assert "ballots_submitted" not in tally.summarize(default_roster())

    def test_office_without_votes_has_no_leader(self):
        roster = [
            Candidate(id="a", name="A", office=Office.PRESIDENT, bio="", image_url="u", votes=0),
        ]
        president = tally.summarize(roster)["offices"][0]
        assert president["leader"] is None
        assert president["standings"][0]["share"] == 0.0
