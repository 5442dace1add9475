import json

import pytest

from tournamentorganizer import (
    DuplicatePlayerException,
    IncompleteRoundException,
    InsufficientPlayersException,
    InvalidConfigurationException,
    InvalidResultException,
    NoPlayoffEligibleException,
    RoundLimitExceededException,
    Tournament,
    TournamentState,
    TournamentStateException,
    UnknownMatchException,
    UnknownPlayerException,
)


def _tournament(count=4, **config):
    data = {"id": "t1", "format": "swiss"}
    data.update(config)
    tournament = Tournament(data)
    for number in range(1, count + 1):
        tournament.register_player(f"p{number}", f"Player {number}")
    return tournament


def _play_round(tournament):
    for match in tournament.current_round_data.matches:
        if not match.is_complete:
            tournament.submit_result(match.id, 1, 0)


def _play_stage(tournament):
    while True:
        _play_round(tournament)
        try:
            tournament.advance_round()
        except RoundLimitExceededException:
            return


def _with_playoffs(count=8, cut=None, rounds=3):
    playoffs = {"format": "single_elimination"}
    if cut is not None:
        playoffs["cut"] = cut
    return _tournament(count, rounds=rounds, playoffs=playoffs)


# ========== Setup ==========


def test_registration_rules():
    tournament = _tournament(2)
    with pytest.raises(DuplicatePlayerException):
        tournament.register_player("p1", "Again")

    tournament.remove_player("p2")
    assert [p.id for p in tournament.get_players()] == ["p1"]
    with pytest.raises(UnknownPlayerException):
        tournament.remove_player("p2")

    with pytest.raises(InsufficientPlayersException):
        tournament.start()
    assert tournament.state == TournamentState.SETUP


def test_removed_player_is_detached():
    tournament = _tournament(3)
    removed = tournament.remove_player("p2")
    assert (removed.id, removed.name) == ("p2", "Player 2")

    removed.name = "Changed"
    tournament.register_player("p2", "Player 2 again")
    assert tournament.get_player("p2").name == "Player 2 again"
    assert [p.id for p in tournament.get_players()] == ["p1", "p3", "p2"]


def test_players_dropped_in_setup_do_not_count():
    tournament = _tournament(3)
    tournament.drop_player("p2")
    tournament.drop_player("p3")
    with pytest.raises(InsufficientPlayersException):
        tournament.start()


def test_registration_closes_on_start():
    tournament = _tournament(4)
    tournament.start()
    assert tournament.state == TournamentState.ACTIVE
    assert tournament.is_active
    with pytest.raises(TournamentStateException):
        tournament.register_player("p5", "Late")
    with pytest.raises(TournamentStateException):
        tournament.remove_player("p1")
    with pytest.raises(TournamentStateException):
        tournament.start()


def test_accessors_return_copies():
    tournament = _tournament(4)
    tournament.get_player("p1").is_active = False
    assert tournament.get_player("p1").is_active

    tournament.start()
    tournament.current_round_data.matches[0].player_one_wins = 5
    assert tournament.get_match("R1-1").player_one_wins == 0


def test_update_config_after_start_only_renames():
    tournament = _tournament(4)
    tournament.update_config({"scoring": {"win": 3}})
    assert tournament.options.scoring.win == 3.0

    tournament.start()
    tournament.update_config({"name": "Renamed"})
    assert tournament.name == "Renamed"
    with pytest.raises(TournamentStateException):
        tournament.update_config({"format": "round_robin"})
    assert tournament.format == "swiss"


# ========== Rounds and results ==========


def test_advance_requires_complete_round():
    tournament = _tournament(4)
    tournament.start()

    with pytest.raises(IncompleteRoundException):
        tournament.advance_round()
    assert tournament.current_round == 1

    _play_round(tournament)
    assert tournament.advance_round().round_number == 2


@pytest.mark.parametrize(
    "tournament_format",
    ["swiss", "round_robin", "single_elimination", "double_elimination"],
)
def test_stage_limit_error_names_the_tournament(tournament_format):
    tournament = _tournament(5, id="limit", format=tournament_format)
    tournament.start()

    with pytest.raises(RoundLimitExceededException) as excinfo:
        while True:
            _play_round(tournament)
            tournament.advance_round()
    assert excinfo.value.tournament_id == "limit"
    assert tournament.is_stage_complete()


def test_round_results_are_all_or_nothing():
    tournament = _tournament(4)
    tournament.start()

    with pytest.raises(InvalidResultException):
        tournament.submit_round_results([("R1-1", 1, 0, 0), ("R1-2", 1, 1, 0)])
    with pytest.raises(UnknownMatchException):
        tournament.submit_round_results([("R1-1", 1, 0, 0), ("R9-9", 1, 0, 0)])
    assert tournament.current_round_data.pending_match_ids == ["R1-1", "R1-2"]

    recorded = tournament.submit_round_results([("R1-1", 1, 0, 0), ("R1-2", 0, 1, 0)])
    assert [m.winner for m in recorded] == ["p1", "p4"]
    assert tournament.current_round_data.is_completed


def test_clear_result_only_in_current_round():
    tournament = _tournament(4)
    tournament.start()
    tournament.submit_result("R1-1", 1, 0)
    assert tournament.clear_result("R1-1").winner is None
    with pytest.raises(TournamentStateException):
        tournament.clear_result("R1-1")

    _play_round(tournament)
    tournament.advance_round()
    with pytest.raises(TournamentStateException):
        tournament.clear_result("R1-1")


def test_unknown_round_and_match():
    tournament = _tournament(4)
    assert tournament.current_round_data is None
    tournament.start()
    with pytest.raises(TournamentStateException):
        tournament.get_round(2)
    with pytest.raises(TournamentStateException):
        tournament.get_round(0)
    with pytest.raises(UnknownMatchException):
        tournament.submit_result("R7-1", 1, 0)


def test_drop_forfeits_pending_match_once():
    tournament = _tournament(4)
    tournament.start()

    dropped = tournament.drop_player("p3")
    assert not dropped.is_active
    assert tournament.get_match("R1-1").winner == "p1"
    # dropping again changes nothing
    assert not tournament.drop_player("p3").is_active
    assert [p.id for p in tournament.get_players(active_only=True)] == ["p1", "p2", "p4"]


# ========== Finishing ==========


def test_finish_requires_stage_complete():
    tournament = _tournament(4)
    tournament.start()
    _play_round(tournament)
    with pytest.raises(TournamentStateException):
        tournament.finish()

    tournament.advance_round()
    _play_round(tournament)
    tournament.finish()
    assert tournament.state == TournamentState.FINISHED
    assert not tournament.is_active
    assert not tournament.is_stage_complete()


def test_abort_is_terminal():
    tournament = _tournament(4)
    tournament.start()
    tournament.abort()
    assert tournament.state == TournamentState.ABORTED

    with pytest.raises(TournamentStateException):
        tournament.abort()
    with pytest.raises(TournamentStateException):
        tournament.submit_result("R1-1", 1, 0)
    with pytest.raises(TournamentStateException):
        tournament.drop_player("p1")
    with pytest.raises(TournamentStateException):
        tournament.finish()


# ========== Playoffs ==========


def test_rank_cut_starts_elimination_playoffs():
    tournament = _with_playoffs(cut={"type": "rank", "value": 4})
    tournament.start()
    _play_stage(tournament)

    with pytest.raises(TournamentStateException):
        tournament.finish()

    entrants = tournament.playoff_entrants()
    assert entrants == [s.player_id for s in tournament.get_standings()][:4]

    first_playoff_round = tournament.cut_to_playoffs()
    assert tournament.state == TournamentState.PLAYOFFS
    assert tournament.stage == "playoffs"
    assert first_playoff_round.round_number == 4
    assert first_playoff_round.pairings == [
        (entrants[0], entrants[3]),
        (entrants[1], entrants[2]),
    ]
    assert tournament.total_rounds == 5
    assert all(m.stage == "playoffs" for m in first_playoff_round.matches)

    _play_stage(tournament)
    tournament.finish()
    assert tournament.state == TournamentState.FINISHED
    assert len(tournament.get_matches(stage="playoffs")) == 3
    assert len(tournament.get_matches(stage="main")) == 12


def test_cut_requires_finished_main_stage():
    tournament = _with_playoffs(cut={"type": "rank", "value": 4})
    tournament.start()
    _play_round(tournament)
    with pytest.raises(TournamentStateException):
        tournament.cut_to_playoffs()


def test_cut_without_playoffs_configured():
    tournament = _tournament(4)
    tournament.start()
    _play_stage(tournament)
    with pytest.raises(TournamentStateException):
        tournament.cut_to_playoffs()


def test_points_cut_with_nobody_eligible():
    tournament = _with_playoffs(cut={"type": "points", "value": 100})
    tournament.start()
    _play_stage(tournament)

    with pytest.raises(NoPlayoffEligibleException):
        tournament.cut_to_playoffs()
    assert tournament.state == TournamentState.ACTIVE
    assert tournament.stage == "main"


def test_points_cut_with_single_survivor():
    tournament = _with_playoffs(count=4, cut={"type": "points", "value": 2}, rounds=2)
    tournament.start()
    _play_stage(tournament)

    assert tournament.playoff_entrants() == ["p1"]
    with pytest.raises(InsufficientPlayersException):
        tournament.cut_to_playoffs()
    assert tournament.current_round == 2


def test_playoffs_without_cut_take_everyone():
    tournament = _with_playoffs(count=4, rounds=2)
    tournament.start()
    _play_stage(tournament)

    tournament.cut_to_playoffs()
    assert len(tournament.current_round_data.matches) == 2


# ========== Serialization ==========


def test_restored_tournament_continues_identically():
    tournament = _tournament(6, rounds=3)
    tournament.start()
    _play_round(tournament)

    restored = Tournament.from_dict(json.loads(json.dumps(tournament.to_dict())))
    assert restored.to_dict() == tournament.to_dict()

    assert restored.advance_round().pairings == tournament.advance_round().pairings
    assert restored.get_player("p1").match_ids == ["R1-1", "R2-1"]


def test_restored_playoff_bracket_continues():
    tournament = _with_playoffs(cut={"type": "rank", "value": 4})
    tournament.start()
    _play_stage(tournament)
    tournament.cut_to_playoffs()
    _play_round(tournament)

    restored = Tournament.from_dict(tournament.to_dict())
    assert restored.state == TournamentState.PLAYOFFS
    assert restored.advance_round().pairings == tournament.advance_round().pairings


def test_malformed_data_rejected():
    with pytest.raises(InvalidConfigurationException):
        Tournament.from_dict({})
    with pytest.raises(InvalidConfigurationException):
        Tournament.from_dict({"config": {"id": "t1"}, "state": "paused"})
