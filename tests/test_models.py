import pytest

from tournamentorganizer.exceptions import (
    InvalidPlayerDataException,
    InvalidResultException,
    MatchAlreadyCompleteException,
    UnknownPlayerException,
)
from tournamentorganizer.models.player import Player
from tournamentorganizer.models.tournament import Match, PairingHistory, RoundData
from tournamentorganizer.utils.validation import (
    OUTCOME_DRAW,
    OUTCOME_PLAYER_ONE,
    OUTCOME_PLAYER_TWO,
    validate_game_counts,
)

KNOWN = {"a", "b", "c"}


def _match(match_id="R1-1", p1="a", p2="b", **metadata):
    return Match.create(match_id, 1, p1, p2, KNOWN, **metadata)


def test_player_rejects_empty_id_and_bad_seed():
    with pytest.raises(InvalidPlayerDataException):
        Player(id="", name="Nobody")
    with pytest.raises(InvalidPlayerDataException):
        Player(id="a", name="Alice", seed="high")
    with pytest.raises(InvalidPlayerDataException):
        Player(id="a", name="Alice", seed=True)


def test_player_match_refs_have_no_duplicates():
    player = Player(id="a", name="Alice")
    player.add_match("R1-1")
    with pytest.raises(InvalidPlayerDataException):
        player.add_match("R1-1")
    assert player.match_ids == ["R1-1"]


def test_player_round_trip():
    player = Player(id="a", name="Alice", seed=1500, is_active=False, match_ids=["R1-1"])
    assert Player.from_dict(player.to_dict()) == player


def test_match_create_rejects_unknown_and_self_pairing():
    with pytest.raises(UnknownPlayerException) as excinfo:
        Match.create("R1-1", 1, "a", "zz", KNOWN, tournament_id="t1")
    assert excinfo.value.entity_id == "zz"
    assert excinfo.value.tournament_id == "t1"
    with pytest.raises(InvalidPlayerDataException):
        Match.create("R1-1", 1, "a", "a", KNOWN)


def test_bye_is_created_complete():
    bye = Match.create("R1-2", 1, "c", None, KNOWN)
    assert bye.is_bye
    assert bye.is_complete
    assert bye.winner == "c"
    assert bye.loser is None
    with pytest.raises(MatchAlreadyCompleteException):
        bye.record_result(1, 0, 0, 1)
    with pytest.raises(InvalidResultException):
        bye.clear_result()


def test_best_of_five_three_one_is_decisive():
    match = _match()
    match.record_result(3, 1, 0, 5)
    assert match.is_complete
    assert match.winner == "a"
    assert match.loser == "b"
    assert not match.is_draw
    assert match.games_for("b") == (1, 3, 0)


def test_undecided_result_is_rejected_and_match_stays_pending():
    match = _match()
    with pytest.raises(InvalidResultException):
        match.record_result(2, 1, 0, 5)
    assert not match.is_complete
    assert match.winner is None


def test_too_many_games_rejected():
    with pytest.raises(InvalidResultException):
        _match().record_result(2, 2, 0, 3)


def test_drawn_result_when_all_games_played():
    match = _match()
    match.record_result(1, 1, 1, 3)
    assert match.is_complete
    assert match.is_draw
    assert match.winner is None
    assert match.loser is None


def test_bracket_match_cannot_be_drawn():
    match = _match(bracket="winners", bracket_round=1, position=0)
    with pytest.raises(InvalidResultException):
        match.record_result(0, 0, 1, 1)
    assert not match.is_complete


def test_completed_match_rejects_second_result():
    match = _match()
    match.record_result(0, 1, 0, 1)
    with pytest.raises(MatchAlreadyCompleteException):
        match.record_result(1, 0, 0, 1)
    assert match.winner == "b"


def test_forfeit_and_clear():
    match = _match()
    match.forfeit("a", 3)
    assert match.winner == "b"
    assert (match.player_one_wins, match.player_two_wins) == (0, 2)
    match.clear_result()
    assert not match.is_complete
    assert match.winner is None


def test_opponent_of_unknown_player_raises():
    with pytest.raises(UnknownPlayerException):
        _match().opponent_of("c")


def test_match_errors_carry_tournament_id():
    match = _match()
    with pytest.raises(UnknownPlayerException) as excinfo:
        match.forfeit("c", 1, tournament_id="t9")
    assert (excinfo.value.tournament_id, excinfo.value.entity_id) == ("t9", "c")
    assert not match.is_complete

    match.forfeit("b", 1, tournament_id="t9")
    assert match.winner == "a"
    with pytest.raises(MatchAlreadyCompleteException) as excinfo:
        match.forfeit("a", 1, tournament_id="t9")
    assert excinfo.value.tournament_id == "t9"

    bye = Match.create("R1-2", 1, "c", None, KNOWN)
    with pytest.raises(InvalidResultException) as excinfo:
        bye.clear_result(tournament_id="t9")
    assert (excinfo.value.tournament_id, excinfo.value.entity_id) == ("t9", "R1-2")


def test_match_round_trip():
    match = _match(stage="playoffs", bracket="losers", bracket_round=2, position=1)
    match.record_result(1, 0, 0, 1)
    assert Match.from_dict(match.to_dict()) == match


@pytest.mark.parametrize(
    "counts,best_of,outcome",
    [
        ((1, 0, 0), 1, OUTCOME_PLAYER_ONE),
        ((0, 2, 0), 3, OUTCOME_PLAYER_TWO),
        ((2, 1, 0), 3, OUTCOME_PLAYER_ONE),
        ((0, 0, 1), 1, OUTCOME_DRAW),
        ((1, 1, 0), 2, OUTCOME_DRAW),
        ((2, 1, 2), 5, OUTCOME_PLAYER_ONE),
    ],
)
def test_game_count_outcomes(counts, best_of, outcome):
    result = validate_game_counts(*counts, best_of)
    assert result.is_valid
    assert result.sanitized_value == outcome


@pytest.mark.parametrize("counts", [(-1, 0, 0), (1.0, 0, 0), (True, 0, 0)])
def test_game_counts_must_be_non_negative_integers(counts):
    assert not validate_game_counts(*counts, 1)


def test_round_data_views():
    played = _match()
    bye = Match.create("R1-2", 1, "c", None, KNOWN)
    round_data = RoundData(round_number=1, matches=[played, bye])
    assert round_data.pairings == [("a", "b")]
    assert round_data.bye_player_ids == ["c"]
    assert round_data.pending_match_ids == ["R1-1"]
    assert not round_data.is_completed
    assert round_data.find_match("b") is played
    played.record_result(1, 0, 0, 1)
    assert round_data.is_completed


def test_pairing_history_from_matches():
    history = PairingHistory.from_matches(
        [_match(), Match.create("R1-2", 1, "c", None, KNOWN)]
    )
    assert history.have_played("b", "a")
    assert not history.have_played("a", "c")
    assert history.byes_for("c") == 1
    assert history.byes_for("a") == 0
