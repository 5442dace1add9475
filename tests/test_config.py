import pytest

from tournamentorganizer.constants import (
    TB_CUMULATIVE,
    TB_SOLKOFF,
    TB_SONNEBORN_BERGER,
    TB_VERSUS,
)
from tournamentorganizer.exceptions import InvalidConfigurationException
from tournamentorganizer.models.tournament import (
    CutRule,
    PlayoffConfig,
    ScoringConfig,
    TournamentConfig,
)


def _config(**overrides):
    data = {"id": "t1", "format": "swiss"}
    data.update(overrides)
    return TournamentConfig.from_dict(data)


def test_defaults_follow_format():
    swiss = _config()
    assert swiss.name == "New Tournament"
    assert swiss.sorting == "none"
    assert swiss.num_rounds == 0
    assert swiss.scoring.best_of == 1
    assert (swiss.scoring.win, swiss.scoring.draw, swiss.scoring.loss) == (1.0, 0.5, 0.0)
    assert swiss.scoring.bye == 1.0
    assert swiss.scoring.tiebreaks == (TB_SOLKOFF, TB_CUMULATIVE)
    assert not swiss.playoffs.enabled

    round_robin = _config(format="round_robin")
    assert round_robin.scoring.tiebreaks == (TB_SONNEBORN_BERGER, TB_VERSUS)

    bracket = TournamentConfig(id="t2")
    assert bracket.format == "single_elimination"
    assert bracket.is_elimination
    assert bracket.scoring.tiebreaks == ()


def test_id_is_required():
    with pytest.raises(InvalidConfigurationException):
        TournamentConfig.from_dict({"format": "swiss"})
    with pytest.raises(InvalidConfigurationException):
        TournamentConfig(id="")


@pytest.mark.parametrize(
    "overrides",
    [
        {"format": "ladder"},
        {"sorting": "random"},
        {"consolation": "yes"},
        {"rounds": -1},
        {"format": "round_robin", "rounds": 3},
        {"consolation": True},
        {"format": "double_elimination", "consolation": True},
        {"scoring": {"best_of": 0}},
        {"scoring": {"win": "three"}},
        {"scoring": {"tiebreaks": ["buchholz"]}},
        {"scoring": {"tiebreaks": [TB_SOLKOFF, TB_SOLKOFF]}},
        {"scoring": {"handicap": 1}},
        {"colour": "white"},
        {"playoffs": {"format": "swiss"}},
        {"playoffs": {"format": "single_elimination", "cut": {"type": "rank", "value": 0}}},
        {"playoffs": {"format": "single_elimination", "cut": {"type": "elo", "value": 4}}},
    ],
)
def test_invalid_configuration_rejected(overrides):
    with pytest.raises(InvalidConfigurationException):
        _config(**overrides)


def test_playoffs_not_allowed_after_elimination():
    with pytest.raises(InvalidConfigurationException):
        _config(format="single_elimination", playoffs={"format": "double_elimination"})


def test_rounds_accept_mapping():
    assert _config(rounds={"total": 5}).num_rounds == 5


def test_consolation_allowed_for_single_elimination_playoffs():
    config = _config(consolation=True, playoffs={"format": "single_elimination"})
    assert config.consolation is True


def test_patch_applies_zero_and_false_values():
    config = _config(
        format="single_elimination", consolation=True, scoring={"win": 3, "draw": 1}
    )
    patched = config.patch({"scoring": {"win": 0, "draw": 0}, "consolation": False})

    assert patched.scoring.win == 0.0
    assert patched.scoring.draw == 0.0
    assert patched.consolation is False
    # untouched keys keep their value
    assert patched.scoring.loss == config.scoring.loss
    assert patched.scoring.tiebreaks == config.scoring.tiebreaks
    # the original is immutable
    assert config.scoring.win == 3.0
    assert config.consolation is True


def test_format_change_swaps_default_tiebreaks():
    round_robin = _config().patch({"format": "round_robin"})
    assert round_robin.scoring.tiebreaks == (TB_SONNEBORN_BERGER, TB_VERSUS)

    chosen = _config(scoring={"tiebreaks": [TB_CUMULATIVE]})
    assert chosen.patch({"format": "round_robin"}).scoring.tiebreaks == (
        TB_CUMULATIVE,
    )

    both = _config().patch(
        {"format": "round_robin", "scoring": {"tiebreaks": [TB_SOLKOFF]}}
    )
    assert both.scoring.tiebreaks == (TB_SOLKOFF,)


def test_patch_rejects_unknown_keys_and_id_change():
    config = _config()
    with pytest.raises(InvalidConfigurationException):
        config.patch({"colour": "white"})
    with pytest.raises(InvalidConfigurationException):
        config.patch({"id": "other"})
    assert config.patch({"id": "t1", "name": "Open"}).name == "Open"


def test_patch_revalidates():
    with pytest.raises(InvalidConfigurationException):
        _config().patch({"scoring": {"best_of": -3}})
    with pytest.raises(InvalidConfigurationException):
        _config(playoffs={"format": "single_elimination"}).patch(
            {"format": "double_elimination"}
        )


def test_cut_rule_parsing():
    assert CutRule.from_value(None) is None
    assert CutRule.from_value("none") is None
    assert CutRule.from_value({"type": "points", "value": 4.5}) == CutRule("points", 4.5)
    with pytest.raises(InvalidConfigurationException):
        CutRule.from_value(8)
    with pytest.raises(InvalidConfigurationException):
        CutRule(type="rank", value=2.5)


def test_playoff_config_round_trip():
    playoffs = PlayoffConfig.from_dict(
        {"format": "single_elimination", "cut": {"type": "rank", "value": 8}}
    )
    assert playoffs.enabled
    assert playoffs.to_dict() == {
        "format": "single_elimination",
        "cut": {"type": "rank", "value": 8},
    }
    assert PlayoffConfig().to_dict() == {"format": "none", "cut": "none"}


def test_config_round_trip():
    config = _config(
        name="Club Open",
        sorting="descending",
        rounds=4,
        scoring={"best_of": 3, "win": 3, "draw": 1, "tiebreaks": [TB_SOLKOFF]},
        playoffs={"format": "single_elimination", "cut": {"type": "rank", "value": 4}},
    )
    assert TournamentConfig.from_dict(config.to_dict()) == config


def test_scoring_negative_points_allowed():
    scoring = ScoringConfig(loss=-1)
    assert scoring.loss == -1.0
