import json

import pytest

from tournamentorganizer.testing.__main__ import (
    COMMANDS,
    build_rtg_config,
    create_completer,
    create_main_parser,
    print_command_help,
    run_standard_mode,
)
from tournamentorganizer.testing.rtg import (
    RandomTournamentGenerator,
    ResultPattern,
    RTGConfig,
    SeedDistribution,
    create_normal_tournament,
)


def _generate(**options):
    options.setdefault("seed", 42)
    return RandomTournamentGenerator(RTGConfig(**options)).generate_complete_tournament()


@pytest.mark.parametrize(
    "tournament_format,players,rounds",
    [
        ("swiss", 10, 4),
        ("round_robin", 7, 7),
        ("double_round_robin", 4, 6),
        ("single_elimination", 12, 4),
    ],
)
def test_generated_tournaments_are_valid(tournament_format, players, rounds):
    data = _generate(num_players=players, tournament_format=tournament_format)

    assert data["tournament"]["state"] == "finished"
    assert data["rounds"] == rounds
    assert data["validation"]["violations"] == []
    assert data["validation"]["compliance_percentage"] == 100.0


@pytest.mark.parametrize("seed", [1, 7, 19])
def test_generated_double_elimination_is_valid(seed):
    data = _generate(
        num_players=9, tournament_format="double_elimination", best_of=3, seed=seed
    )
    matches = data["tournament"]["matches"]

    assert data["validation"]["violations"] == []
    assert len(matches) in (16, 17)
    assert all(not m["is_draw"] for m in matches)


def test_swiss_with_playoffs():
    data = _generate(
        num_players=16, playoffs="single_elimination", playoff_cut=8, consolation=True
    )
    matches = data["tournament"]["matches"]
    playoff_matches = [m for m in matches if m["stage"] == "playoffs"]

    assert data["rounds"] == 4 + 3
    assert len(playoff_matches) == 7 + 1
    assert len({m["player_one"] for m in playoff_matches if m["round_number"] == 5}) == 4
    assert data["validation"]["violations"] == []


@pytest.mark.parametrize("tournament_format", ["swiss", "round_robin"])
def test_drops_keep_tournament_valid(tournament_format):
    data = _generate(
        num_players=12, tournament_format=tournament_format, drop_rate=1.0, seed=5
    )
    players = data["tournament"]["players"]

    assert any(not p["is_active"] for p in players)
    assert sum(p["is_active"] for p in players) >= 4
    assert len(data["standings"]) == sum(p["is_active"] for p in players)
    assert data["validation"]["violations"] == []


def test_same_seed_same_tournament():
    first = _generate(num_players=8, result_pattern=ResultPattern.RANDOM, seed=3)
    second = _generate(num_players=8, result_pattern=ResultPattern.RANDOM, seed=3)
    assert first["tournament"] == second["tournament"]


def test_unseeded_players_keep_registration_order():
    generator = RandomTournamentGenerator(
        RTGConfig(num_players=6, seed_distribution=SeedDistribution.NONE, seed=1)
    )
    tournament = generator.build_tournament()

    assert tournament.options.sorting == "none"
    assert [p.seed for p in tournament.get_players()] == [None] * 6
    assert [p.id for p in tournament.seeded_players()] == [
        f"p{n:03d}" for n in range(1, 7)
    ]


@pytest.mark.parametrize("best_of", [1, 2, 3, 5])
def test_simulated_results_are_legal(best_of):
    generator = create_normal_tournament("swiss", num_players=6, seed=best_of)
    generator.config.best_of = best_of
    simulator = generator.result_simulator

    for _ in range(50):
        p1, p2, draws = simulator.simulate_match(1500, 1700, allow_draw=False)
        assert p1 + p2 + draws <= best_of
        assert max(p1, p2) == best_of // 2 + 1


def test_text_export_lists_rounds_and_standings():
    generator = RandomTournamentGenerator(
        RTGConfig(num_players=5, tournament_format="round_robin", seed=8)
    )
    text = generator.export_text_format(generator.generate_complete_tournament())

    assert "Round 5" in text
    assert "bye" in text
    assert "Standings" in text


# ========== CLI ==========


def test_generate_arguments_build_config():
    args = create_main_parser().parse_args(
        [
            "generate",
            "--format",
            "round_robin",
            "--players",
            "6",
            "--best-of",
            "3",
            "--distribution",
            "uniform",
            "--pattern",
            "balanced",
            "--drop-rate",
            "0.1",
            "--no-validate",
        ]
    )
    config = build_rtg_config(args)

    assert config.tournament_format == "round_robin"
    assert config.num_players == 6
    assert config.best_of == 3
    assert config.seed_distribution == SeedDistribution.UNIFORM
    assert config.result_pattern == ResultPattern.BALANCED
    assert config.drop_rate == 0.1
    assert config.seed is None
    assert not config.validate


def test_generate_then_validate(tmp_path):
    tournament_file = tmp_path / "tournament.json"
    report_file = tmp_path / "report.json"

    assert (
        run_standard_mode(
            ["generate", "--players", "8", "--seed", "4", "--output", str(tournament_file)]
        )
        == 0
    )
    assert "standings" in json.loads(tournament_file.read_text(encoding="utf-8"))

    assert (
        run_standard_mode(
            ["validate", "--file", str(tournament_file), "--export", str(report_file)]
        )
        == 0
    )
    report = json.loads(report_file.read_text(encoding="utf-8"))
    assert report["violations"] == []
    assert report["compliance_percentage"] == 100.0


def test_validate_reports_broken_file(tmp_path):
    data = RandomTournamentGenerator(
        RTGConfig(num_players=4, seed=2)
    ).generate_complete_tournament()["tournament"]
    data["matches"][0]["winner"] = "nobody"
    tournament_file = tmp_path / "broken.json"
    tournament_file.write_text(json.dumps(data), encoding="utf-8")

    assert run_standard_mode(["validate", "--file", str(tournament_file)]) == 1
    assert run_standard_mode(["validate", "--file", str(tmp_path / "missing.json")]) == 1


def test_completer_offers_slash_and_plain_commands():
    options = create_completer().options
    for command in COMMANDS:
        assert command in options
        assert f"/{command}" in options


def test_command_help_lists_options(capsys):
    print_command_help("generate")
    output = capsys.readouterr().out
    assert "--drop-rate" in output
    assert "--consolation" in output
