import textwrap

from moderator.main import main, parse_timestamp


ROSTER = """
    game:
      id: cli
      phase: day
      round: 2
      log_dir: {log_dir}
    players:
      - id: 1
        name: Alice
        role: Citizen
      - id: 2
        name: Eve
        role: Cleaner
      - id: 3
        name: Carol
        role: Infected
        alive: false
"""


def _write_roster(tmp_path, text: str = ROSTER):
    path = tmp_path / "roster.yaml"
    text = text.replace("{log_dir}", str(tmp_path / "logs"))
    path.write_text(textwrap.dedent(text))
    return str(path)


def test_cli_reports_evil_win(tmp_path, capsys):
    roster = _write_roster(tmp_path)

    assert main([roster, "--no-log"]) == 0

    out = capsys.readouterr().out
    assert "THE MAFIA WINS!" in out
    assert "Eve" in out
    assert not (tmp_path / "logs").exists()


def test_cli_writes_game_log(tmp_path, capsys):
    roster = _write_roster(tmp_path)

    assert main([roster]) == 0

    log = tmp_path / "logs" / "cli" / "game_state.md"
    assert log.exists()
    assert "## Winner: EVIL TEAM" in log.read_text()


def test_cli_game_continues(tmp_path, capsys):
    roster = _write_roster(tmp_path, """
        players:
          - {id: 1, name: Alice, role: Citizen}
          - {id: 2, name: Bob, role: Doctor}
          - {id: 3, name: Eve, role: Cleaner}
    """)

    assert main([roster, "--no-log"]) == 0

    assert "The game continues." in capsys.readouterr().out


def test_cli_evaluates_effects_at_given_time(tmp_path, capsys):
    roster = _write_roster(tmp_path, """
        players:
          - {id: 1, name: Carol, role: Infected}
          - id: 2
            name: Alice
            role: Citizen
            effects: [{type: infected, expiresAt: "2030-01-01T00:00:00Z"}]
    """)

    assert main([roster, "--no-log", "--at", "2029-12-31T00:00:00Z"]) == 0
    assert "CUSTOM VICTORY!" in capsys.readouterr().out

    assert main([roster, "--no-log", "--at", "2030-02-01T00:00:00Z"]) == 0
    assert "THE TOWN WINS!" in capsys.readouterr().out


def test_cli_missing_roster(tmp_path, capsys):
    assert main([str(tmp_path / "missing.yaml")]) == 1

    assert "Config file not found" in capsys.readouterr().out


def test_cli_unknown_role(tmp_path, capsys):
    roster = _write_roster(tmp_path, """
        players:
          - {id: 1, role: Vampire}
    """)

    assert main([roster]) == 1
    assert "Unknown role" in capsys.readouterr().out


def test_parse_timestamp():
    assert parse_timestamp(None) is None
    assert parse_timestamp("2030-01-01T00:00:00Z").year == 2030


def test_cli_reports_invalid_yaml(tmp_path, capsys):
    roster = _write_roster(tmp_path, "players: [unclosed\n")

    assert main([roster, "--no-log"]) == 1
    assert "Error: Invalid YAML" in capsys.readouterr().out
