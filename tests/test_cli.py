import json
from pathlib import Path

from matchday.cli import main


def _write_roster(path: Path, body: str) -> Path:
    path.write_text(body, encoding="utf-8")
    return path


def test_cli_writes_teams_and_summary(tmp_path: Path, capsys):
    roster = _write_roster(
        tmp_path / "roster.csv",
        "player_id,name,rating,is_goalkeeper\n"
        "g1,Guarda,5,1\n"
        "a,Ana,4,0\n"
        "b,Bruno,3,0\n"
        "c,Carla,2,0\n",
    )
    output = tmp_path / "teams.csv"
    result_json = tmp_path / "teams.json"

    code = main([str(roster), "--output", str(output), "--json", str(result_json)])

    assert code == 0
    lines = output.read_text(encoding="utf-8").strip().splitlines()
    assert lines[1:] == ["A,g1,Guarda,5,1", "A,c,Carla,2,0", "B,a,Ana,4,0", "B,b,Bruno,3,0"]
    payload = json.loads(result_json.read_text(encoding="utf-8"))
    assert payload["warnings"] == ["Só existe 1 guarda-redes."]
    out = capsys.readouterr().out
    assert "Difference: 0" in out
    assert "Warning: Só existe 1 guarda-redes." in out


def test_cli_rejects_unrated_players(tmp_path: Path, capsys):
    roster = _write_roster(tmp_path / "roster.csv", "player_id,name,rating\na,Ana,\nb,Bruno,4\n")

    code = main([str(roster), "--output", str(tmp_path / "teams.csv")])

    assert code == 1
    assert "players without rating: a" in capsys.readouterr().err
    assert not (tmp_path / "teams.csv").exists()


def test_cli_allow_unrated_and_column_profile(tmp_path: Path):
    roster = _write_roster(tmp_path / "roster.csv", "id,nome,nota\na,Ana,\nb,Bruno,4\n")
    profile = tmp_path / "profile.json"
    output = tmp_path / "teams.csv"

    code = main(
        [
            str(roster),
            "--column", "player_id=id",
            "--column", "name=nome",
            "--column", "rating=nota",
            "--save-profile", str(profile),
            "--output", str(output),
            "--allow-unrated",
        ]
    )

    assert code == 0
    assert json.loads(profile.read_text(encoding="utf-8"))["roster_mapping"]["rating"] == "nota"

    code = main([str(roster), "--load-profile", str(profile), "--output", str(output), "--allow-unrated"])
    assert code == 0
    assert output.read_text(encoding="utf-8").strip().splitlines()[1] == "A,b,Bruno,4,0"
