import json

import pytest

from pyauction.ingest import (
    CatalogFormatError,
    filter_players,
    load_catalog,
    load_default_catalog,
    load_players_csv,
    load_players_json,
    summarize_catalog,
)


def _write_teams(path):
    path.write_text(
        json.dumps(
            [
                {"id": "t1", "name": "Team One", "shortName": "ONE", "budget": 1000, "primaryColor": "#112233"},
                {"id": "t2", "name": "Team Two", "short_name": "TWO", "budget": "800"},
            ]
        ),
        encoding="utf-8",
    )


def test_default_catalog_loads_sample_data():
    catalog = load_default_catalog()

    assert len(catalog.teams) == 4
    assert len(catalog) == 32
    first_team = catalog.teams[0]
    assert first_team.short_name == "HCM"
    assert first_team.primary_color.startswith("#")
    player = catalog.player("p-002")
    assert player.is_overseas
    assert player.stats.bowling_average is None


def test_catalog_dir_env_override(tmp_path, monkeypatch):
    _write_teams(tmp_path / "teams.json")
    (tmp_path / "players.json").write_text(
        json.dumps(
            [
                {
                    "id": "x1",
                    "name": "Solo",
                    "role": "Bowler",
                    "nationality": "Overseas",
                    "basePrice": 40,
                    "stats": {"matches": 12, "economyRate": 7.2},
                }
            ]
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("PYAUCTION_CATALOG_DIR", str(tmp_path))

    catalog = load_default_catalog()

    assert [team.id for team in catalog.teams] == ["t1", "t2"]
    assert catalog.team("t2").budget == 800
    assert catalog.team("t2").short_name == "TWO"
    assert catalog.player("x1").stats.economy_rate == pytest.approx(7.2)


def test_load_players_csv_normalizes_aliases_and_blanks(tmp_path):
    path = tmp_path / "players.csv"
    path.write_text(
        "id,name,role,nationality,base_price,matches,batting_average,bowling_average,strike_rate,economy_rate\n"
        "c1,Csv Bat,Batsman,Indian,$150,101,41.2,-,140.5,\n"
        "c2,Csv Keeper,WK,Foreign,75,40,28.0,,122.0,NA\n",
        encoding="utf-8",
    )

    players = load_players_csv(path)

    assert [p.role for p in players] == ["batter", "wicket-keeper"]
    assert [p.nationality for p in players] == ["domestic", "overseas"]
    assert players[0].base_price == 150
    assert players[0].stats.bowling_average is None
    assert players[1].stats.economy_rate is None


def test_load_players_csv_with_custom_mapping(tmp_path):
    path = tmp_path / "custom.csv"
    path.write_text(
        "Player ID,Player,Type,Origin,Base Price\n"
        "z1,Mapped,All-Rounder,Domestic,60\n",
        encoding="utf-8",
    )
    mapping = {
        "player_id": "Player ID",
        "name": "Player",
        "role": "Type",
        "nationality": "Origin",
        "base_price": "Base Price",
    }

    players = load_players_csv(path, mapping=mapping)

    assert players[0].role == "all-rounder"
    assert players[0].stats.matches == 0


def test_unknown_role_is_rejected(tmp_path):
    path = tmp_path / "players.json"
    path.write_text(
        json.dumps([{"id": "x", "name": "X", "role": "captain", "nationality": "domestic", "basePrice": 20}]),
        encoding="utf-8",
    )
    with pytest.raises(CatalogFormatError):
        load_players_json(path)


def test_duplicate_player_ids_are_rejected(tmp_path):
    _write_teams(tmp_path / "teams.json")
    entry = {"id": "dup", "name": "Twin", "role": "batter", "nationality": "domestic", "basePrice": 20}
    (tmp_path / "players.json").write_text(json.dumps([entry, entry]), encoding="utf-8")

    with pytest.raises(CatalogFormatError):
        load_catalog(tmp_path / "teams.json", tmp_path / "players.json")


def test_summarize_and_filter_players():
    catalog = load_default_catalog()

    remaining = filter_players(catalog.players, exclude_ids=["p-001", "p-002"])
    summary = summarize_catalog(remaining)

    assert len(remaining) == 30
    assert sum(summary[role] for role in ("batter", "bowler", "all-rounder", "wicket-keeper")) == 30
    assert summary["overseas"] == sum(1 for p in remaining if p.is_overseas)


@pytest.mark.parametrize("price", ["2.5", "-20", "abc", ""])
def test_csv_rejects_fractional_negative_or_missing_price(tmp_path, price):
    path = tmp_path / "players.csv"
    path.write_text(
        "id,name,role,nationality,base_price\n"
        f"c1,Csv Bat,batter,domestic,{price}\n",
        encoding="utf-8",
    )
    with pytest.raises(CatalogFormatError):
        load_players_csv(path)


def test_csv_price_keeps_thousands_and_accepts_whole_decimal_matches(tmp_path):
    path = tmp_path / "players.csv"
    path.write_text(
        "id,name,role,nationality,base_price,matches\n"
        'c1,Csv Bat,batter,domestic,"1,200",12.0\n',
        encoding="utf-8",
    )

    players = load_players_csv(path)

    assert players[0].base_price == 1200
    assert players[0].stats.matches == 12


def test_csv_fractional_matches_raise_catalog_error(tmp_path):
    path = tmp_path / "players.csv"
    path.write_text(
        "id,name,role,nationality,base_price,matches\n"
        "c1,Csv Bat,batter,domestic,50,12.5\n",
        encoding="utf-8",
    )
    with pytest.raises(CatalogFormatError):
        load_players_csv(path)


def test_json_float_price_is_not_truncated(tmp_path):
    path = tmp_path / "players.json"
    path.write_text(
        json.dumps([{"id": "x", "name": "X", "role": "batter", "nationality": "domestic", "basePrice": 2.5}]),
        encoding="utf-8",
    )
    with pytest.raises(CatalogFormatError):
        load_players_json(path)
