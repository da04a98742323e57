"""End-to-end CLI runs against JSON coach files."""

import json

from typer.testing import CliRunner

from coachrank.cli.main import app

runner = CliRunner()

COACHES = [
    {
        "id": "coach-boost-unverified",
        "display_name": "Bea",
        "is_sponsored": True,
        "location_city": "Bristol",
        "engagement": {"review_count": 8, "avg_rating": 4.9},
    },
    {
        "id": "coach-verified-local",
        "display_name": "alex",
        "is_verified": True,
        "location": "Bristol, United Kingdom",
        "engagement": {"review_count": 20, "avg_rating": 4.6},
    },
    {
        "id": "coach-verified-remote",
        "display_name": "Cara",
        "is_verified": True,
        "location_city": "Berlin",
        "location_country_code": "DE",
        "online_available": True,
        "engagement": {"review_count": 2, "avg_rating": 4.2},
    },
]


def _write_coaches(tmp_path, payload):
    path = tmp_path / "coaches.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_rank_unified_writes_json_and_csv(tmp_path):
    coaches_file = _write_coaches(tmp_path, {"coaches": COACHES})
    output = tmp_path / "out" / "ranked.json"
    export = tmp_path / "out" / "ranked.csv"

    result = runner.invoke(
        app,
        [
            "rank",
            "--coaches", str(coaches_file),
            "--city", "Bristol",
            "--country", "United Kingdom",
            "--output", str(output),
            "--export", str(export),
        ],
    )

    assert result.exit_code == 0, result.output
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["strategy"] == "unified"
    assert [row["id"] for row in data["results"]] == [
        "coach-verified-local",
        "coach-verified-remote",
        "coach-boost-unverified",
    ]
    assert [row["bucket"] for row in data["results"]] == [4, 5, 7]
    assert export.read_text(encoding="utf-8").startswith("rank,id,display_name,bucket")


def test_rank_weighted_with_country_filter_and_expansion(tmp_path):
    coaches_file = _write_coaches(tmp_path, COACHES)
    output = tmp_path / "ranked.json"

    result = runner.invoke(
        app,
        [
            "rank",
            "--coaches", str(coaches_file),
            "--strategy", "weighted",
            "--city", "Bristol",
            "--country-filter", "GB",
            "--expand",
            "--min-results", "1",
            "--output", str(output),
        ],
    )

    assert result.exit_code == 0, result.output
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["effective_match_level"] == "exact_city"
    assert data["expanded"] is False
    # sponsored first even though the verified coach scores higher
    assert [row["id"] for row in data["results"]] == [
        "coach-boost-unverified",
        "coach-verified-local",
    ]


def test_rank_rejects_bad_input(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")

    result = runner.invoke(app, ["rank", "--coaches", str(bad)])
    assert result.exit_code == 1
    assert "Error" in result.output

    result = runner.invoke(app, ["rank", "--coaches", str(bad), "--top-n", "0"])
    assert result.exit_code == 1


def test_rank_empty_file(tmp_path):
    coaches_file = _write_coaches(tmp_path, [])

    result = runner.invoke(app, ["rank", "--coaches", str(coaches_file)])

    assert result.exit_code == 0
    assert "No coaches to rank" in result.output


def test_classify_command():
    result = runner.invoke(
        app, ["classify", "--boosted", "--rating", "3.9", "--location-score", "60"]
    )
    assert result.exit_code == 0
    assert "Bucket 8" in result.output

    result = runner.invoke(
        app, ["classify", "--verified", "--rating", "4.9", "--location-score", "90"]
    )
    assert "Bucket 4" in result.output


def test_parse_location_command():
    result = runner.invoke(app, ["parse-location", "London, United Kingdom"])

    assert result.exit_code == 0
    assert "London" in result.output
    assert "GB" in result.output
