"""CLI interface for coachrank using Typer."""

from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.config.loader import load_config
from ..core.location.utils import (
    get_country_name_from_code,
    matches_country_filter,
    parse_legacy_location,
)
from ..core.models.coach import CoachRecord
from ..core.models.enums import RankingStrategy
from ..core.models.location import LocationData
from ..core.models.ranking import RankingFactors, RankingThresholds
from ..core.ranking.factors import make_factor_extractor
from ..core.ranking.scoring import (
    filter_by_location_with_expansion,
    get_match_level_description,
    rank_coaches,
)
from ..core.ranking.unified import classify_bucket, rank
from ..core.storage.coach_files import CoachFileError, dump_csv, dump_json, load_coaches
from ..observability.logger import get_logger, setup_logging

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="coachrank",
    help="Coach marketplace ranking - bucketed and weighted coach ordering",
    add_completion=False,
)


def _load_settings() -> tuple[dict[str, Any], RankingThresholds]:
    """Load config, apply its logging section and build ranking thresholds."""
    config = load_config()
    log_config = config.get("logging", {})
    setup_logging(
        log_level=log_config.get("level", "INFO"),
        log_format=log_config.get("format", "json"),
        log_file=log_config.get("file"),
    )
    try:
        thresholds = RankingThresholds.from_config(config)
    except ValidationError as e:
        console.print(f"[red]! Error:[/red] invalid ranking configuration: {escape(str(e))}")
        raise typer.Exit(code=1)
    return config, thresholds


def _result_rows(results: list[Any], strategy: RankingStrategy) -> list[dict[str, Any]]:
    rows = []
    for position, result in enumerate(results, start=1):
        if strategy == RankingStrategy.UNIFIED:
            coach: CoachRecord = result.candidate
            rows.append(
                {
                    "rank": position,
                    "id": coach.id,
                    "display_name": coach.display_name,
                    "bucket": int(result.bucket),
                    "avg_rating": result.factors.avg_rating,
                    "location_score": result.factors.location_score,
                    "is_boosted": result.factors.is_boosted,
                    "is_verified": result.factors.is_verified,
                    "match_level": result.factors.match_level,
                }
            )
        else:
            coach = result.coach
            rows.append(
                {
                    "rank": position,
                    "id": coach.id,
                    "display_name": coach.display_name,
                    "total_score": result.ranking.total_score,
                    "location_score": result.ranking.location_score,
                    "engagement_score": result.ranking.engagement_score,
                    "profile_score": result.ranking.profile_score,
                    "is_sponsored": result.ranking.is_sponsored,
                    "match_level": result.ranking.match_level,
                }
            )
    return rows


@app.command("rank")
def rank_command(
    coaches_file: Annotated[
        Path,
        typer.Option(
            "--coaches",
            "-c",
            help="JSON file with coach records",
            exists=True,
            file_okay=True,
            dir_okay=False,
        ),
    ],
    city: Annotated[str | None, typer.Option("--city", help="Viewer city")] = None,
    region: Annotated[str | None, typer.Option("--region", help="Viewer region")] = None,
    county: Annotated[str | None, typer.Option("--county", help="Viewer county")] = None,
    country: Annotated[str | None, typer.Option("--country", help="Viewer country")] = None,
    strategy: Annotated[
        RankingStrategy,
        typer.Option("--strategy", "-s", help="Ranking algorithm"),
    ] = RankingStrategy.UNIFIED,
    country_filter: Annotated[
        str | None,
        typer.Option("--country-filter", help="Only coaches in this ISO country code"),
    ] = None,
    expand: Annotated[
        bool,
        typer.Option("--expand/--no-expand", help="Widen the location match until enough coaches"),
    ] = False,
    min_results: Annotated[
        int | None,
        typer.Option("--min-results", help="Minimum coaches before widening the location match"),
    ] = None,
    top_n: Annotated[int, typer.Option("--top-n", "-n", help="Number of coaches to show")] = 10,
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Path to save ranked output JSON"),
    ] = None,
    export: Annotated[
        Path | None,
        typer.Option("--export", "-e", help="Export rankings to CSV"),
    ] = None,
    validate: Annotated[
        bool | None,
        typer.Option("--validate/--no-validate", help="Warn about duplicate or malformed ids"),
    ] = None,
):
    """Rank coaches for a viewer location."""
    if top_n <= 0:
        console.print("[red]! Error:[/red] --top-n must be greater than 0")
        raise typer.Exit(code=1)
    if min_results is not None and min_results <= 0:
        console.print("[red]! Error:[/red] --min-results must be greater than 0")
        raise typer.Exit(code=1)

    _, thresholds = _load_settings()

    try:
        coaches = load_coaches(coaches_file)
    except CoachFileError as e:
        console.print(f"[red]! Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    if country_filter:
        coaches = [c for c in coaches if matches_country_filter(c, country_filter)]

    user_location = LocationData(city=city, region=region, county=county, country=country)
    engagement_map = {c.id: c.engagement for c in coaches if c.engagement is not None}

    if strategy == RankingStrategy.UNIFIED:
        results = rank(
            coaches,
            make_factor_extractor(user_location, engagement_map),
            thresholds=thresholds,
            validate=thresholds.validate_invariants if validate is None else validate,
        )
    else:
        results = rank_coaches(
            coaches,
            user_location,
            engagement_map,
            weights=thresholds.weights,
        )

    effective_level = None
    expanded = False
    if expand:
        expansion = filter_by_location_with_expansion(
            results, min_results=min_results or thresholds.min_results_before_expansion
        )
        results = expansion.items
        effective_level = expansion.effective_match_level
        expanded = expansion.expanded

    logger.info(
        "coaches_ranked",
        strategy=strategy.value,
        coaches=len(results),
        effective_match_level=effective_level,
    )

    rows = _result_rows(results, strategy)
    shown = rows[:top_n]

    console.print(
        f"\n[bold blue]Ranked {len(rows)} coaches[/bold blue] [dim]({strategy.value})[/dim]"
    )
    if effective_level is not None:
        console.print(f"[dim]Showing:[/dim] {get_match_level_description(effective_level)}")

    if not rows:
        console.print("[yellow]No coaches to rank[/yellow]")
    else:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Rank", style="dim", width=6)
        table.add_column("Coach ID")
        table.add_column("Name")
        if strategy == RankingStrategy.UNIFIED:
            table.add_column("Bucket", justify="right")
            table.add_column("Rating", justify="right")
        else:
            table.add_column("Score", justify="right")
            table.add_column("Sponsored")
        table.add_column("Location", justify="right")
        table.add_column("Match")

        for row in shown:
            if strategy == RankingStrategy.UNIFIED:
                middle = [str(row["bucket"]), f"{row['avg_rating']:.1f}"]
            else:
                middle = [f"{row['total_score']:.2f}", "yes" if row["is_sponsored"] else ""]
            table.add_row(
                str(row["rank"]),
                escape(row["id"]),
                escape(row["display_name"] or ""),
                *middle,
                f"{row['location_score']:.0f}",
                get_match_level_description(row["match_level"]),
            )

        console.print(table)

    if output_file:
        try:
            dump_json(
                output_file,
                {
                    "strategy": strategy.value,
                    "effective_match_level": effective_level,
                    "expanded": expanded,
                    "total_coaches": len(rows),
                    "results": rows,
                },
            )
            console.print(f"\n[green]Output saved to:[/green] {output_file}")
        except (OSError, TypeError) as e:
            console.print(f"\n[red]! Error saving output:[/red] {escape(str(e))}")

    if export and rows:
        try:
            header = list(rows[0].keys())
            dump_csv(export, header, [[row[key] for key in header] for row in rows])
            console.print(f"\n[green]Rankings exported to:[/green] {export}")
        except (OSError, ValueError) as e:
            console.print(f"\n[red]! Error exporting rankings:[/red] {escape(str(e))}")


@app.command()
def classify(
    boosted: Annotated[bool, typer.Option("--boosted/--not-boosted", help="Active boost")] = False,
    verified: Annotated[
        bool, typer.Option("--verified/--not-verified", help="Passed verification")
    ] = False,
    rating: Annotated[float, typer.Option("--rating", "-r", help="Average rating")] = 0.0,
    location_score: Annotated[
        float, typer.Option("--location-score", "-l", help="Proximity score")
    ] = 0.0,
):
    """Show the unified ranking bucket for a set of factors."""
    _, thresholds = _load_settings()
    factors = RankingFactors(
        is_boosted=boosted,
        is_verified=verified,
        avg_rating=rating,
        location_score=location_score,
    )
    bucket = classify_bucket(factors, thresholds)
    console.print(f"Bucket {int(bucket)} [dim]({bucket.name.lower()})[/dim]")


@app.command("parse-location")
def parse_location(
    location: Annotated[str, typer.Argument(help="Free-text location, e.g. 'London, UK'")],
):
    """Parse a legacy free-text location into its components."""
    parsed = parse_legacy_location(location)

    table = Table(show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("City", parsed.city or "-")
    table.add_row("Region", parsed.region or "-")
    table.add_row("Country", parsed.country or "-")
    table.add_row("Country Code", parsed.country_code or "-")
    if parsed.country_code:
        table.add_row("Country Name", get_country_name_from_code(parsed.country_code) or "-")

    console.print(table)


if __name__ == "__main__":
    app()
