"""Command line entry point for the route terrain analyzer.

Usage:
    python main.py route.json                # Analyze a request file
    python main.py --json route.json         # Print the response as JSON
    python main.py --elevation route.json    # Only look up elevations
    python main.py                           # Interactive mode
"""

import asyncio
import json
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from terrain_analyzer.config import settings
from terrain_analyzer.errors import (
    ElevationAcquisitionError,
    RouteAnalysisError,
    RouteValidationError,
    UpstreamAuthError,
)
from terrain_analyzer.logging_config import configure
from terrain_analyzer.models import RouteAnalysisResponse
from terrain_analyzer.pipeline import RouteAnalysisPipeline, parse_request
from terrain_analyzer.tools.elevation import fetch_elevation_profile


console = Console()

ERROR_TITLES = {
    RouteValidationError: "Invalid Route",
    ElevationAcquisitionError: "Elevation Data Unavailable",
    UpstreamAuthError: "Configuration Error",
}


def load_payload(path: str) -> dict:
    """Read a JSON request file."""
    return json.loads(Path(path).read_text(encoding="utf-8"))


def render_response(result: RouteAnalysisResponse) -> None:
    """Print an analysis result as rich tables and panels."""
    stats = result.stats

    table = Table(title="Route Statistics", show_header=False)
    table.add_row("Terrain", result.terrain_type)
    table.add_row("Relief class", stats.terrain_class)
    table.add_row("Average slope", f"{stats.avg_slope:.1f}%")
    table.add_row("Maximum slope", f"{stats.max_slope:.1f}%")
    table.add_row("Steep sections", str(stats.steep_sections))
    table.add_row(
        "Sinuosity",
        f"{stats.sinuosity:.2f}" if stats.sinuosity is not None else "n/a (loop)",
    )
    table.add_row("Elevation", f"{stats.min_elevation:.0f} - {stats.max_elevation:.0f} m")
    console.print(table)

    console.print(Panel(result.formatted_geo_context, title="🌍 Geography", border_style="blue"))

    lines = [f"## 📅 Itinerary ({result.total_days} days)", ""]
    for day in result.daily_routes:
        lines.append(f"**Day {day.day}** ({day.date.isoformat()}): {day.description}")
        lines.append(f"  - Distance: ~{day.distance:.1f} km, climb: ~{day.elevation_gain} m")
        lines.append(f"  - Weather: {day.weather.description}")
        for advice in day.recommendations:
            lines.append(f"  - {advice}")
        lines.append("")
    console.print(Markdown("\n".join(lines)))

    summary = (result.analysis_structured or {}).get("summary") or {}
    if summary:
        console.print(Panel(
            f"[bold]Difficulty:[/bold] {summary.get('difficultyScore', '?')}/10\n\n"
            f"{summary.get('difficultyReasoning', '')}",
            title="🤖 Analysis",
            border_style="green",
        ))
    else:
        console.print(Panel(result.analysis, title="🤖 Analysis", border_style="green"))


async def analyze_file(path: str, as_json: bool = False) -> None:
    """Analyze one request file and print the result."""
    payload = load_payload(path)
    pipeline = RouteAnalysisPipeline(settings, show_progress=not as_json)
    result = await pipeline.analyze(payload)

    if as_json:
        print(result.model_dump_json(by_alias=True, indent=2))
    else:
        render_response(result)


async def elevation_file(path: str) -> None:
    """Look up elevations for the coordinates of a request file."""
    request = parse_request(load_payload(path))
    elevations = await fetch_elevation_profile(
        request.coordinates, batch_size=settings.elevation_batch_size
    )
    print(json.dumps({
        "results": [
            {"elevation": elevation, "location": {"lat": lat, "lng": lon}}
            for elevation, (lat, lon) in zip(elevations, request.coordinates)
        ],
        "status": "OK",
    }, indent=2))


def report_error(error: RouteAnalysisError) -> None:
    title = next(
        (name for kind, name in ERROR_TITLES.items() if isinstance(error, kind)),
        "Analysis Failed",
    )
    console.print(Panel(f"[red]{error}[/red]", title=title, border_style="red"))


async def interactive_mode() -> None:
    """Prompt for request files until the user quits."""
    missing = settings.validate_required()
    if missing:
        console.print(Panel(
            "[yellow]Missing configuration:[/yellow]\n" +
            "\n".join(f"  • {m}" for m in missing) +
            "\n\n[dim]The analysis step will fail until these are set in .env.[/dim]",
            title="Configuration",
            border_style="yellow",
        ))

    console.print(Panel(
        "Analyze a drawn route for terrain, geography and daily conditions.\n\n"
        "[bold]How to use:[/bold]\n"
        "  • Enter the path to a JSON request with coordinates and dates\n\n"
        "[dim]Type 'quit' to exit.[/dim]",
        title="⛰️ Route Terrain Analyzer",
        border_style="blue",
    ))

    while True:
        try:
            console.print()
            path = Prompt.ask("[bold green]Request file[/bold green]")

            if path.lower() in ["quit", "exit", "q"]:
                console.print("\n[dim]Goodbye! Safe travels![/dim]\n")
                break

            if not path.strip():
                continue

            await analyze_file(path.strip())

        except KeyboardInterrupt:
            console.print("\n\n[dim]Session interrupted. Goodbye![/dim]\n")
            break
        except RouteAnalysisError as e:
            report_error(e)
        except (OSError, json.JSONDecodeError) as e:
            console.print(f"\n[red]Could not read request: {e}[/red]")


def main():
    """Main entry point."""
    load_dotenv()
    configure(settings.log_level)

    args = sys.argv[1:]
    as_json = "--json" in args
    elevation_only = "--elevation" in args
    paths = [a for a in args if not a.startswith("--")]

    if not paths:
        asyncio.run(interactive_mode())
        return

    try:
        if elevation_only:
            asyncio.run(elevation_file(paths[0]))
        else:
            asyncio.run(analyze_file(paths[0], as_json=as_json))
    except RouteAnalysisError as e:
        report_error(e)
        sys.exit(1)
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]Could not read request: {e}[/red]")
        sys.exit(2)


if __name__ == "__main__":
    main()
