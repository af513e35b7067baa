import logging

import typer

from tablescout.config import ConfigManager, FailurePolicy
from tablescout.scraper.runner import ScrapeRunner

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Suppress per-request transport logs
logging.getLogger("httpx").setLevel(logging.WARNING)

app = typer.Typer(help="Tablescout CLI - Declarative HTML table scraping tool")


@app.command()
def scrape(
    config_path: str = typer.Argument(..., help="Path to the scrape configuration file"),
    output_dir: str | None = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for output files (default: output_dir from the configuration)",
    ),
    pages: list[str] | None = typer.Option(
        None,
        "--page",
        "-p",
        help="Id of a page to scrape; repeat to select several (default: all pages)",
    ),
    best_effort: bool = typer.Option(
        False,
        "--best-effort",
        help="Skip failing pages instead of aborting the scrape",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
) -> None:
    """
    Scrape the pages of a configuration file and write the configured outputs.

    Every page is retrieved, transformed and parsed in order. Results are
    written as the output files declared in the configuration.

    Examples:
        $ tablescout scrape config.yaml
        $ tablescout scrape config.yaml -p languages -o results --best-effort
    """
    # Set log level based on verbose flag
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config_manager = ConfigManager(config_path)
        config = config_manager.get_scrape_config()
    except Exception as e:
        typer.echo(f"❌ Error loading scrape configuration: {str(e)}", err=True)
        raise typer.Exit(code=1)

    available_pages = config_manager.list_pages()
    unknown = [page_id for page_id in pages or [] if page_id not in available_pages]
    if unknown:
        typer.echo(f"❌ Unknown pages: {', '.join(unknown)}", err=True)
        typer.echo(f"Available pages: {', '.join(available_pages)}")
        raise typer.Exit(code=1)

    failure_policy = FailurePolicy.BEST_EFFORT if best_effort else None
    selected = pages or available_pages
    typer.echo(f"🔎 Scraping {len(selected)} pages: {', '.join(selected)}")
    typer.echo(f"💾 Saving output to: {output_dir or config.output_dir}")

    try:
        runner = ScrapeRunner()
        outcome = runner.run(config, output_dir=output_dir, page_ids=pages or None, failure_policy=failure_policy)
    except Exception as e:
        typer.echo(f"❌ Error during scraping: {str(e)}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"✅ Scraping completed! Processed {len(outcome['results'])} pages.")
    for page_id, reason in outcome["failures"].items():
        typer.echo(f"⚠️ Skipped {page_id}: {reason}")
    for path in outcome["files"]:
        typer.echo(f"📄 Wrote {path}")


@app.command("list-pages")
def list_pages(
    config_path: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a scrape configuration file (default: bundled example)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show parsers of each page",
    ),
) -> None:
    """List the pages declared in a scrape configuration."""
    try:
        config_manager = ConfigManager(config_path)
    except Exception as e:
        typer.echo(f"❌ Error loading scrape configuration: {str(e)}", err=True)
        raise typer.Exit(code=1)

    descriptions = config_manager.get_page_descriptions()
    typer.echo("Configured pages:")
    for page_id, description in descriptions.items():
        typer.echo(f"  - {page_id}: {description}")
        if verbose:
            page = config_manager.get_page(page_id)
            for parser in page.parsers:
                typer.echo(f"      {parser.id} ({parser.type})")


@app.command()
def info() -> None:
    """Show information about Tablescout and available commands."""
    typer.echo("Tablescout - Declarative HTML table scraping tool")
    typer.echo("\nAvailable commands:")
    typer.echo("  scrape      - Scrape the pages of a configuration and write outputs")
    typer.echo("  list-pages  - List the pages declared in a configuration")
    typer.echo("  info        - Show this information")
    typer.echo("\nFor more details on a command, run: tablescout COMMAND --help")


if __name__ == "__main__":
    app()
