"""Command line interface for the capture AI service."""

import click
from pathlib import Path
from typing import List
import json

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.markdown import Markdown

from context_hub.application.engine import ContextHub
from context_hub.application.config import Config
from context_hub.domain.models import Capture
from context_hub.generation.errors import AIServiceError

console = Console()


def load_captures(path: Path) -> List[Capture]:
    """Load captures from a JSON or YAML export.

    The file holds either a list of captures or an object with a
    ``captures`` list, in the API's JSON shape.
    """
    suffix = path.suffix.lower()
    with open(path) as f:
        if suffix == '.json':
            data = json.load(f)
        elif suffix in ['.yaml', '.yml']:
            import yaml
            data = yaml.safe_load(f)
        else:
            raise click.BadParameter(f"Unsupported captures file format: {suffix}")

    if isinstance(data, dict):
        data = data.get('captures', [])
    if not isinstance(data, list):
        raise click.BadParameter("Captures file must contain a list of captures")

    return [Capture.from_dict(item) for item in data]


captures_option = click.option(
    '--captures', '-f', 'captures_path', required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='JSON or YAML file with exported captures'
)


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True), help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.pass_context
def cli(ctx, config, verbose):
    """Personal Context Hub - search and question your saved captures."""
    ctx.ensure_object(dict)

    if config:
        config_obj = Config.load_from_file(Path(config))
    else:
        config_obj = Config()

    if verbose:
        config_obj.log_level = "DEBUG"

    ctx.obj['config'] = config_obj
    ctx.obj['engine'] = ContextHub(config_obj, llm_factory=ctx.obj.get('llm_factory'))


@cli.command()
@click.argument('question')
@captures_option
@click.option('--sources', '-s', is_flag=True, help='Show sources')
@click.option('--format', 'output_format', default='rich',
              type=click.Choice(['rich', 'plain', 'json']))
@click.pass_context
def ask(ctx, question, captures_path, sources, output_format):
    """Ask a question about your captures."""
    engine = ctx.obj['engine']

    try:
        captures = load_captures(captures_path)
        result = engine.ask(question, captures)
    except (AIServiceError, ValueError) as e:
        console.print(f"[red]Error answering question: {e}[/red]")
        ctx.exit(1)

    if output_format == 'json':
        output = {
            'answer': result.answer,
            'capturesUsed': len(result.captures_used),
            'sources': result.sources(ctx.obj['config'].search.source_count),
        }
        click.echo(json.dumps(output, indent=2))

    elif output_format == 'plain':
        click.echo(result.format_response(include_sources=sources))

    else:
        console.print(Panel(
            Markdown(result.answer),
            title=f"Answer to: {question}",
            border_style="green"
        ))

        if sources and result.captures_used:
            table = Table(title="Sources")
            table.add_column("#", style="cyan")
            table.add_column("Title", style="magenta")
            table.add_column("Type", style="yellow")

            for i, source in enumerate(result.sources(ctx.obj['config'].search.source_count), 1):
                table.add_row(str(i), source['title'] or "Untitled", source['type'])

            console.print(table)

        note = " (most recent, no direct matches)" if result.used_fallback else ""
        console.print(f"\n[dim]Provider: {result.provider} | Model: {result.model} | "
                      f"Captures used: {len(result.captures_used)}{note}[/dim]")


@cli.command()
@click.argument('query')
@captures_option
@click.option('--format', 'output_format', default='rich',
              type=click.Choice(['rich', 'json']))
@click.pass_context
def search(ctx, query, captures_path, output_format):
    """Rank captures by relevance to a query."""
    engine = ctx.obj['engine']

    try:
        results = engine.search(query, load_captures(captures_path))
    except ValueError as e:
        console.print(f"[red]Error during search: {e}[/red]")
        ctx.exit(1)

    if output_format == 'json':
        click.echo(json.dumps({
            'results': [r.to_dict() for r in results],
            'total': len(results),
        }, indent=2))
        return

    if not results:
        console.print("[yellow]No matching captures.[/yellow]")
        return

    table = Table(title=f"Results for: {query}")
    table.add_column("Score", style="yellow")
    table.add_column("Title", style="magenta")
    table.add_column("Type", style="cyan")
    table.add_column("Created", style="dim")

    for result in results:
        table.add_row(
            str(result.relevance_score),
            result.title or "Untitled",
            result.type.value,
            result.created_at.strftime("%Y-%m-%d")
        )

    console.print(table)


@cli.command()
@click.pass_context
def status(ctx):
    """Show which AI provider is active."""
    info = ctx.obj['engine'].status()

    if not info['configured']:
        console.print("[yellow]AI service is not configured.[/yellow]")
        console.print("Set one of GROQ_API_KEY, OPENROUTER_API_KEY, GROK_API_KEY or OPENAI_API_KEY.")
        return

    provider = info['provider']
    table = Table(title="AI Provider")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_row("Provider", provider['name'])
    table.add_row("Model", provider['model'])
    table.add_row("Cost", provider['cost'])
    console.print(table)


@cli.command()
@click.argument('text')
@click.option('--type', 'capture_type', default='text',
              type=click.Choice(['text', 'link', 'note', 'quote', 'todo']))
@click.pass_context
def summarize(ctx, text, capture_type):
    """Summarize TEXT, or the contents of the file TEXT names."""
    path = Path(text)
    content = path.read_text() if path.is_file() else text

    summary = ctx.obj['engine'].summarize(content, capture_type)
    if summary is None:
        console.print("[yellow]No summary available.[/yellow]")
        return

    console.print(Panel(summary, title="Summary", border_style="cyan"))


@cli.command()
@click.pass_context
def config_show(ctx):
    """Show current configuration."""
    config = ctx.obj['config']

    config_json = json.dumps(config.safe_dump(), indent=2, default=str)

    panel = Panel(
        config_json,
        title="Current Configuration",
        border_style="green"
    )
    console.print(panel)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
