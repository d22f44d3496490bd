"""
CLI Entry Point for Mirth Channel Report

Usage:
    python -m cli.report report --xml-dir <dir>
    python -m cli.report inspect --source <channel.xml>
    python -m cli.report connectors list
    python -m cli.report config show
"""

import json
import logging
from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from mirth_report import __version__
from mirth_report.config_loader import ConfigLoader, ReportConfig
from mirth_report.errors import ChannelReportError

console = Console()
err_console = Console(stderr=True)

DEFAULT_CONFIG_DIR = Path(__file__).parent.parent / "config"


def get_config(ctx) -> ReportConfig:
    """Load the report config, falling back to defaults when none is shipped."""
    config_dir = ctx.obj.get("config_path") if ctx.obj else None
    try:
        if config_dir is None:
            if not (DEFAULT_CONFIG_DIR / "report_config.yaml").exists():
                return ReportConfig()
            config_dir = DEFAULT_CONFIG_DIR
        return ConfigLoader(config_dir).load_config()
    except (OSError, ValueError, yaml.YAMLError) as e:
        _fail(ctx, f"Configuration error: {e}")


def _fail(ctx, message: str):
    """Print a diagnostic to stderr and exit with status 1."""
    err_console.print(f"[red]ERROR:[/red] {escape(message)}", soft_wrap=True)
    ctx.exit(1)


@click.group()
@click.option(
    "--config-dir", "-c",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Path to configuration directory"
)
@click.option("--verbose", "-v", is_flag=True, help="Log progress to stderr")
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, config_dir: str, verbose: bool):
    """Mirth Channel Report.

    Summarize exported Mirth Connect channels: name, description, state and
    the endpoints of their source and destination connectors.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_dir) if config_dir else None

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


# =============================================================================
# REPORT COMMANDS
# =============================================================================

@cli.command()
@click.option(
    "--xml-dir", "xml_dir",
    type=click.Path(exists=True),
    default=".",
    show_default=True,
    help="Directory to parse exported XML Mirth channel files."
)
@click.pass_context
def report(ctx, xml_dir: str):
    """Write the channel report for every .xml file under a directory.

    Any unreadable file, malformed channel or unknown connector type aborts
    the run before anything is written.
    """
    from mirth_report.report.csv_report import ReportBuilder

    builder = ReportBuilder(get_config(ctx))

    try:
        output = builder.build_directory_report(xml_dir)
    except ChannelReportError as e:
        _fail(ctx, str(e))
    except OSError as e:
        _fail(ctx, f"{e.filename or xml_dir}: {e.strerror or e}")

    click.echo(output, nl=False)


@cli.command()
@click.option(
    "--source", "-s",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="Path to an exported channel .xml file"
)
@click.option(
    "--format", "-f",
    type=click.Choice(["json", "yaml", "table"]),
    default="table",
    help="Output format"
)
@click.pass_context
def inspect(ctx, source: str, format: str):
    """Show the connectors of a single channel export."""
    from mirth_report.mirth.channel_parser import ChannelParser
    from mirth_report.mirth.descriptors import build_rules

    config = get_config(ctx)

    try:
        parser = ChannelParser(source)
        summary = parser.get_summary(
            rules=build_rules(render_email_subject=config.render_email_subject),
            labels=config.protocol_labels,
        )
    except ChannelReportError as e:
        _fail(ctx, str(e))

    if format == "json":
        console.print(Syntax(json.dumps(summary, indent=2), "json"))
    elif format == "yaml":
        console.print(Syntax(yaml.dump(summary, default_flow_style=False, sort_keys=False), "yaml"))
    else:
        _display_channel(summary, config)


def _display_channel(summary, config: ReportConfig):
    """Display a channel summary as a panel and connector table."""
    status = "[green]Enabled[/green]" if summary["enabled"] else f"[red]{config.disabled_marker}[/red]"
    console.print(Panel(
        f"[bold]{escape(summary['name'])}[/bold] ({status})\n{escape(summary['description'])}",
        title="Channel"
    ))

    table = Table(title="Connectors")
    table.add_column("Role", style="cyan")
    table.add_column("Name")
    table.add_column("Data Type", style="yellow")
    table.add_column("Protocol", style="magenta")
    table.add_column("Address", style="green")

    for connector in summary["connectors"]:
        table.add_row(
            connector["role"],
            escape(connector["name"]),
            escape(connector["data_type"] or "-"),
            escape(connector["protocol"] or "-"),
            escape(connector["descriptor"]),
        )

    console.print(table)


# =============================================================================
# CONNECTOR COMMANDS
# =============================================================================

@cli.group()
def connectors():
    """Inspect supported connector types."""
    pass


@connectors.command("list")
@click.pass_context
def connectors_list(ctx):
    """List the DataType values that have a descriptor rule."""
    from mirth_report.mirth.descriptors import build_rules

    config = get_config(ctx)
    rules = build_rules(render_email_subject=config.render_email_subject)

    table = Table(title="Connector Types")
    table.add_column("DataType", style="cyan")
    table.add_column("Rule", style="green")

    for data_type in sorted(rules):
        table.add_row(data_type, rules[data_type].__name__.lstrip("_"))

    console.print(table)


# =============================================================================
# CONFIGURATION COMMANDS
# =============================================================================

@cli.group()
def config():
    """Manage report configuration."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx):
    """Display current configuration settings."""
    config = get_config(ctx)

    console.print(Panel(
        f"[bold]{config.config_name}[/bold] v{config.version}",
        title="Configuration"
    ))

    table = Table(title="Report Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Header", escape(config.delimiter.join(config.header)))
    table.add_row("Delimiter", repr(config.delimiter))
    table.add_row("Line Separator", repr(config.line_separator))
    table.add_row("Multiple Values", repr(config.multiple_values))
    table.add_row("Disabled Marker", config.disabled_marker)
    table.add_row("File Suffix", config.file_suffix)
    table.add_row("Newline Token", repr(config.newline_token))
    table.add_row("Comma Replacement", repr(config.comma_replacement))
    table.add_row("Email Subject", "Rendered" if config.render_email_subject else "Legacy")

    console.print(table)

    if config.protocol_labels:
        labels = Table(title="Protocol Labels")
        labels.add_column("Protocol", style="cyan")
        labels.add_column("Label", style="green")
        for protocol, label in config.protocol_labels.items():
            labels.add_row(protocol, label)
        console.print(labels)


if __name__ == "__main__":
    cli()
