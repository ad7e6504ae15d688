"""
JeevesBot - Command Line Interface
Manage appointments from the terminal and start the bot or the API server.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .agents import AgentResponse, CalendarAgent, ChatAgent
from .core.config import Config
from .core.memory import ConversationMemory
from .core.store import JsonFileCalendarStore

# Initialize CLI app and console
app = typer.Typer(help="JeevesBot - Your personal calendar assistant")
console = Console()

# Lazy-loaded so `--help` works without touching the config directory
_config: Optional[Config] = None
_calendar_agent: Optional[CalendarAgent] = None


def get_config() -> Config:
    global _config
    if _config is None:
        _config = Config()
    return _config


def get_calendar_agent() -> CalendarAgent:
    """Get or initialize the CalendarAgent on the configured data file."""
    global _calendar_agent
    if _calendar_agent is None:
        config = get_config()
        store = JsonFileCalendarStore(config.get_calendar_file())
        store.initialize()
        _calendar_agent = CalendarAgent(store, config)
    return _calendar_agent


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def format_agent_response(response: AgentResponse) -> None:
    """
    Display an AgentResponse: status line, appointment table, suggestions.

    Args:
        response: The AgentResponse to display
    """
    if response.success:
        console.print(f"[green]✓[/green] {response.message}")
    else:
        console.print(f"[red]✗[/red] {response.message}")

    if response.data:
        _render_response_data(response.data)

    if response.suggestions:
        console.print()
        console.print("[dim]Suggestions:[/dim]")
        for suggestion in response.suggestions:
            console.print(f"  [dim]•[/dim] {suggestion}")


def _render_response_data(data: Dict[str, Any]) -> None:
    if "date_range" in data:
        date_range = data["date_range"]
        console.print(f"  [dim]Date range: {date_range['start']} - {date_range['end']}[/dim]")

    if isinstance(data.get("appointments"), list) and data["appointments"]:
        console.print()
        console.print(_appointments_table(data["appointments"]))

    for key in ("appointment", "deleted_appointment"):
        if key in data:
            console.print()
            console.print(Panel(_format_single_appointment(data[key]), expand=False))


def _appointments_table(appointments: List[Dict[str, Any]]) -> Table:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Day", width=10)
    table.add_column("Date", width=12)
    table.add_column("Time", width=6)
    table.add_column("Contact", min_width=20)
    table.add_column("Category", min_width=12)

    for index, appointment in enumerate(appointments, start=1):
        weekday = datetime.strptime(appointment["date"], "%d-%m-%Y").strftime("%A")
        table.add_row(
            str(index),
            weekday,
            appointment["date"],
            appointment["time"],
            appointment["contactName"],
            appointment["category"],
        )
    return table


def _format_single_appointment(appointment: Dict[str, Any]) -> str:
    lines = [
        f"📅 {appointment['date']} {appointment['time']}",
        f"👤 {appointment['contactName']}",
        f"🏷️ {appointment['category']}",
    ]
    if appointment.get("id"):
        lines.append(f"[dim]ID: {appointment['id']}[/dim]")
    return "\n".join(lines)


def _exit_on_failure(response: AgentResponse) -> None:
    if not response.success:
        raise typer.Exit(1)


# =============================================================================
# Appointment commands
# =============================================================================

@app.command()
def add(
    text: str = typer.Argument(..., help='"DATE. TIME. Contact Name. Category"'),
):
    """
    Add an appointment

    Examples:
      jeeves add "21-11-2025. 14:30. Peter van der Meer. Ghostin 06"
      jeeves add "24.12.25. 9.30. John Doe. Meeting"
    """
    response = get_calendar_agent().process("add_appointment", {"text": text})
    format_agent_response(response)
    _exit_on_failure(response)


@app.command("list")
def list_appointments():
    """Show all appointments in chronological order"""
    response = get_calendar_agent().process("list_appointments", {})
    format_agent_response(response)
    _exit_on_failure(response)


@app.command()
def upcoming(
    days: int = typer.Option(7, "--days", "-d", min=1, help="Number of days including today"),
):
    """Show appointments from today through the next days"""
    response = get_calendar_agent().process("list_upcoming", {"days": days})
    format_agent_response(response)
    _exit_on_failure(response)


@app.command()
def today():
    """Show today's appointments"""
    response = get_calendar_agent().process("list_today", {})
    format_agent_response(response)
    _exit_on_failure(response)


@app.command()
def delete(
    number: int = typer.Argument(..., help="Appointment number as shown by 'jeeves list'"),
):
    """
    Delete an appointment by its number

    Example:
      jeeves delete 3
    """
    response = get_calendar_agent().process("delete_appointment", {"position": number})
    format_agent_response(response)
    _exit_on_failure(response)


@app.command()
def parse(
    text: str = typer.Argument(..., help='"DATE. TIME. Contact Name. Category"'),
):
    """Check how input would be parsed, without saving it"""
    response = get_calendar_agent().process("parse_appointment", {"text": text})
    format_agent_response(response)
    _exit_on_failure(response)


# =============================================================================
# Servers
# =============================================================================

@app.command()
def bot():
    """Run the Telegram bot in long-polling mode"""
    from .integrations.telegram import run_polling

    _configure_logging()
    config = get_config()

    if not config.telegram_bot_token:
        console.print("[red]TELEGRAM_BOT_TOKEN is not set[/red]")
        raise typer.Exit(1)

    if config.is_production:
        console.print("[yellow]ENVIRONMENT=production: the bot is served by webhook, "
                      "use 'jeeves serve' instead[/yellow]")
        raise typer.Exit(1)

    memory = ConversationMemory(
        config.get_memory_file(),
        max_messages=config.get("max_messages_per_user", section="preferences", default=30),
    )
    memory.initialize()
    run_polling(config, get_calendar_agent(), ChatAgent(memory, config))


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the REST API (and the webhook bot in production)"""
    import uvicorn

    _configure_logging()
    uvicorn.run("backend.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
