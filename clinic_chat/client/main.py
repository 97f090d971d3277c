"""
Clinic Chat Main Entry Point

Shows the appointment schedule, the detail of a chosen appointment and
opens the chat with its patient.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt

from clinic_chat import __version__
from clinic_chat.client.chat_screen import ChatScreen
from clinic_chat.client.ui import ScheduleView
from clinic_chat.schedule import load_appointments
from clinic_chat.shared.config import ClientConfig, ConfigurationLoader, LOG_LEVELS
from clinic_chat.shared.exceptions import AppointmentLoadError, ConfigurationError
from clinic_chat.shared.logging_config import configure_from_env, get_logger
from clinic_chat.shared.models import Appointment


def parse_command_line_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Args:
        argv: Arguments to parse, sys.argv[1:] if None.

    Returns:
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        prog="clinic-chat",
        description="Clinic schedule and patient chat client"
    )

    parser.add_argument(
        "--config-file",
        help="Configuration file path (JSON or YAML)"
    )

    parser.add_argument(
        "--endpoint",
        help="Chat WebSocket endpoint URL"
    )

    parser.add_argument(
        "--appointments",
        help="Appointments JSON file (defaults to the bundled schedule)"
    )

    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        help="Logging level"
    )

    parser.add_argument(
        "--log-file",
        help="Log file path"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Clinic Chat {__version__}"
    )

    return parser.parse_args(argv)


def load_client_config(args: argparse.Namespace) -> ClientConfig:
    """
    Load client configuration.

    Priority order:
    1. Command line arguments
    2. Environment variables
    3. Configuration file
    4. Defaults

    Raises:
        ConfigurationError: If configuration is invalid.
    """
    config = ConfigurationLoader.load_client_config(args.config_file)

    if args.endpoint:
        config.endpoint_url = args.endpoint
    if args.appointments:
        config.appointments_path = args.appointments
    if args.log_level:
        config.log_level = args.log_level
    if args.log_file:
        config.log_file = args.log_file

    config.validate()
    return config


def run_schedule(console: Console, config: ClientConfig, appointments: List[Appointment]) -> None:
    """Show the schedule until the user quits, opening details and chats on request."""
    view = ScheduleView()
    choices = [str(number) for number in range(1, len(appointments) + 1)] + ["q"]

    while True:
        console.print(view.render_list(appointments))
        if not appointments:
            return

        choice = Prompt.ask("[cyan]Open appointment (q to quit)[/cyan]", console=console,
                            choices=choices, default="q")
        if choice == "q":
            return

        appointment = appointments[int(choice) - 1]
        console.print(view.render_detail(appointment))

        if Confirm.ask("[cyan]Write to the patient?[/cyan]", console=console, default=False):
            asyncio.run(ChatScreen(config, console).run())


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the clinic chat client.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    console = Console()
    args = parse_command_line_args(argv)

    try:
        config = load_client_config(args)
    except ConfigurationError as e:
        console.print(f"[bold red]Configuration error: {e}[/bold red]")
        return 2

    # Console logs go to stderr so they don't interleave with the UI
    try:
        configure_from_env(level=config.log_level, log_file=config.log_file, stream=sys.stderr)
    except ValueError as e:
        console.print(f"[bold red]Configuration error: invalid logging setting: {e}[/bold red]")
        return 2
    logger = get_logger(__name__)

    console.print(Panel("[bold cyan]Clinic schedule[/bold cyan]", border_style="cyan"))

    try:
        appointments = load_appointments(config.appointments_path)
    except AppointmentLoadError as e:
        logger.error("Failed to load appointments: %s", e)
        console.print(f"[bold red]Could not load appointments: {e}[/bold red]")
        appointments = []

    try:
        run_schedule(console, config, appointments)
        return 0
    except (KeyboardInterrupt, EOFError):
        console.print("\n[bold blue]Goodbye![/bold blue]")
        return 0
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
