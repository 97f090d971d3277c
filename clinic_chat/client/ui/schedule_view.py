"""
Schedule View

Rich renderables for the appointment list and the appointment detail screen.
"""

from datetime import datetime
from typing import List

from rich.console import Group
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from clinic_chat.schedule import group_by_date
from clinic_chat.shared.constants import CONFLICT_WARNING, SCHEDULE_TITLE
from clinic_chat.shared.models import Appointment


def format_day_header(date: str) -> str:
    """
    Format an ISO date as a section header, e.g. "MONDAY, 19 MAY".

    Dates that are not ISO formatted are shown as given.
    """
    try:
        day = datetime.strptime(date, "%Y-%m-%d")
    except ValueError:
        return date.upper()
    return f"{day.strftime('%A')}, {day.day} {day.strftime('%B')}".upper()


class ScheduleView:
    """Builds the schedule list and appointment detail renderables."""

    def render_row(self, appointment: Appointment) -> Text:
        """Render the middle column of a schedule row."""
        text = Text()
        text.append(f"{appointment.type}\n", style="dim")
        text.append(f"{appointment.title}\n", style="bold")
        text.append(f"({appointment.patient_initial}) ", style="bold white on green")
        text.append(f"{appointment.patient_name}\n", style="dim")
        text.append(appointment.room, style="dim italic")
        if appointment.has_conflict:
            text.append("\n")
            text.append("⚠ ", style="yellow")
            text.append(CONFLICT_WARNING, style="dim")
        return text

    def render_list(self, appointments: List[Appointment]) -> Table:
        """
        Render the schedule as a numbered table grouped by day.

        Args:
            appointments: Appointments in display order.

        Returns:
            Table whose row numbers match the appointments' list positions.
        """
        table = Table(title=SCHEDULE_TITLE, show_header=False, expand=True, show_lines=True)
        table.add_column("#", justify="right", style="cyan", no_wrap=True)
        table.add_column("Period", justify="center", style="bold", no_wrap=True)
        table.add_column("Appointment", ratio=1)
        table.add_column("Time", justify="right", style="dim", no_wrap=True)

        if not appointments:
            table.add_row("", "", Text("No appointments", style="dim italic"), "")
            return table

        # Keyed by object identity; ids from the file are not guaranteed unique
        index = {id(appointment): number for number, appointment in enumerate(appointments, start=1)}
        for date, day_appointments in group_by_date(appointments).items():
            table.add_row("", "", Text(format_day_header(date), style="bold dim"), "", end_section=True)
            for appointment in day_appointments:
                table.add_row(
                    str(index[id(appointment)]),
                    appointment.period,
                    self.render_row(appointment),
                    appointment.time_range,
                )
        return table

    def render_detail(self, appointment: Appointment) -> Panel:
        """Render the appointment detail screen."""
        header = Text()
        header.append(f"{appointment.type}\n", style="blue")
        header.append(appointment.title, style="bold")

        when_where = Text()
        when_where.append("⏰ ", style="dim")
        when_where.append(appointment.time_range)
        when_where.append("    ")
        when_where.append("⌖ ", style="dim")
        when_where.append(appointment.room)

        patient = Text()
        patient.append(f" {appointment.patient_initial} ", style="bold white on green")
        patient.append(f" {appointment.patient_name}\n", style="bold")
        patient.append("   Patient", style="dim")

        info = Text()
        info.append("Patient information\n", style="dim")
        info.append(appointment.patient_info)

        return Panel(
            Group(header, when_where, Rule(style="dim"), patient, Rule(style="dim"), info),
            title=f"Appointment {appointment.period}",
            border_style="cyan",
            expand=True,
        )
