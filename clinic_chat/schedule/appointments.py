"""
Appointment Loading

Reads the appointment list from the bundled JSON file.
"""

import json
import logging
from collections import OrderedDict
from pathlib import Path
from typing import Dict, List, Optional, Union

from clinic_chat.shared.constants import APPOINTMENTS_FILE_NAME
from clinic_chat.shared.exceptions import AppointmentLoadError, ValidationError
from clinic_chat.shared.models import Appointment

logger = logging.getLogger(__name__)

BUNDLED_APPOINTMENTS_PATH = Path(__file__).with_name(APPOINTMENTS_FILE_NAME)


def load_appointments(path: Optional[Union[str, Path]] = None) -> List[Appointment]:
    """
    Load appointments from a JSON array file.

    Args:
        path: JSON file to read. Defaults to the bundled appointments.json.

    Returns:
        Appointments in file order.

    Raises:
        AppointmentLoadError: If the file is missing, not valid JSON, not an
            array, or contains an invalid record.
    """
    path = Path(path) if path is not None else BUNDLED_APPOINTMENTS_PATH

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise AppointmentLoadError(f"Appointments file not found: {path}", path=str(path))
    except json.JSONDecodeError as e:
        raise AppointmentLoadError(f"Invalid JSON in appointments file {path}: {e}", path=str(path))
    except OSError as e:
        raise AppointmentLoadError(f"Failed to read appointments file {path}: {e}", path=str(path))

    if not isinstance(data, list):
        raise AppointmentLoadError(f"Appointments file {path} must contain a JSON array", path=str(path))

    appointments = []
    for index, record in enumerate(data):
        try:
            appointments.append(Appointment.from_dict(record))
        except ValidationError as e:
            raise AppointmentLoadError(f"Invalid appointment at index {index} in {path}: {e}",
                                       path=str(path)) from e

    logger.info("Loaded %d appointments from %s", len(appointments), path)
    return appointments


def group_by_date(appointments: List[Appointment]) -> Dict[str, List[Appointment]]:
    """Group appointments by date, keeping first-seen date order."""
    grouped: Dict[str, List[Appointment]] = OrderedDict()
    for appointment in appointments:
        grouped.setdefault(appointment.date, []).append(appointment)
    return grouped
