"""
Application Constants

Defines constants used throughout the clinic chat client.
"""

# Chat endpoint
DEFAULT_ENDPOINT_URL = "ws://127.0.0.1:8000/ws"
ALLOWED_ENDPOINT_SCHEMES = ("ws", "wss")

# Chat participants
CHAT_ID = "chat123"
CURRENT_USER_ID = "currentUser"
REMOTE_USER_ID = "remoteUser"

# WebSocket close codes (RFC 6455)
CLOSE_CODE_NORMAL = 1000

# Connection settings
DEFAULT_OPEN_TIMEOUT = 10.0
DEFAULT_MAX_FRAME_SIZE = 2 ** 20

# Schedule data
APPOINTMENTS_FILE_NAME = "appointments.json"
APPOINTMENT_FIELDS = (
    "id",
    "period",
    "type",
    "title",
    "patientName",
    "room",
    "date",
    "startTime",
    "endTime",
    "hasConflict",
    "patientInfo",
)

# UI constants
SCHEDULE_TITLE = "Schedule"
CHAT_TITLE = "Chat with patient"
CONFLICT_WARNING = "Multiple appointments at this time"
MESSAGE_PROMPT = "Message..."
LOCAL_BUBBLE_STYLE = "white on blue"
REMOTE_BUBBLE_STYLE = "black on grey85"

# Command constants
QUIT_COMMAND = "/quit"

# Log format constants
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
