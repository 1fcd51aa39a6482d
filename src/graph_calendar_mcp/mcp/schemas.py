AVAILABILITY_GRAPH = "get-user-availability-graph"
AVAILABILITY_NOW = "get-user-availability"
CREATE_EVENT = "create-calendar-event"
CURRENT_DATE = "get-current-date"

_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

LIST = {
    AVAILABILITY_GRAPH: {
        "name": AVAILABILITY_GRAPH,
        "description": "Get calendar availability for a user using Microsoft Graph (app-only)",
        "input_schema": {
            "type": "object",
            "required": ["email", "date", "startTime", "endTime"],
            "properties": {
                "email": {
                    "type": "string",
                    "minLength": 1,
                    "description": "The email of the user to check availability for",
                },
                "date": {
                    "type": "string",
                    "pattern": _DATE_PATTERN,
                    "description": "Date to check availability on (YYYY-MM-DD)",
                },
                "startTime": {
                    "type": "string",
                    "pattern": _TIME_PATTERN,
                    "description": "Start time (HH:mm, UTC)",
                },
                "endTime": {
                    "type": "string",
                    "pattern": _TIME_PATTERN,
                    "description": "End time (HH:mm, UTC)",
                },
            },
        },
    },
    AVAILABILITY_NOW: {
        "name": AVAILABILITY_NOW,
        "description": "Get a user's calendar availability for the next hour",
        "input_schema": {
            "type": "object",
            "required": ["email"],
            "properties": {
                "email": {
                    "type": "string",
                    "minLength": 1,
                    "description": "The email of the user to check availability for",
                },
            },
        },
    },
    CREATE_EVENT: {
        "name": CREATE_EVENT,
        "description": "Create a calendar event for a user",
        "input_schema": {
            "type": "object",
            "required": ["email", "subject", "startDateTime", "endDateTime"],
            "properties": {
                "email": {
                    "type": "string",
                    "format": "email",
                    "description": "Email address of the user",
                },
                "subject": {
                    "type": "string",
                    "minLength": 1,
                    "description": "Subject of the event",
                },
                "content": {
                    "type": "string",
                    "default": "",
                    "description": "Event body content (HTML)",
                },
                "startDateTime": {
                    "type": "string",
                    "minLength": 1,
                    "description": "Event start date/time in ISO format, e.g. 2025-07-20T14:00:00",
                },
                "endDateTime": {
                    "type": "string",
                    "minLength": 1,
                    "description": "Event end date/time in ISO format",
                },
                "timeZone": {
                    "type": "string",
                    "minLength": 1,
                    "default": "UTC",
                    "description": "Time zone of the event, e.g. UTC, Pacific Standard Time",
                },
            },
        },
    },
    CURRENT_DATE: {
        "name": CURRENT_DATE,
        "description": (
            "Get the current date and time, plus tomorrow's and next week's dates, "
            "to resolve relative dates such as 'tomorrow' or 'next week'"
        ),
        "input_schema": {"type": "object", "properties": {}},
    },
}
