"""Collection names (schema-in-code).

The document store has no DDL; collections appear on first write. Use these
constants so the names stay consistent across gateways and tests.
"""

INTERNS = "interns"
TASKS = "tasks"
PERFORMANCES = "performances"
ATTENDANCE = "attendance"
MESSAGES = "messages"
CHATS = "chats"
SETTINGS = "settings"
