"""Socket.IO event names used by the web client."""

from __future__ import annotations

# client -> server
TYPING_START = "typing-start"
TYPING_STOP = "typing-stop"
SEND_MESSAGE = "send-message"
MARK_READ = "mark-read"

# server -> client
USER_STATUS = "user-status"
USER_TYPING = "user-typing"
USER_STOPPED_TYPING = "user-stopped-typing"
NEW_MESSAGE = "new-message"
MESSAGES_READ = "messages-read"
NEW_SHARE = "new-share"
NEW_NOTIFICATION = "new-notification"
