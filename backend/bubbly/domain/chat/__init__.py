"""Chat domain exports."""

from .service import list_conversations, list_messages, mark_read, send_message

__all__ = [
	"list_conversations",
	"list_messages",
	"mark_read",
	"send_message",
]
