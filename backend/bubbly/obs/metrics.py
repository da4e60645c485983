"""Central registry for Prometheus metrics used across the backend."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram


REQUEST_COUNTER = Counter(
	"bubbly_http_requests_total",
	"Total HTTP requests processed",
	["route", "method", "status"],
)

REQUEST_LATENCY = Histogram(
	"bubbly_http_request_duration_seconds",
	"HTTP request latency in seconds",
	["route", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

SOCKET_CLIENTS = Gauge(
	"bubbly_socketio_clients",
	"Active Socket.IO clients per namespace",
	["namespace"],
)

SOCKET_EVENTS = Counter(
	"bubbly_socketio_events_total",
	"Socket.IO events emitted per namespace",
	["namespace", "event"],
)

SOCKET_REJECTS = Counter(
	"bubbly_socketio_rejects_total",
	"Socket.IO handshakes or events rejected",
	["namespace", "reason"],
)

PRESENCE_ONLINE_USERS = Gauge(
	"bubbly_presence_online_users",
	"Users with at least one live socket connection",
)

PRESENCE_TRANSITIONS = Counter(
	"bubbly_presence_transitions_total",
	"Presence online/offline transitions",
	["state"],
)

FEED_REQUESTS = Counter(
	"bubbly_feed_requests_total",
	"Feed pages served",
)

FEED_ITEMS = Counter(
	"bubbly_feed_items_total",
	"Feed working-set items by outcome",
	["kind", "outcome"],
)

POSTS_CREATED = Counter(
	"bubbly_posts_created_total",
	"Posts created",
)

SHARES_CREATED = Counter(
	"bubbly_shares_created_total",
	"Shares created",
)

REACTIONS = Counter(
	"bubbly_reactions_total",
	"Reaction toggles by subject and outcome",
	["subject", "outcome"],
)

COMMENTS_CREATED = Counter(
	"bubbly_comments_created_total",
	"Comments created",
	["subject"],
)

FOLLOW_CHANGES = Counter(
	"bubbly_follow_changes_total",
	"Follow graph mutations",
	["action"],
)

NOTIFICATIONS = Counter(
	"bubbly_notifications_total",
	"Notifications by type and result",
	["type", "result"],
)

MESSAGES_SENT = Counter(
	"bubbly_messages_sent_total",
	"Direct messages persisted",
)

RATE_LIMITED = Counter(
	"bubbly_rate_limited_total",
	"Operations dropped by rate limiting",
	["kind"],
)

REDIS_UP = Gauge("bubbly_redis_up", "Redis readiness (1 ok, 0 failing)")
POSTGRES_UP = Gauge("bubbly_postgres_up", "Postgres readiness (1 ok, 0 failing)")
DEPENDENCY_LATENCY = Histogram(
	"bubbly_dependency_latency_seconds",
	"Readiness check latency per dependency",
	["dependency"],
	buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5),
)


def observe_request(route: str, method: str, status: int, elapsed_seconds: float) -> None:
	REQUEST_COUNTER.labels(route=route, method=method, status=str(status)).inc()
	REQUEST_LATENCY.labels(route=route, method=method).observe(elapsed_seconds)


def socket_connected(namespace: str) -> None:
	SOCKET_CLIENTS.labels(namespace=namespace).inc()


def socket_disconnected(namespace: str) -> None:
	SOCKET_CLIENTS.labels(namespace=namespace).dec()


def socket_event(namespace: str, event: str) -> None:
	SOCKET_EVENTS.labels(namespace=namespace, event=event).inc()


def socket_reject(namespace: str, reason: str) -> None:
	SOCKET_REJECTS.labels(namespace=namespace, reason=reason).inc()


def presence_online(count: int) -> None:
	PRESENCE_ONLINE_USERS.set(float(count))


def presence_transition(online: bool) -> None:
	PRESENCE_TRANSITIONS.labels(state="online" if online else "offline").inc()


def feed_served(*, posts_kept: int, posts_dropped: int, shares_kept: int, shares_dropped: int) -> None:
	FEED_REQUESTS.inc()
	FEED_ITEMS.labels(kind="post", outcome="kept").inc(posts_kept)
	FEED_ITEMS.labels(kind="post", outcome="filtered").inc(posts_dropped)
	FEED_ITEMS.labels(kind="share", outcome="kept").inc(shares_kept)
	FEED_ITEMS.labels(kind="share", outcome="filtered").inc(shares_dropped)


def inc_post_created() -> None:
	POSTS_CREATED.inc()


def inc_share_created() -> None:
	SHARES_CREATED.inc()


def inc_reaction(subject: str, outcome: str) -> None:
	REACTIONS.labels(subject=subject, outcome=outcome).inc()


def inc_comment_created(subject: str) -> None:
	COMMENTS_CREATED.labels(subject=subject).inc()


def inc_follow_change(action: str) -> None:
	FOLLOW_CHANGES.labels(action=action).inc()


def inc_notification(kind: str, result: str) -> None:
	NOTIFICATIONS.labels(type=kind, result=result).inc()


def inc_message_sent() -> None:
	MESSAGES_SENT.inc()


def inc_rate_limited(kind: str) -> None:
	RATE_LIMITED.labels(kind=kind).inc()


def mark_redis(ok: bool, *, latency_seconds: float | None = None) -> None:
	REDIS_UP.set(1.0 if ok else 0.0)
	if latency_seconds is not None:
		DEPENDENCY_LATENCY.labels(dependency="redis").observe(latency_seconds)


def mark_postgres(ok: bool, *, latency_seconds: float | None = None) -> None:
	POSTGRES_UP.set(1.0 if ok else 0.0)
	if latency_seconds is not None:
		DEPENDENCY_LATENCY.labels(dependency="postgres").observe(latency_seconds)
