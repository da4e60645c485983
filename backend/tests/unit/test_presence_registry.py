from bubbly.domain.realtime.presence import PresenceRegistry


def test_first_connection_reports_transition():
    registry = PresenceRegistry()

    assert registry.add_connection("alice", "sid-1") is True
    assert registry.add_connection("alice", "sid-2") is False
    assert registry.is_online("alice")
    assert registry.connection_count("alice") == 2
    assert len(registry) == 1


def test_last_disconnect_reports_transition():
    registry = PresenceRegistry()
    registry.add_connection("alice", "sid-1")
    registry.add_connection("alice", "sid-2")

    assert registry.remove_connection("alice", "sid-1") is False
    assert registry.is_online("alice")
    assert registry.remove_connection("alice", "sid-2") is True
    assert not registry.is_online("alice")
    assert registry.online_user_ids() == set()


def test_unknown_disconnect_is_ignored():
    registry = PresenceRegistry()
    registry.add_connection("alice", "sid-1")

    assert registry.remove_connection("alice", "sid-9") is False
    assert registry.remove_connection("bob", "sid-1") is False
    assert registry.is_online("alice")
