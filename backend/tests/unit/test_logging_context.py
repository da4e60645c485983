from bubbly.obs import logging as obs_logging


def test_reset_context_restores_previous_request_id():
    assert obs_logging.current_request_id() is None

    outer = obs_logging.bind_context(request_id="req-outer", route="/api/feed")
    inner = obs_logging.bind_context(request_id="req-inner")
    assert obs_logging.current_request_id() == "req-inner"

    obs_logging.reset_context(inner)
    assert obs_logging.current_request_id() == "req-outer"

    obs_logging.reset_context(outer)
    assert obs_logging.current_request_id() is None


def test_bind_context_skips_unset_fields():
    tokens = obs_logging.bind_context(user_id="alice")
    try:
        assert set(tokens) == {"user_id"}
        assert obs_logging.current_request_id() is None
    finally:
        obs_logging.reset_context(tokens)
