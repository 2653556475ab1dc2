from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Iterator

from .appium_http_client import AppiumHTTPClient
from .config import SessionConfig
from .errors import SessionError

ClientFactory = Callable[[str], Any]


def create_session(
    config: SessionConfig,
    *,
    server_url: str,
    client_factory: ClientFactory = AppiumHTTPClient,
) -> Any:
    """
    Return a client holding a live session with the implicit wait applied.

    Any failure is fatal for the run and raised as SessionError. A session that
    was created before the failure is deleted first.
    """
    client = client_factory(server_url)
    try:
        session_id = client.create_session(config.to_session_payload())
    except Exception as e:
        raise SessionError(f"Could not create session on {server_url}: {e}") from e

    try:
        client.set_timeouts(implicit_ms=int(config.implicit_wait_s * 1000))
    except Exception as e:
        destroy_session(client)
        raise SessionError(f"Session {session_id} created but could not be configured: {e}") from e

    print(f"Session started: {session_id}")
    return client


def destroy_session(client: Any) -> None:
    """Tear down the session. Safe to call twice; never raises."""
    if client is None:
        return
    try:
        client.delete_session()
    except Exception as e:
        print(f"⚠ Session teardown failed: {e}")


@contextmanager
def open_session(
    config: SessionConfig,
    *,
    server_url: str,
    client_factory: ClientFactory = AppiumHTTPClient,
) -> Iterator[Any]:
    client = create_session(config, server_url=server_url, client_factory=client_factory)
    try:
        yield client
    finally:
        destroy_session(client)
        print("Session ended")
