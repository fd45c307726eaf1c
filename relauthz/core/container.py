"""Composition root.

Application-scoped singletons:
- Logging (structlog console adapter)
- SpiceDB AsyncClient
- Authorization adapter (one per process, owns the consistency tracker)

Usage:
    from relauthz.core.container import get_authorization, init_authorization

    # FastAPI lifespan startup
    await init_authorization()

    # Anywhere afterwards
    authz = get_authorization()
"""

from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

from relauthz.core.config import settings
from relauthz.core.result import Failure

if TYPE_CHECKING:
    from authzed.api.v1 import AsyncClient

    from relauthz.domain.protocols.logger_protocol import LoggerProtocol
    from relauthz.infrastructure.authorization.spicedb_adapter import SpiceDBAdapter


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    JSON rendering in testing/ci, colored console otherwise.
    """
    from relauthz.infrastructure.logging.console_adapter import ConsoleAdapter

    return ConsoleAdapter(use_json=settings.use_json_logs, level=settings.log_level)


@lru_cache()
def get_spicedb_client() -> "AsyncClient":
    """Return the SpiceDB AsyncClient singleton.

    Uses a plaintext channel when SPICEDB_INSECURE is set, TLS otherwise.
    The preshared key is sent as a bearer token in both cases.
    """
    from authzed.api.v1 import AsyncClient
    from grpcutil import bearer_token_credentials, insecure_bearer_token_credentials

    if settings.spicedb_insecure:
        credentials = insecure_bearer_token_credentials(settings.spicedb_preshared_key)
    else:
        credentials = bearer_token_credentials(settings.spicedb_preshared_key)

    return AsyncClient(settings.spicedb_endpoint, credentials)


@lru_cache()
def get_authorization() -> "SpiceDBAdapter":
    """Return the authorization adapter singleton.

    A single instance per process keeps one consistency tracker, so every
    request reads at least as fresh as the latest write this process made.
    """
    from relauthz.infrastructure.authorization.spicedb_adapter import SpiceDBAdapter

    return SpiceDBAdapter(
        client=get_spicedb_client(),
        logger=get_logger(),
        debug=settings.spicedb_debug,
    )


async def init_authorization() -> "SpiceDBAdapter":
    """Push the schema at application startup.

    MUST be called during startup, before the first check.

    Returns:
        The initialized authorization adapter.

    Raises:
        RuntimeError: If the schema cannot be written.
    """
    authz = get_authorization()

    schema = None
    if settings.spicedb_schema_path:
        schema = Path(settings.spicedb_schema_path).read_text(encoding="utf-8")

    result = await authz.write_schema(schema)
    if isinstance(result, Failure):
        raise RuntimeError(f"SpiceDB schema push failed: {result.error}")

    get_logger().info(
        "authorization_initialized",
        endpoint=settings.spicedb_endpoint,
        debug=settings.spicedb_debug,
    )
    return authz
