"""CouchDB HTTP client with ad-hoc and persistent replication support."""

__version__ = "0.1.0"

from couchclient.client import CouchDbClient
from couchclient.config import Config
from couchclient.context import CouchDbContext
from couchclient.exceptions import (
    ConflictError,
    CouchDbException,
    NotFoundError,
    PreconditionFailedError,
    ResponseParseError,
    TransportError,
    ValidationError,
)
from couchclient.logging_config import get_logger, setup_logging
from couchclient.models import (
    AuthenticatedTarget,
    DbInfo,
    DbUpdates,
    DbUpdatesResult,
    OAuthCredentials,
    PlainTarget,
    ReplicationConfig,
    ReplicationHistory,
    ReplicationResult,
    ReplicatorDocument,
    Response,
    UserCtx,
)
from couchclient.replication import Replication
from couchclient.replicator import Replicator

__all__ = [
    "__version__",
    "CouchDbClient",
    "Config",
    "CouchDbContext",
    "Replication",
    "Replicator",
    "AuthenticatedTarget",
    "DbInfo",
    "DbUpdates",
    "DbUpdatesResult",
    "OAuthCredentials",
    "PlainTarget",
    "ReplicationConfig",
    "ReplicationHistory",
    "ReplicationResult",
    "ReplicatorDocument",
    "Response",
    "UserCtx",
    "CouchDbException",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "PreconditionFailedError",
    "TransportError",
    "ResponseParseError",
    "setup_logging",
    "get_logger",
]
