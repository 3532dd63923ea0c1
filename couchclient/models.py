"""Pydantic models for CouchDB request and response bodies."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


Seq = Union[str, int, None]


class OAuthCredentials(BaseModel):
    """OAuth 1.0 credentials used to authenticate against a replication target."""
    model_config = ConfigDict(frozen=True)

    consumer_secret: str
    consumer_key: str
    token_secret: str
    token: str


class PlainTarget(BaseModel):
    """Replication target given as a database name or URL."""
    model_config = ConfigDict(frozen=True)

    url: str

    def to_wire(self) -> str:
        return self.url


class AuthenticatedTarget(BaseModel):
    """Replication target that carries OAuth credentials."""
    model_config = ConfigDict(frozen=True)

    url: str
    oauth: OAuthCredentials

    def to_wire(self) -> dict:
        return {
            "url": self.url,
            "auth": {"oauth": self.oauth.model_dump()},
        }


Target = Union[PlainTarget, AuthenticatedTarget]

SERVER_FIELDS = {
    'replication_id',
    'replication_state',
    'replication_state_time',
    'replication_state_reason',
}


class ReplicationFields(BaseModel):
    """
    Fields shared by ad-hoc replication requests and replicator documents.

    Unset optional fields stay None and are dropped by to_json_dict(), so
    the server only ever sees what the caller asked for.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra='ignore')

    source: str
    target: Target
    continuous: Optional[bool] = None
    filter: Optional[str] = None
    query_params: Optional[Dict[str, Any]] = None
    doc_ids: Optional[List[str]] = None
    proxy: Optional[str] = None
    since_seq: Optional[str] = None
    create_target: Optional[bool] = None

    @field_validator('source', mode='before')
    @classmethod
    def parse_source(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return value.get('url')
        return value

    @field_validator('target', mode='before')
    @classmethod
    def parse_target(cls, value: Any) -> Any:
        if isinstance(value, str):
            return PlainTarget(url=value)
        if isinstance(value, dict):
            if 'oauth' in value:
                return AuthenticatedTarget.model_validate(value)
            oauth = (value.get('auth') or {}).get('oauth')
            if oauth is not None:
                return AuthenticatedTarget(url=value.get('url'), oauth=oauth)
            return PlainTarget(url=value.get('url'))
        return value

    @field_validator('since_seq', mode='before')
    @classmethod
    def seq_as_token(cls, value: Any) -> Any:
        # Sequence identifiers are opaque; older servers send integers.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_serializer('target')
    def serialize_target(self, target: Target) -> Union[str, dict]:
        return target.to_wire()

    @property
    def target_url(self) -> str:
        return self.target.url

    def to_json_dict(self) -> dict:
        """Serialize to the wire body, omitting every unset field."""
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)

    def to_log_dict(self) -> dict:
        """Wire body with the target credentials stripped."""
        body = self.to_json_dict()
        if isinstance(body.get('target'), dict):
            body['target'] = {'url': body['target']['url']}
        return body


class ReplicationConfig(ReplicationFields):
    """Body of a POST /_replicate request."""
    cancel: Optional[bool] = None


class UserCtx(BaseModel):
    """User context a persistent replication runs as."""
    model_config = ConfigDict(frozen=True)

    name: str
    roles: List[str] = Field(default_factory=list)


class ReplicatorDocument(ReplicationFields):
    """A document in the replicator database."""

    id: Optional[str] = Field(default=None, alias='_id')
    revision: Optional[str] = Field(default=None, alias='_rev')
    user_ctx: Optional[UserCtx] = None
    worker_processes: Optional[int] = None
    worker_batch_size: Optional[int] = None
    http_connections: Optional[int] = None
    connection_timeout: Optional[int] = None
    retries_per_request: Optional[int] = None

    # Maintained by the server, never written back.
    replication_id: Optional[str] = Field(default=None, alias='_replication_id')
    replication_state: Optional[str] = Field(default=None, alias='_replication_state')
    replication_state_time: Union[str, int, None] = Field(default=None, alias='_replication_state_time')
    replication_state_reason: Optional[str] = Field(default=None, alias='_replication_state_reason')

    def to_json_dict(self) -> dict:
        return self.model_dump(
            mode='json',
            by_alias=True,
            exclude_none=True,
            exclude=SERVER_FIELDS,
        )


class ReplicationHistory(BaseModel):
    """One entry of a replication session history."""
    model_config = ConfigDict(extra='ignore')

    session_id: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    start_last_seq: Seq = None
    end_last_seq: Seq = None
    recorded_seq: Seq = None
    missing_checked: Optional[int] = None
    missing_found: Optional[int] = None
    docs_read: Optional[int] = None
    docs_written: Optional[int] = None
    doc_write_failures: Optional[int] = None


class ReplicationResult(BaseModel):
    """Response body of POST /_replicate."""
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    ok: Optional[bool] = None
    session_id: Optional[str] = None
    source_last_seq: Seq = None
    no_changes: Optional[bool] = None
    local_id: Optional[str] = Field(default=None, alias='_local_id')
    history: List[ReplicationHistory] = Field(default_factory=list)


class Response(BaseModel):
    """Generic write response: {ok, id, rev} or {error, reason}."""
    model_config = ConfigDict(extra='ignore')

    ok: Optional[bool] = None
    id: Optional[str] = None
    rev: Optional[str] = None
    error: Optional[str] = None
    reason: Optional[str] = None


class DbInfo(BaseModel):
    """Response body of GET /{db}."""
    model_config = ConfigDict(extra='ignore')

    db_name: str
    doc_count: Optional[int] = None
    doc_del_count: Optional[int] = None
    update_seq: Seq = None
    purge_seq: Seq = None
    compact_running: Optional[bool] = None
    disk_size: Optional[int] = None
    data_size: Optional[int] = None
    sizes: Optional[Dict[str, int]] = None
    instance_start_time: Optional[str] = None


class DbUpdatesResult(BaseModel):
    """A single database event from GET /_db_updates."""
    model_config = ConfigDict(extra='ignore')

    db_name: str
    type: str
    seq: Seq = None


class DbUpdates(BaseModel):
    """Response body of GET /_db_updates."""
    model_config = ConfigDict(extra='ignore')

    results: List[DbUpdatesResult] = Field(default_factory=list)
    last_seq: Seq = None
