"""Database administration: create, delete, list and maintain databases."""

from typing import TYPE_CHECKING, List, Optional

from couchclient.constants import DELETE_DB_CONFIRM
from couchclient.exceptions import NotFoundError, ResponseParseError, ValidationError
from couchclient.logging_config import get_logger
from couchclient.models import DbInfo, DbUpdates
from couchclient.utils import assert_not_empty, db_path

if TYPE_CHECKING:
    from couchclient.client import CouchDbClient

logger = get_logger(__name__)


class CouchDbContext:
    """Server and database level operations."""

    def __init__(self, client: 'CouchDbClient'):
        self._client = client

    def create_db(self, db_name: str, shards: int = 0) -> None:
        """
        Create a database unless it already exists.

        Args:
            db_name: Database name
            shards: Number of range partitions; 0 keeps the server default
        """
        assert_not_empty(db_name, 'db_name')
        path = db_path(db_name)
        try:
            self._client.request_json('GET', path)
            logger.debug(f"Database already exists: '{db_name}'")
            return
        except NotFoundError:
            pass

        params = {'q': shards} if shards > 0 else None
        self._client.request_json('PUT', path, params=params)
        logger.info(f"Created Database: '{db_name}'")

    def delete_db(self, db_name: str, confirm: str) -> None:
        """
        Delete a database.

        Args:
            db_name: Database name
            confirm: Must be the literal string "delete database"

        Raises:
            ValidationError: If the confirmation string is wrong
            NotFoundError: If the database does not exist
        """
        assert_not_empty(db_name, 'db_name')
        if confirm != DELETE_DB_CONFIRM:
            raise ValidationError("Invalid confirm!", field_name='confirm')
        self._client.request_json('DELETE', db_path(db_name))
        logger.info(f"Deleted Database: '{db_name}'")

    def get_all_dbs(self) -> List[str]:
        """All database names on the server."""
        data = self._client.request_json('GET', '/_all_dbs')
        if not isinstance(data, list):
            raise ResponseParseError("_all_dbs response is not a list")
        return data

    def info(self) -> DbInfo:
        """Information about the configured database."""
        return self._client.request_model('GET', db_path(self._client.db_name), DbInfo)

    def server_version(self) -> str:
        """CouchDB server version string."""
        data = self._client.request_json('GET', '/')
        if not isinstance(data, dict) or 'version' not in data:
            raise ResponseParseError("Server welcome response has no version")
        return data['version']

    def compact(self) -> None:
        """Trigger compaction of the configured database."""
        self._client.request_json('POST', f"{db_path(self._client.db_name)}/_compact", json={})

    def ensure_full_commit(self) -> None:
        """Ask the server to commit recent changes of the configured database to disk."""
        self._client.request_json('POST', f"{db_path(self._client.db_name)}/_ensure_full_commit", json={})

    def uuids(self, count: int) -> List[str]:
        """
        Request server generated UUIDs.

        Args:
            count: Number of UUIDs

        Returns:
            List of UUID strings
        """
        data = self._client.request_json('GET', '/_uuids', params={'count': count})
        if not isinstance(data, dict) or not isinstance(data.get('uuids'), list):
            raise ResponseParseError("_uuids response has no uuids list")
        return data['uuids']

    def db_updates(self, since: Optional[str] = None) -> DbUpdates:
        """
        Database events across the server.

        Args:
            since: Return only events after this sequence; omitted when empty
        """
        params = {'since': since} if since else None
        return self._client.request_model('GET', '/_db_updates', DbUpdates, params=params)
