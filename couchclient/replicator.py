"""
Persistent replications through the replicator database.

A replication starts when its document is saved and stops when the
document is removed; the server reports progress back into the document
(_replication_state and friends).

Example:
    >>> response = (
    ...     client.replicator()
    ...     .source("source-db")
    ...     .target("target-db")
    ...     .continuous(True)
    ...     .create_target(True)
    ...     .replicator_db("replicator-db-name")  # optional, defaults to _replicator
    ...     .doc_id("doc-id")                     # optional, generated if unset
    ...     .save()
    ... )
    >>> doc = client.replicator().find("doc-id")
    >>> client.replicator().remove("doc-id", doc.revision)
"""

import copy
import json
from typing import TYPE_CHECKING, List, Optional

from couchclient.builder import ReplicationBuilder
from couchclient.constants import DEFAULT_REPLICATOR_DB, DESIGN_DOC_PREFIX
from couchclient.exceptions import ResponseParseError
from couchclient.logging_config import get_logger
from couchclient.models import ReplicatorDocument, Response, UserCtx
from couchclient.utils import as_list, assert_not_empty, build_model, db_path, doc_path, parse_model

if TYPE_CHECKING:
    from couchclient.client import CouchDbClient

logger = get_logger(__name__)


class Replicator(ReplicationBuilder):
    """Builder and manager for replicator database documents."""

    def __init__(
        self,
        client: 'CouchDbClient',
        fields: Optional[dict] = None,
        replicator_db: str = DEFAULT_REPLICATOR_DB,
    ):
        super().__init__(client, fields)
        self._replicator_db = replicator_db
        self._db_path = db_path(replicator_db)

    def replicator_db(self, name: str) -> 'Replicator':
        """
        Use another database as the replicator database.

        Args:
            name: Database name
        """
        assert_not_empty(name, 'replicator_db')
        clone = copy.copy(self)
        clone._replicator_db = name
        clone._db_path = db_path(name)
        return clone

    def doc_id(self, doc_id: str) -> 'Replicator':
        return self._with(id=doc_id)

    def doc_rev(self, doc_rev: str) -> 'Replicator':
        return self._with(revision=doc_rev)

    def worker_processes(self, worker_processes: int) -> 'Replicator':
        return self._with(worker_processes=worker_processes)

    def worker_batch_size(self, worker_batch_size: int) -> 'Replicator':
        return self._with(worker_batch_size=worker_batch_size)

    def http_connections(self, http_connections: int) -> 'Replicator':
        return self._with(http_connections=http_connections)

    def connection_timeout(self, connection_timeout: int) -> 'Replicator':
        """Connection timeout in milliseconds."""
        return self._with(connection_timeout=connection_timeout)

    def retries_per_request(self, retries_per_request: int) -> 'Replicator':
        return self._with(retries_per_request=retries_per_request)

    def user_ctx_name(self, name: str) -> 'Replicator':
        return self._with(user_ctx_name=name)

    def user_ctx_roles(self, *roles: str) -> 'Replicator':
        """Roles of the user context, given as arguments or one iterable."""
        return self._with(user_ctx_roles=as_list(roles))

    def build(self) -> ReplicatorDocument:
        """
        Build the replicator document.

        Raises:
            ValidationError: If source or target is empty, or a value is invalid
        """
        fields = self._model_fields()
        name = fields.pop('user_ctx_name', None)
        roles = fields.pop('user_ctx_roles', None) or []
        if name is not None:
            fields['user_ctx'] = build_model(UserCtx, name=name, roles=roles)
        return build_model(ReplicatorDocument, **fields)

    def save(self) -> Response:
        """
        Store the document, which starts the replication.

        Returns:
            Response with the document id and revision

        Raises:
            ValidationError: If source or target is empty
            ConflictError: If a stale revision is given for an existing document
        """
        doc = self.build()
        doc_id = doc.id or self._client.id_generator()
        body = doc.to_json_dict()
        body['_id'] = doc_id
        logger.debug(f"Replicator document {self._replicator_db}/{doc_id}: {json.dumps(doc.to_log_dict())}")

        response = self._client.request_model(
            'PUT', doc_path(self._replicator_db, doc_id), Response, json=body
        )
        logger.info(f"Saved replicator document {self._replicator_db}/{response.id} [rev={response.rev}]")
        return response

    def find(self, doc_id: Optional[str] = None, rev: Optional[str] = None) -> ReplicatorDocument:
        """
        Fetch a replicator document.

        Args:
            doc_id: Document ID; defaults to the one set with doc_id()
            rev: Revision; defaults to the one set with doc_rev(), else latest

        Raises:
            ValidationError: If no document id is available
            NotFoundError: If the document does not exist
        """
        doc_id = doc_id or self._fields.get('id')
        rev = rev or self._fields.get('revision')
        assert_not_empty(doc_id, 'doc_id')

        params = {'rev': rev} if rev else None
        return self._client.request_model(
            'GET', doc_path(self._replicator_db, doc_id), ReplicatorDocument, params=params
        )

    def find_all(self) -> List[ReplicatorDocument]:
        """
        Fetch every replication document, skipping design documents.

        Returns:
            List of replicator documents
        """
        data = self._client.request_json(
            'GET', f"{self._db_path}/_all_docs", params={'include_docs': 'true'}
        )
        rows = data.get('rows') if isinstance(data, dict) else None
        if not isinstance(rows, list):
            raise ResponseParseError(f"_all_docs response from {self._replicator_db} has no rows")

        docs = []
        for row in rows:
            doc = row.get('doc')
            if not doc:
                continue
            if doc.get('_id', '').startswith(DESIGN_DOC_PREFIX):
                continue
            docs.append(parse_model(doc, ReplicatorDocument))
        return docs

    def remove(self, doc_id: Optional[str] = None, rev: Optional[str] = None) -> Response:
        """
        Delete a replicator document, which cancels its replication.

        Args:
            doc_id: Document ID; defaults to the one set with doc_id()
            rev: Current revision; defaults to the one set with doc_rev()

        Raises:
            ValidationError: If id or revision is missing
            ConflictError: If the revision is not the current one
        """
        doc_id = doc_id or self._fields.get('id')
        rev = rev or self._fields.get('revision')
        assert_not_empty(doc_id, 'doc_id')
        assert_not_empty(rev, 'doc_rev')

        response = self._client.request_model(
            'DELETE', doc_path(self._replicator_db, doc_id), Response, params={'rev': rev}
        )
        logger.info(f"Removed replicator document {self._replicator_db}/{doc_id}")
        return response
