"""HTTP client for communicating with a CouchDB server."""

import uuid
from typing import Any, Callable, Optional, Type

import httpx

from couchclient.config import Config
from couchclient.constants import REQUEST_ID_HEADER
from couchclient.context import CouchDbContext
from couchclient.exceptions import (
    ConflictError,
    CouchDbException,
    NotFoundError,
    PreconditionFailedError,
    ResponseParseError,
    TransportError,
)
from couchclient.logging_config import get_logger
from couchclient.models import ReplicationConfig, Response
from couchclient.replication import Replication
from couchclient.replicator import Replicator
from couchclient.utils import ModelT, assert_not_empty, doc_path, parse_model

logger = get_logger(__name__)


def _uuid_hex() -> str:
    return uuid.uuid4().hex


class CouchDbClient:
    """HTTP client for the CouchDB API with error mapping."""

    STATUS_ERRORS = {
        404: NotFoundError,
        409: ConflictError,
        412: PreconditionFailedError,
    }

    STATUS_MESSAGES = {
        400: 'Bad request',
        401: 'Not authenticated',
        403: 'Access forbidden',
        404: 'Not found',
        405: 'Method not allowed',
        409: 'Document update conflict',
        412: 'Precondition failed',
        415: 'Unsupported content type',
        500: 'Server error',
        503: 'Service unavailable',
    }

    def __init__(
        self,
        config: Config,
        id_generator: Optional[Callable[[], str]] = None,
    ):
        """
        Initialize CouchDB client.

        Args:
            config: Configuration instance
            id_generator: Callable producing ids for documents saved without one
        """
        self.config = config
        self.session = httpx.Client(
            base_url=config.get_base_url(),
            timeout=config.get_timeout(),
            auth=config.get_credentials(),
        )
        self.id_generator = id_generator or _uuid_hex
        self.request_id = None
        logger.info(f"Initialized CouchDbClient [base_url={config.get_base_url()}, db={self.db_name}]")

        if config.create_db_if_not_exist():
            try:
                self.context().create_db(self.db_name)
            except CouchDbException:
                self.session.close()
                raise

    @property
    def db_name(self) -> str:
        return self.config.get_db_name()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """
        Make an HTTP request and map failures to client exceptions.

        Args:
            method: HTTP method (GET, PUT, POST, DELETE, HEAD)
            path: URL path relative to the server base URL
            **kwargs: Additional arguments to pass to httpx request

        Returns:
            HTTP response object with a status below 400

        Raises:
            TransportError: If the server cannot be reached or times out
            NotFoundError, ConflictError, PreconditionFailedError, CouchDbException:
                If the server answers with an error status
        """
        self.request_id = str(uuid.uuid4())
        headers = dict(kwargs.pop('headers', None) or {})
        headers[REQUEST_ID_HEADER] = self.request_id

        logger.debug(f"Making request: {method} {path} [request_id={self.request_id}]")

        try:
            response = self.session.request(method, path, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Timeout: {method} {path} error={e} [request_id={self.request_id}]")
            raise TransportError(f"Request timed out: {method} {path}") from e
        except httpx.ConnectError as e:
            logger.error(f"Connection failed: {method} {path} error={e} [request_id={self.request_id}]")
            raise TransportError(
                f"Cannot connect to CouchDB server at {self.config.get_base_url()}. Is it running?"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"HTTP error: {method} {path} error={e} [request_id={self.request_id}]")
            raise TransportError(f"HTTP error during {method} {path}: {e}") from e

        logger.debug(
            f"Response received: {method} {path} status={response.status_code} [request_id={self.request_id}]"
        )

        if response.status_code >= 400:
            logger.warning(
                f"Error response: {method} {path} status={response.status_code} [request_id={self.request_id}]"
            )
            raise self._error_for(response)

        return response

    def _error_for(self, response: httpx.Response) -> CouchDbException:
        """
        Map an error response to the matching exception.

        Args:
            response: HTTP response object with status >= 400

        Returns:
            Exception instance carrying the CouchDB error and reason
        """
        error = None
        reason = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            error = body.get('error')
            reason = body.get('reason')
        if reason is None and response.text:
            reason = response.text

        status = response.status_code
        message = self.STATUS_MESSAGES.get(status, f'HTTP {status}')
        if error:
            message = f"{message}: {error}"
        if reason:
            message = f"{message} ({reason})"

        exc_cls = self.STATUS_ERRORS.get(status, CouchDbException)
        return exc_cls(message, status_code=status, error=error, reason=reason)

    def request_json(self, method: str, path: str, **kwargs) -> Any:
        """
        Make a request and decode the JSON response body.

        Raises:
            ResponseParseError: If the body is not valid JSON
        """
        response = self._request(method, path, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise ResponseParseError(
                f"Invalid JSON in response to {method} {path} [request_id={self.request_id}]"
            ) from e

    def request_model(self, method: str, path: str, model_cls: Type[ModelT], **kwargs) -> ModelT:
        """Make a request and validate the JSON response into model_cls."""
        return parse_model(self.request_json(method, path, **kwargs), model_cls)

    # Documents in the configured database

    def find(self, doc_id: str, rev: Optional[str] = None) -> dict:
        """
        Fetch a document by id.

        Args:
            doc_id: Document ID
            rev: Optional revision; latest if omitted

        Returns:
            Document as a dictionary
        """
        assert_not_empty(doc_id, 'doc_id')
        params = {'rev': rev} if rev else None
        return self.request_json('GET', doc_path(self.db_name, doc_id), params=params)

    def contains(self, doc_id: str) -> bool:
        """
        Check whether a document exists.

        Args:
            doc_id: Document ID

        Returns:
            True if the document exists
        """
        assert_not_empty(doc_id, 'doc_id')
        try:
            self._request('HEAD', doc_path(self.db_name, doc_id))
        except NotFoundError:
            return False
        return True

    def save(self, doc: dict) -> Response:
        """
        Save a new document, generating an id if it has none.

        Args:
            doc: Document body; '_rev' must be absent for new documents

        Returns:
            Response with the assigned id and revision
        """
        doc_id = doc.get('_id') or self.id_generator()
        body = {**doc, '_id': doc_id}
        return self.request_model('PUT', doc_path(self.db_name, doc_id), Response, json=body)

    def update(self, doc: dict) -> Response:
        """
        Update an existing document.

        Args:
            doc: Document body including '_id' and '_rev'

        Returns:
            Response with the new revision
        """
        assert_not_empty(doc.get('_id'), 'doc_id')
        assert_not_empty(doc.get('_rev'), 'doc_rev')
        return self.request_model('PUT', doc_path(self.db_name, doc['_id']), Response, json=doc)

    def remove(self, doc_id: str, rev: str) -> Response:
        """
        Delete a document.

        Args:
            doc_id: Document ID
            rev: Current revision of the document

        Returns:
            Response with the deletion revision
        """
        assert_not_empty(doc_id, 'doc_id')
        assert_not_empty(rev, 'doc_rev')
        return self.request_model('DELETE', doc_path(self.db_name, doc_id), Response, params={'rev': rev})

    # Components

    def context(self) -> CouchDbContext:
        """Database administration API."""
        return CouchDbContext(self)

    def replication(self, config: Optional[ReplicationConfig] = None) -> Replication:
        """
        Ad-hoc replication builder.

        Args:
            config: Optional existing configuration to start from
        """
        if config is not None:
            return Replication.from_config(self, config)
        return Replication(self)

    def replicator(self) -> Replicator:
        """Replicator database builder."""
        return Replicator(self)

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self) -> 'CouchDbClient':
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
