"""
Ad-hoc replication through POST /_replicate.

Example:
    >>> result = (
    ...     client.replication()
    ...     .source("source-db")
    ...     .target("target-db")
    ...     .create_target(True)
    ...     .filter("example/filter1")
    ...     .trigger()
    ... )
    >>> result.history[0].docs_written

A continuous request returns as soon as the server has accepted it; the
job then runs in the background. Sending the same source, target and
continuous flag with cancel(True) stops it.
"""

import json
from typing import TYPE_CHECKING

from couchclient.builder import ReplicationBuilder
from couchclient.logging_config import get_logger
from couchclient.models import AuthenticatedTarget, ReplicationConfig, ReplicationResult
from couchclient.utils import build_model

if TYPE_CHECKING:
    from couchclient.client import CouchDbClient

logger = get_logger(__name__)

REPLICATE_PATH = '/_replicate'


class Replication(ReplicationBuilder):
    """Builder for one-shot or continuous replication requests."""

    @classmethod
    def from_config(cls, client: 'CouchDbClient', config: ReplicationConfig) -> 'Replication':
        """
        Start a builder from an existing configuration.

        Args:
            client: Client used to send the request
            config: Configuration whose set fields are copied
        """
        fields = {
            name: getattr(config, name)
            for name in type(config).model_fields
            if getattr(config, name) is not None
        }
        target = fields.pop('target')
        fields['target'] = target.url
        if isinstance(target, AuthenticatedTarget):
            fields['target_oauth'] = target.oauth
        return cls(client, fields)

    def cancel(self, cancel: bool) -> 'Replication':
        """Cancel the running replication matching this request."""
        return self._with(cancel=cancel)

    def build(self) -> ReplicationConfig:
        """
        Build the request body model.

        Raises:
            ValidationError: If source or target is empty, or a value is invalid
        """
        return build_model(ReplicationConfig, **self._model_fields())

    def trigger(self) -> ReplicationResult:
        """
        Send the replication request.

        Returns:
            ReplicationResult with the session history

        Raises:
            ValidationError: If source or target is empty
        """
        config = self.build()
        body = config.to_json_dict()
        logger.debug(f"Replication request: {json.dumps(config.to_log_dict())}")

        result = self._client.request_model('POST', REPLICATE_PATH, ReplicationResult, json=body)

        logger.info(
            f"Replication triggered: {config.source} -> {config.target_url} "
            f"[ok={result.ok}, session_id={result.session_id}]"
        )
        return result
