"""Immutable fluent builder shared by the replication components."""

import copy
import json
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

from couchclient.exceptions import ValidationError
from couchclient.models import AuthenticatedTarget, OAuthCredentials, PlainTarget
from couchclient.utils import as_list, assert_not_empty, build_model

if TYPE_CHECKING:
    from couchclient.client import CouchDbClient


class ReplicationBuilder:
    """
    Collects replication settings through chained setters.

    Builders never change in place: every setter returns a copy carrying
    the new value, so one builder can seed several independent requests.
    Only values that were explicitly set end up in the built model.
    """

    def __init__(self, client: 'CouchDbClient', fields: Optional[dict] = None):
        self._client = client
        self._fields = dict(fields or {})

    def _with(self, **changes: Any):
        clone = copy.copy(self)
        clone._fields = {**self._fields, **changes}
        return clone

    def source(self, source: str):
        return self._with(source=source)

    def target(self, target: str):
        return self._with(target=target)

    def continuous(self, continuous: bool):
        return self._with(continuous=continuous)

    def filter(self, filter_name: str):
        """Filter function as "designdoc/filtername"."""
        return self._with(filter=filter_name)

    def query_params(self, query_params: Union[str, Mapping[str, Any]]):
        """
        Parameters passed to the filter function.

        Args:
            query_params: Mapping, or a JSON object string
        """
        if isinstance(query_params, str):
            try:
                query_params = json.loads(query_params)
            except json.JSONDecodeError as e:
                raise ValidationError(f"query_params is not valid JSON: {e}", field_name='query_params') from e
        if not isinstance(query_params, Mapping):
            raise ValidationError("query_params must be a JSON object", field_name='query_params')
        return self._with(query_params=dict(query_params))

    def doc_ids(self, *doc_ids: str):
        """Restrict replication to these ids, given as arguments or one iterable."""
        return self._with(doc_ids=as_list(doc_ids))

    def proxy(self, proxy: str):
        return self._with(proxy=proxy)

    def create_target(self, create_target: bool):
        return self._with(create_target=create_target)

    def since_seq(self, since_seq: str):
        """Start from an update sequence instead of the last checkpoint."""
        return self._with(since_seq=since_seq)

    def target_oauth(self, consumer_secret: str, consumer_key: str, token_secret: str, token: str):
        """Authenticate against the target with OAuth 1.0 credentials."""
        return self._with(target_oauth=build_model(
            OAuthCredentials,
            consumer_secret=consumer_secret,
            consumer_key=consumer_key,
            token_secret=token_secret,
            token=token,
        ))

    def _model_fields(self) -> dict:
        """
        Validate source/target and resolve the target into its wire variant.

        Raises:
            ValidationError: If source or target is empty
        """
        fields = dict(self._fields)
        assert_not_empty(fields.get('source'), 'source')
        assert_not_empty(fields.get('target'), 'target')

        oauth = fields.pop('target_oauth', None)
        url = fields.pop('target')
        if oauth is not None:
            fields['target'] = build_model(AuthenticatedTarget, url=url, oauth=oauth)
        else:
            fields['target'] = build_model(PlainTarget, url=url)
        return fields
