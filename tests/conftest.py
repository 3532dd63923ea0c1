"""Shared pytest fixtures for all tests."""

import itertools
import json
from urllib.parse import unquote

import httpx
import pytest

from couchclient.client import CouchDbClient
from couchclient.config import Config


class FakeCouch:
    """
    In-memory CouchDB speaking just enough of the HTTP API for the client.

    Documents live in self.dbs[db_name][doc_id]; every request is recorded
    in self.requests for path and body assertions.
    """

    def __init__(self):
        self.dbs = {'_replicator': {}, 'couchclient': {}}
        self.requests = []
        self.replicate_response = {
            'ok': True,
            'session_id': 'sess-1',
            'source_last_seq': '12-abc',
            'history': [
                {
                    'session_id': 'sess-1',
                    'start_last_seq': '0',
                    'end_last_seq': '12-abc',
                    'recorded_seq': '12-abc',
                    'missing_checked': 12,
                    'missing_found': 12,
                    'docs_read': 12,
                    'docs_written': 12,
                    'doc_write_failures': 0,
                    'start_time': 'Mon, 19 Oct 2026 08:00:00 GMT',
                    'end_time': 'Mon, 19 Oct 2026 08:00:01 GMT',
                }
            ],
        }
        self._revs = itertools.count(1)

    @staticmethod
    def _error(status, error, reason):
        return httpx.Response(status, json={'error': error, 'reason': reason})

    def _next_rev(self, doc):
        current = doc.get('_rev', '0-x') if doc else '0-x'
        generation = int(current.split('-', 1)[0]) + 1
        return f"{generation}-r{next(self._revs)}"

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, request.url.path, dict(request.url.params), body))

        parts = [unquote(p) for p in request.url.raw_path.decode().split('?')[0].split('/') if p]
        params = request.url.params

        if not parts:
            return httpx.Response(200, json={'couchdb': 'Welcome', 'version': '3.3.3'})

        head = parts[0]
        if head == '_replicate' and request.method == 'POST':
            return httpx.Response(200, json=self.replicate_response)
        if head == '_all_dbs':
            return httpx.Response(200, json=sorted(self.dbs))
        if head == '_uuids':
            count = int(params.get('count', 1))
            return httpx.Response(200, json={'uuids': [f"uuid{i}" for i in range(count)]})
        if head == '_db_updates':
            return httpx.Response(200, json={
                'results': [{'db_name': 'couchclient', 'type': 'updated', 'seq': '5-g1'}],
                'last_seq': '5-g1',
            })

        db_name = head
        if len(parts) == 1:
            return self._handle_db(request, db_name)
        if db_name not in self.dbs:
            return self._error(404, 'not_found', 'Database does not exist.')
        db = self.dbs[db_name]

        if len(parts) == 2 and parts[1] in ('_compact', '_ensure_full_commit'):
            return httpx.Response(202 if parts[1] == '_compact' else 201, json={'ok': True})
        if len(parts) == 2 and parts[1] == '_all_docs':
            rows = []
            for doc_id in sorted(db):
                row = {'id': doc_id, 'key': doc_id, 'value': {'rev': db[doc_id]['_rev']}}
                if params.get('include_docs') == 'true':
                    row['doc'] = db[doc_id]
                rows.append(row)
            return httpx.Response(200, json={'total_rows': len(rows), 'offset': 0, 'rows': rows})

        doc_id = '/'.join(parts[1:])
        return self._handle_doc(request, db, doc_id, body)

    def _handle_db(self, request, db_name):
        if request.method in ('GET', 'HEAD'):
            if db_name not in self.dbs:
                return self._error(404, 'not_found', 'Database does not exist.')
            return httpx.Response(200, json={
                'db_name': db_name,
                'doc_count': len(self.dbs[db_name]),
                'doc_del_count': 0,
                'update_seq': '7-abc',
                'purge_seq': 0,
                'compact_running': False,
                'sizes': {'file': 100, 'external': 50, 'active': 80},
                'instance_start_time': '0',
            })
        if request.method == 'PUT':
            if db_name in self.dbs:
                return self._error(412, 'file_exists', 'The database could not be created, the file already exists.')
            self.dbs[db_name] = {}
            return httpx.Response(201, json={'ok': True})
        if request.method == 'DELETE':
            if db_name not in self.dbs:
                return self._error(404, 'not_found', 'Database does not exist.')
            del self.dbs[db_name]
            return httpx.Response(200, json={'ok': True})
        return self._error(405, 'method_not_allowed', 'Only GET,HEAD,PUT,DELETE allowed')

    def _handle_doc(self, request, db, doc_id, body):
        existing = db.get(doc_id)
        rev = request.url.params.get('rev')

        if request.method in ('GET', 'HEAD'):
            if existing is None or (rev and rev != existing['_rev']):
                return self._error(404, 'not_found', 'missing')
            return httpx.Response(200, json=existing)

        if request.method == 'PUT':
            given_rev = body.get('_rev')
            if existing is not None and given_rev != existing['_rev']:
                return self._error(409, 'conflict', 'Document update conflict.')
            if existing is None and given_rev:
                return self._error(409, 'conflict', 'Document update conflict.')
            new_rev = self._next_rev(existing)
            db[doc_id] = {**body, '_id': doc_id, '_rev': new_rev}
            return httpx.Response(201, json={'ok': True, 'id': doc_id, 'rev': new_rev})

        if request.method == 'DELETE':
            if existing is None:
                return self._error(404, 'not_found', 'missing')
            if rev != existing['_rev']:
                return self._error(409, 'conflict', 'Document update conflict.')
            new_rev = self._next_rev(existing)
            del db[doc_id]
            return httpx.Response(200, json={'ok': True, 'id': doc_id, 'rev': new_rev})

        return self._error(405, 'method_not_allowed', 'Only GET,HEAD,PUT,DELETE allowed')


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .couchclient directory
    """
    config_dir = tmp_path / '.couchclient'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Args:
        temp_config_dir: Temporary config directory fixture

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json', db_name='couchclient')


@pytest.fixture
def fake_couch():
    """In-memory CouchDB server."""
    return FakeCouch()


@pytest.fixture
def client(temp_config, fake_couch):
    """Create CouchDbClient wired to the fake server with deterministic ids."""
    ids = (f"doc{i}" for i in itertools.count(1))
    couch = CouchDbClient(temp_config, id_generator=lambda: next(ids))
    couch.session = httpx.Client(transport=httpx.MockTransport(fake_couch.handler), base_url='http://test')
    yield couch
    couch.close()
