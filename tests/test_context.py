"""Unit tests for database administration."""

import pytest

from couchclient.exceptions import NotFoundError, ValidationError


def test_create_db(client, fake_couch):
    """Test a missing database is created with PUT."""
    client.context().create_db('orders')

    assert 'orders' in fake_couch.dbs
    assert [r[0] for r in fake_couch.requests] == ['GET', 'PUT']


def test_create_db_with_shards(client, fake_couch):
    """Test shards are passed as the q parameter."""
    client.context().create_db('orders', shards=8)

    method, path, params, _ = fake_couch.requests[-1]
    assert method == 'PUT'
    assert path == '/orders'
    assert params == {'q': '8'}


def test_create_existing_db_is_noop(client, fake_couch):
    """Test an existing database is left alone."""
    fake_couch.dbs['orders'] = {'keep': {'_id': 'keep', '_rev': '1-a'}}

    client.context().create_db('orders')

    assert [r[0] for r in fake_couch.requests] == ['GET']
    assert 'keep' in fake_couch.dbs['orders']


def test_delete_db(client, fake_couch):
    """Test a database is deleted with the confirmation string."""
    fake_couch.dbs['orders'] = {}

    client.context().delete_db('orders', 'delete database')

    assert 'orders' not in fake_couch.dbs


def test_delete_db_requires_confirm(client, fake_couch):
    """Test a wrong confirmation string fails locally."""
    fake_couch.dbs['orders'] = {}

    with pytest.raises(ValidationError, match='Invalid confirm'):
        client.context().delete_db('orders', 'yes')

    assert 'orders' in fake_couch.dbs
    assert fake_couch.requests == []


def test_delete_missing_db(client):
    """Test deleting an unknown database raises NotFoundError."""
    with pytest.raises(NotFoundError):
        client.context().delete_db('nope', 'delete database')


def test_get_all_dbs(client):
    """Test listing databases."""
    assert client.context().get_all_dbs() == ['_replicator', 'couchclient']


def test_info(client, fake_couch):
    """Test info of the configured database."""
    fake_couch.dbs['couchclient']['a'] = {'_id': 'a', '_rev': '1-a'}

    info = client.context().info()

    assert info.db_name == 'couchclient'
    assert info.doc_count == 1
    assert info.update_seq == '7-abc'
    assert info.sizes['active'] == 80


def test_server_version(client):
    """Test server version from the welcome message."""
    assert client.context().server_version() == '3.3.3'


def test_compact_and_full_commit(client, fake_couch):
    """Test compaction and full commit POST to the configured database."""
    client.context().compact()
    client.context().ensure_full_commit()

    assert [(r[0], r[1]) for r in fake_couch.requests] == [
        ('POST', '/couchclient/_compact'),
        ('POST', '/couchclient/_ensure_full_commit'),
    ]


def test_uuids(client, fake_couch):
    """Test requesting server generated UUIDs."""
    uuids = client.context().uuids(3)

    assert uuids == ['uuid0', 'uuid1', 'uuid2']
    _, _, params, _ = fake_couch.requests[-1]
    assert params == {'count': '3'}


def test_db_updates(client, fake_couch):
    """Test database updates feed, with and without since."""
    updates = client.context().db_updates()

    assert updates.last_seq == '5-g1'
    assert updates.results[0].db_name == 'couchclient'
    assert updates.results[0].type == 'updated'
    assert fake_couch.requests[-1][2] == {}

    client.context().db_updates(since='now')
    assert fake_couch.requests[-1][2] == {'since': 'now'}
