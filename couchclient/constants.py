"""CouchDB client constants."""

DEFAULT_REPLICATOR_DB = "_replicator"

DESIGN_DOC_PREFIX = "_design/"

DELETE_DB_CONFIRM = "delete database"

REQUEST_ID_HEADER = "X-Request-ID"
