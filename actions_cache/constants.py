"""Wire constants for the artifact cache API."""

API_PATH = "_apis/artifactcache/"
ACCEPT = "application/json;api-version=6.0-preview.1"
USER_AGENT = "actions-cache-python/0.1.0"

# Identifies the version namespace entries are stored under. Changing either
# value orphans every entry already written by compatible clients.
VERSION_CLIENT_NAME = "go-actionscache"
VERSION_CLIENT_VERSION = "1.0"
