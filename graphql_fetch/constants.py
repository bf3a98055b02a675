"""
Header names and media types used on the wire.
"""

ACCEPT_HEADER = "Accept"
CONTENT_TYPE_HEADER = "Content-Type"

CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_GQL = "application/graphql-response+json"

# Preference order advertised when the caller sets no Accept header
DEFAULT_ACCEPT = f"{CONTENT_TYPE_GQL}, {CONTENT_TYPE_JSON}"
