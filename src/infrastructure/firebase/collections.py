"""Firestore collection names.

Firestore has no DDL or migrations; a collection exists as soon as its first
document is written. These constants are the single source of truth for
collection names shared with the frontend.
"""

COLLECTION_USERS = "users"
