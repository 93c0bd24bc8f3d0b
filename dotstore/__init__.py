"""
dotstore: a nested, dot-path document store on top of SQLite.

Keys are dot-delimited paths. The first segment picks a storage partition
(one table per root segment) holding a single JSON document; the rest of
the path addresses a node inside that document:
- put("config.db.host", "localhost") writes one leaf without touching siblings
- get("config.db") returns {"host": "localhost"}
- add("users", {...}) appends to an array, creating it on first use

Usage:
    from dotstore.core import DocumentStore, SQLiteBackingStore, get_default_db_path

    db_path = get_default_db_path(Path("."))
    with DocumentStore(SQLiteBackingStore(db_path)) as store:
        store.put("articles.local.cat", {"title": "Missing cat"})
        store.get("articles.local.cat.title")
"""

__version__ = "0.1.0"
