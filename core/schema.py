SCHEMA_SQL = r"""
-- Key-value surface: one JSON document per entity kind
CREATE TABLE IF NOT EXISTS kv (
  key TEXT PRIMARY KEY,
  value TEXT NOT NULL,                  -- JSON-encoded
  updated_at TEXT NOT NULL              -- ISO datetime
);
"""
