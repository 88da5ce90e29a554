import os
import sys

import psycopg
from psycopg import sql

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)) + '/..')

from settings import settings
from trigger_events import install_sql

# id is an opaque string: comparing it with any caller-supplied value
# simply finds no row instead of failing a uuid cast.
DDL = sql.SQL('''
CREATE TABLE IF NOT EXISTS {table} (
    id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
    title TEXT,
    description TEXT,
    date TIMESTAMP WITH TIME ZONE,
    location TEXT,
    organizer TEXT,
    event_type TEXT,
    updated_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT now()
);

CREATE INDEX IF NOT EXISTS {type_idx} ON {table} (event_type, date);
CREATE INDEX IF NOT EXISTS {date_idx} ON {table} (date);
''').format(
    table=sql.Identifier(settings.events_table),
    type_idx=sql.Identifier(f"idx_{settings.events_table}_type_date"),
    date_idx=sql.Identifier(f"idx_{settings.events_table}_date"),
)

print('Connecting to', settings.db_url)
with psycopg.connect(settings.db_url, connect_timeout=settings.connect_timeout) as conn:
    with conn.cursor() as cur:
        cur.execute(DDL)
        cur.execute(install_sql())
    conn.commit()
print('DDL applied, update trigger installed on', settings.events_table)
