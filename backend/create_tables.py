import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from sqlalchemy import text
from searchpulse.db import engine, Base
from searchpulse.models import *

# Used by SupabaseMetricsRepository.upsert_increment (METRICS_ATOMIC_UPSERT=true).
# Needs the unique index from add_metrics_unique_index.py.
INCREMENT_FUNCTION_SQL = """
CREATE OR REPLACE FUNCTION increment_search_count(
    p_search_term text,
    p_movie_id integer,
    p_poster_url text
)
RETURNS SETOF metrics
LANGUAGE sql
AS $$
    INSERT INTO metrics ("searchTerm", count, movie_id, poster_url)
    VALUES (p_search_term, 1, p_movie_id, p_poster_url)
    ON CONFLICT ("searchTerm") DO UPDATE SET count = metrics.count + 1
    RETURNING *;
$$;
"""

def main():
    """Create the metrics table and the increment function"""
    Base.metadata.create_all(bind=engine)
    print("✅ Tables created successfully.")

    if engine.dialect.name == "postgresql":
        with engine.connect() as conn:
            conn.execute(text(INCREMENT_FUNCTION_SQL))
            conn.commit()
        print("✅ increment_search_count function created.")

if __name__ == "__main__":
    main()
