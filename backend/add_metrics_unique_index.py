import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from searchpulse.db import engine
from sqlalchemy import text

def add_metrics_unique_index():
    """Merge duplicate search terms and make searchTerm unique (atomic upsert mode)"""
    try:
        with engine.connect() as conn:
            # Keep the oldest row per term, carrying over the summed count
            merged = conn.execute(text("""
                WITH totals AS (
                    SELECT "searchTerm", MIN(id) AS keep_id, SUM(count) AS total
                    FROM metrics
                    GROUP BY "searchTerm"
                    HAVING COUNT(*) > 1
                )
                UPDATE metrics m
                SET count = t.total
                FROM totals t
                WHERE m.id = t.keep_id
            """))
            print(f"ℹ️ {merged.rowcount} duplicated search terms merged")

            deleted = conn.execute(text("""
                DELETE FROM metrics m
                USING metrics k
                WHERE m."searchTerm" = k."searchTerm" AND m.id > k.id
            """))
            print(f"ℹ️ {deleted.rowcount} duplicate rows removed")

            conn.execute(text("DROP INDEX IF EXISTS ix_metrics_search_term"))
            conn.execute(text(
                'CREATE UNIQUE INDEX IF NOT EXISTS uq_metrics_search_term ON metrics ("searchTerm")'
            ))
            conn.commit()
            print("🎉 Migration complete!")

    except Exception as e:
        print(f"❌ Migration failed: {str(e)}")
        raise

if __name__ == "__main__":
    add_metrics_unique_index()
