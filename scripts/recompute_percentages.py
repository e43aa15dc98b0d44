"""
Re-derive the stored percentage of every student record.
Run after editing marks directly in the database:

    DATABASE_URL=... python scripts/recompute_percentages.py
"""
from grade_api.core.config import load_settings
from grade_api.core.database import Database
from grade_api.services.students import recompute_percentages

settings = load_settings()
database = Database(settings.database_url, settings.db_connect_timeout)

db = database.session()
try:
    changed = recompute_percentages(db)
    print(f"Recomputed percentage on {changed} record(s).")
finally:
    db.close()
    database.dispose()
