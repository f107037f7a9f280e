import os
import tempfile

_db_dir = tempfile.mkdtemp(prefix="servicebook-tests-")
os.environ["SERVICEBOOK_DB_PATH"] = os.path.join(_db_dir, "servicebook.sqlite3")
