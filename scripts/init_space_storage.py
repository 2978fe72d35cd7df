from pathlib import Path
import sqlite3

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "rely" / "db" / "schema.sql"


def ensure_space_storage(storage_dir: Path, db_path: Path) -> None:
    """
    Hugging Face Spaces: create a writable storage area for sqlite, uploads and exports.
    """
    storage_dir.mkdir(parents=True, exist_ok=True)

    (storage_dir / "uploads").mkdir(parents=True, exist_ok=True)
    (storage_dir / "outputs" / "exports").mkdir(parents=True, exist_ok=True)

    # db init
    if not db_path.exists():
        if not SCHEMA_PATH.exists():
            raise FileNotFoundError(f"{SCHEMA_PATH} not found")

        db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(db_path)
        with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
            conn.executescript(f.read())
        conn.commit()
        conn.close()
