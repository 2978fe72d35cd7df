"""Central configuration loaded from environment variables / .env file."""
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

ROOT = Path(__file__).resolve().parent.parent

# ── Gateway ────────────────────────────────────────────────────────────────
RELY_API_KEY: str = os.getenv("RELY_API_KEY", "") or os.getenv("LOVABLE_API_KEY", "")
RELY_GATEWAY_URL: str = os.getenv("RELY_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1")
RELY_MODEL_ID: str = os.getenv("RELY_MODEL_ID", "google/gemini-3-flash-preview")
RELY_MAX_TOKENS: int = int(os.getenv("RELY_MAX_TOKENS", "1024"))
RELY_MAX_RETRIES: int = int(os.getenv("RELY_MAX_RETRIES", "3"))
RELY_TIMEOUT: float = float(os.getenv("RELY_TIMEOUT", "60"))

# ── Pipeline ───────────────────────────────────────────────────────────────
# "ai" proxies to the gateway, "heuristic" runs the local keyword classifier
RELY_ANALYSIS_MODE: str = os.getenv("RELY_ANALYSIS_MODE", "ai").lower()
RELY_HEURISTIC_FALLBACK: bool = os.getenv("RELY_HEURISTIC_FALLBACK", "false").lower() == "true"
RELY_PROMPT_VERSION: str = os.getenv("RELY_PROMPT_VERSION", "v1")
PROMPTS_DIR: Path = ROOT / "rely" / "pipeline" / "prompts" / RELY_PROMPT_VERSION
SCHEMAS_DIR: Path = ROOT / "rely" / "pipeline" / "schemas"

# ── Storage ────────────────────────────────────────────────────────────────
_storage_env = os.getenv("RELY_STORAGE_DIR", "")
STORAGE_DIR: Path = Path(_storage_env) if _storage_env else ROOT / "rely_app" / "storage"

_db_env = os.getenv("RELY_DB_PATH", "")
DB_PATH: Path = Path(_db_env) if _db_env else STORAGE_DIR / "rely.db"
SCHEMA_PATH: Path = ROOT / "rely" / "db" / "schema.sql"

UPLOADS_DIR: Path = STORAGE_DIR / "uploads"
EXPORTS_DIR: Path = STORAGE_DIR / "outputs" / "exports"
RELY_PUBLIC_BASE_URL: str = os.getenv("RELY_PUBLIC_BASE_URL", "").rstrip("/")

# ── History ────────────────────────────────────────────────────────────────
HISTORY_LIMIT: int = 50
CONTENT_STORE_LIMIT: int = 10000
