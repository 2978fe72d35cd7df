"""Upload storage: copy user files into the uploads area and describe them for analysis."""
import logging
from pathlib import Path
from typing import Optional

from rely import config
from rely.util.files import copy_file, ensure_dir, read_text
from rely.util.ids import new_upload_name

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = {".txt", ".md", ".csv", ".json", ".html", ".htm", ".eml"}


def public_url(stored_name: str) -> str:
    """URL under RELY_PUBLIC_BASE_URL when configured, otherwise a file:// URI into UPLOADS_DIR."""
    if config.RELY_PUBLIC_BASE_URL:
        return f"{config.RELY_PUBLIC_BASE_URL}/{stored_name}"
    return (config.UPLOADS_DIR / stored_name).resolve().as_uri()


def upload_file(src_path: Path, original_name: Optional[str] = None) -> tuple[str, str]:
    """
    Store a file under a fresh collision-resistant name.

    Returns:
        (url, original_name)
    """
    src_path = Path(src_path)
    if not src_path.is_file():
        raise FileNotFoundError(f"Upload not found: {src_path}")

    name = original_name or src_path.name
    stored_name = new_upload_name(name)
    ensure_dir(config.UPLOADS_DIR)
    copy_file(src_path, config.UPLOADS_DIR / stored_name)

    url = public_url(stored_name)
    logger.info("Stored upload %s as %s", name, stored_name)
    return url, name


def describe_upload(path: Path, name: str, url: str, content: str = "") -> str:
    """
    Build the content sent for analysis when a file accompanies the submission.

    Text-like files are inlined (truncated to CONTENT_STORE_LIMIT characters);
    anything else is referenced by name and URL.
    """
    parts = [content.strip()] if content.strip() else []
    if Path(name).suffix.lower() in TEXT_SUFFIXES:
        body = read_text(Path(path), limit=config.CONTENT_STORE_LIMIT).strip()
        parts.append(f"Attached file {name}:\n\n{body}" if body else f"Attached file {name} is empty.")
    else:
        parts.append(f"Attached file: {name} ({url})")
    return "\n\n".join(parts)
