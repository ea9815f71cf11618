import logging
import os
import uuid
import zipfile
from collections.abc import Iterable
from pathlib import Path

from app.agent.artifacts import GeneratedFile
from app.agent.base import sanitize_relative_path

logger = logging.getLogger(__name__)


def archive_download_name(project_id: object) -> str:
    return f"project-{project_id}.zip"


def write_generated_files(output_dir: str | Path, files: Iterable[GeneratedFile]) -> Path:
    """Write every file under output_dir, refusing paths that would escape it."""
    root = Path(output_dir).resolve()
    root.mkdir(parents=True, exist_ok=True)

    count = 0
    for generated in files:
        relative = sanitize_relative_path(generated.path)
        if not relative:
            raise ValueError(f"Refusing to write file with unusable path: {generated.path!r}")
        target = (root / relative).resolve()
        if not target.is_relative_to(root):
            raise ValueError(f"Refusing to write outside the project directory: {generated.path!r}")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(generated.content, encoding="utf-8")
        count += 1

    logger.info("Generated files saved to %s (%s files)", root, count)
    return root


def build_archive(source_dir: str | Path, archive_path: str | Path) -> Path:
    """Zip source_dir at maximum compression, with entries relative to source_dir."""
    source = Path(source_dir)
    if not source.is_dir():
        raise FileNotFoundError(f"Generated project directory not found: {source}")

    archive = Path(archive_path)
    archive.parent.mkdir(parents=True, exist_ok=True)
    # Each build writes its own file and swaps it in whole
    partial = archive.with_name(f".{archive.name}.{uuid.uuid4().hex}.part")
    try:
        with zipfile.ZipFile(partial, "w", zipfile.ZIP_DEFLATED, compresslevel=9) as zipf:
            for path in sorted(source.rglob("*")):
                if path.is_file():
                    zipf.write(path, path.relative_to(source).as_posix())
        os.replace(partial, archive)
    finally:
        partial.unlink(missing_ok=True)

    logger.info("Archived %s to %s", source, archive)
    return archive
