"""Local filesystem storage for uploads and generated reports."""
import logging
import time
from pathlib import Path

from bulk_import.imports.errors import CleanupFailed

logger = logging.getLogger(__name__)


class LocalFileStorage:
    def __init__(self, upload_dir: str | Path, report_dir: str | Path):
        self.upload_dir = Path(upload_dir)
        self.report_dir = Path(report_dir)

    # ─── Bootstrap ───

    def ensure_dirs(self) -> None:
        """Create the upload and report directories. Called on startup."""
        for directory in (self.upload_dir, self.report_dir):
            directory.mkdir(parents=True, exist_ok=True)
            logger.debug("Storage directory ready: %s", directory)

    # ─── Uploads ───

    def save_upload(self, filename: str, data: bytes) -> Path:
        """Store upload bytes as `<epoch-ms>-<basename>` and return the absolute path."""
        safe_name = Path(filename).name
        path = (self.upload_dir / f"{int(time.time() * 1000)}-{safe_name}").resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info("Stored upload %s (%d bytes)", path, len(data))
        return path

    def delete(self, path: str | Path) -> None:
        """Remove a file. Raises CleanupFailed if it cannot be removed."""
        try:
            Path(path).unlink()
        except OSError as exc:
            raise CleanupFailed(str(path), str(exc)) from exc
        logger.info("File cleaned up: %s", path)

    # ─── Reports ───

    def resolve_report(self, report_name: str) -> Path | None:
        """Return the path of a report inside report_dir, or None if absent or outside it."""
        if Path(report_name).name != report_name:
            return None
        path = self.report_dir / report_name
        return path if path.is_file() else None

    def purge_reports(self, older_than_seconds: float) -> int:
        """Delete report files older than the given age. Returns how many were removed."""
        if not self.report_dir.is_dir():
            return 0

        cutoff = time.time() - older_than_seconds
        removed = 0
        for path in self.report_dir.glob("error_report_*.xlsx"):
            try:
                if path.stat().st_mtime < cutoff:
                    path.unlink()
                    removed += 1
            except OSError as exc:
                logger.warning("Could not purge report %s: %s", path, exc)
        logger.info("Purged %d error reports from %s", removed, self.report_dir)
        return removed
