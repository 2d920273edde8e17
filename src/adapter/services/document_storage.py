"""Local filesystem document storage

Stores rendered invoices under PDF_STORAGE_DIR and hands out references of
the form /uploadPdf/<filename>.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional
from src.app.services.document_storage import DocumentStorage

logger = logging.getLogger(__name__)

REFERENCE_PREFIX = "/uploadPdf"


class LocalFileDocumentStorage(DocumentStorage):
    """
    DocumentStorage backed by a local directory

    File IO is blocking, so it runs in the default thread pool. A reference
    is resolved by file name only; directory parts are ignored.
    """

    def __init__(self, base_dir: str, reference_prefix: str = REFERENCE_PREFIX):
        self.base_dir = Path(base_dir)
        self.reference_prefix = reference_prefix.rstrip("/")

    def _path(self, reference: str) -> Path:
        return self.base_dir / Path(reference).name

    def _write(self, path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    def _read(self, path: Path) -> Optional[bytes]:
        if not path.is_file():
            return None
        return path.read_bytes()

    def _delete(self, path: Path) -> bool:
        if not path.is_file():
            return False
        path.unlink()
        return True

    async def save(self, filename: str, content: bytes) -> str:
        path = self._path(filename)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._write, path, content)
        logger.info(f"Stored document {path} ({len(content)} bytes)")
        return f"{self.reference_prefix}/{path.name}"

    async def read(self, reference: str) -> Optional[bytes]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read, self._path(reference))

    async def delete(self, reference: str) -> bool:
        loop = asyncio.get_running_loop()
        removed = await loop.run_in_executor(None, self._delete, self._path(reference))
        if removed:
            logger.info(f"Removed document {reference}")
        return removed
