"""
Local File System Result Store

Stores chunk lists and final summaries as JSON files under a root directory,
plus a small JSON index mapping document ids to their output URL. Useful for
development, testing, and self-hosted runs without an object store.
"""

import json
import logging
import re
import uuid
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import unquote, urlparse

from pydantic import TypeAdapter

from ..models import Chunk, FinalResult

logger = logging.getLogger(__name__)

_CHUNK_LIST = TypeAdapter(List[Chunk])

METADATA_FILE = "metadata.json"


def sanitize_filename(name: str) -> str:
    """Turn a document id into a file-name stem for stored results.

    Characters outside [A-Za-z0-9._-] become underscores. Leading dots are
    dropped so an id never names a hidden or parent entry. An id with
    nothing left maps to "document". Stems are cut to 200 chars.
    """
    safe = re.sub(r"[^A-Za-z0-9._-]", "_", name)
    safe = safe.lstrip(".")
    if not safe:
        safe = "document"
    return safe[:200]


class LocalResultStore:
    """
    Local filesystem result store.

    Layout under ``root_dir``:
        chunks/<id>_<uuid>.json            chunk lists between stages
        summaries/<id>.json                chunk-only pipeline output
        summaries/<id>_final_summary.json  final summarization result
        metadata.json                      document id -> output URL
    """

    def __init__(self, root_dir: Path, base_url: Optional[str] = None):
        """
        Initialize local result store.

        Args:
            root_dir: Root directory for stored results
            base_url: Base URL for serving files (e.g., http://localhost:8080/files)
                     If None, file:// URLs will be used
        """
        self.root_dir = Path(root_dir).resolve()
        self.root_dir.mkdir(parents=True, exist_ok=True)
        self.base_url = base_url.rstrip("/") if base_url else None

    def save_chunks(self, document_id: str, chunks: List[Chunk]) -> str:
        """Save a chunk list for the next stage; returns its URI."""
        name = f"{sanitize_filename(document_id)}_{uuid.uuid4()}.json"
        path = self._write(f"chunks/{name}", _CHUNK_LIST.dump_json(chunks, by_alias=True, indent=2))
        logger.info(
            "Chunks saved",
            extra={"document_id": document_id, "chunk_count": len(chunks), "path": str(path)},
        )
        return self.uri_for(path)

    def load_chunks(self, uri: str) -> List[Chunk]:
        """Load a chunk list previously written by ``save_chunks``."""
        path = self.path_for(uri)
        return _CHUNK_LIST.validate_json(path.read_bytes())

    def save_chunk_output(self, document_id: str, chunks: List[Chunk]) -> str:
        """Save chunks as the final output of a pipeline that skips summarization."""
        name = f"summaries/{sanitize_filename(document_id)}.json"
        path = self._write(name, _CHUNK_LIST.dump_json(chunks, by_alias=True, indent=2))
        logger.info("Chunk output saved", extra={"document_id": document_id, "path": str(path)})
        return self.uri_for(path)

    def save_final_result(self, result: FinalResult) -> str:
        """Save the final summarization result; returns its URI."""
        name = f"summaries/{sanitize_filename(result.id)}_final_summary.json"
        path = self._write(name, result.to_json().encode("utf-8"))
        logger.info("Final summary saved", extra={"document_id": result.id, "path": str(path)})
        return self.uri_for(path)

    def load_final_result(self, uri: str) -> FinalResult:
        return FinalResult.model_validate_json(self.path_for(uri).read_bytes())

    def record_output_url(self, document_id: str, url: str) -> None:
        """Record where a document's output lives."""
        index = self._read_index()
        index[document_id] = url
        self._write(METADATA_FILE, json.dumps(index, indent=2, sort_keys=True).encode("utf-8"))
        logger.info("Output URL recorded", extra={"document_id": document_id, "output_url": url})

    def get_output_url(self, document_id: str) -> Optional[str]:
        return self._read_index().get(document_id)

    def uri_for(self, path: Path) -> str:
        """Generate access URI for a stored file."""
        if self.base_url:
            return f"{self.base_url}/{path.relative_to(self.root_dir).as_posix()}"
        return path.as_uri()

    def path_for(self, uri: str) -> Path:
        """Resolve a URI or store-relative path to a file under the root."""
        if self.base_url and uri.startswith(f"{self.base_url}/"):
            relative = uri[len(self.base_url) + 1 :]
            path = self.root_dir / relative
        elif uri.startswith("file://"):
            path = Path(unquote(urlparse(uri).path))
        else:
            path = self.root_dir / uri

        path = path.resolve()
        if not path.is_relative_to(self.root_dir):
            raise ValueError(f"Path is outside the result store: {uri}")
        return path

    def _write(self, relative: str, data: bytes) -> Path:
        path = self.root_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    def _read_index(self) -> Dict[str, str]:
        path = self.root_dir / METADATA_FILE
        if not path.exists():
            return {}
        return json.loads(path.read_text(encoding="utf-8"))
