"""Write chunk files, the manifest and the loader scripts."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .chunking.models import Chunk
from .file_io import FileIO
from .templates import BROWSER_LOADER, render_node_entry

logger = logging.getLogger(__name__)

MANIFEST_VERSION = "1.0.0"
MANIFEST_FILENAME = "manifest.json"
LOADER_FILENAME = "loader.js"
NODE_ENTRY_FILENAME = "index.js"


class ChunkMetadata(BaseModel):
    """Manifest entry describing one chunk file."""

    id: str
    filename: str
    dependencies: List[str] = Field(default_factory=list)
    exports: List[str] = Field(default_factory=list)
    size: int
    order: int


class Manifest(BaseModel):
    """The manifest.json document. Serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    version: str = MANIFEST_VERSION
    chunks: List[ChunkMetadata] = Field(default_factory=list)
    entry_point: str = LOADER_FILENAME
    total_size: int = 0
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_json(self) -> str:
        return json.dumps(self.model_dump(mode="json", by_alias=True), indent=2)


class OutputWriter:
    """Writes everything a chunked build needs into one directory."""

    def __init__(
        self,
        output_dir: Path,
        loader_template: Optional[Path] = None,
        node_entry: bool = False,
        file_io: Optional[FileIO] = None,
    ):
        self.output_dir = Path(output_dir)
        self.loader_template = loader_template
        self.node_entry = node_entry
        self.file_io = file_io or FileIO()

    def generate_manifest(self, chunks: List[Chunk]) -> Manifest:
        return Manifest(
            chunks=[ChunkMetadata(**chunk.to_dict()) for chunk in chunks],
            total_size=sum(chunk.size for chunk in chunks),
        )

    def generate_loader(self) -> str:
        """Browser loader source, from the custom template if one is set."""
        if self.loader_template:
            try:
                return Path(self.loader_template).read_text(encoding="utf-8")
            except OSError as e:
                logger.warning(
                    "Failed to read custom loader template %s: %s. Using default loader.",
                    self.loader_template,
                    e,
                )
        return BROWSER_LOADER

    def generate_node_entry(self, chunks: List[Chunk]) -> str:
        ordered = sorted(chunks, key=lambda c: c.order)
        return render_node_entry([chunk.to_dict() for chunk in ordered])

    def write(self, chunks: List[Chunk]) -> List[Path]:
        """Write chunk files, manifest.json, loader.js and optionally index.js.

        Returns:
            Paths of all written files
        """
        written: List[Path] = []

        def _write(filename: str, content: str) -> None:
            path = self.output_dir / filename
            self.file_io.write_output_file(path, content)
            written.append(path)

        for chunk in chunks:
            _write(chunk.filename, chunk.content)

        _write(MANIFEST_FILENAME, self.generate_manifest(chunks).to_json())
        _write(LOADER_FILENAME, self.generate_loader())

        if self.node_entry:
            _write(NODE_ENTRY_FILENAME, self.generate_node_entry(chunks))

        logger.info("Wrote %d file(s) to %s", len(written), self.output_dir)
        return written
