"""Run parse, analysis, chunking and formatting over one or more files."""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .analyzer import Analyzer
from .beautifier import Beautifier
from .chunking import Chunk, Chunker
from .config import Config
from .errors import JSChunkerError
from .file_io import InputFile
from .parser import Parser

logger = logging.getLogger(__name__)


@dataclass
class FileFailure:
    path: str
    error: str


@dataclass
class PipelineResult:
    """Outcome of a run across all input files."""

    chunks: List[Chunk] = field(default_factory=list)
    processed: List[str] = field(default_factory=list)
    failures: List[FileFailure] = field(default_factory=list)

    @property
    def total_size(self) -> int:
        return sum(chunk.size for chunk in self.chunks)

    @property
    def segment_count(self) -> int:
        return sum(chunk.segment_count for chunk in self.chunks)


class ChunkPipeline:
    """Process input files sequentially into one growing list of chunks.

    A single Chunker is shared by every file so chunk ids stay unique for
    the whole run.
    """

    def __init__(self, config: Config):
        self.config = config
        self.parser = Parser(config.parse_options())
        self.analyzer = Analyzer()
        self.chunker = Chunker(config.chunker_options())
        self.beautifier = Beautifier(config.beautify_options) if config.beautify else None

    def process_source(self, source: str, order_offset: int = 0) -> List[Chunk]:
        """Chunk a single source text.

        Raises:
            ParseError: If the source cannot be parsed
            GenerationError: If no statement could be generated
        """
        logger.debug("Parsing")
        tree = self.parser.parse(source)

        logger.debug("Analyzing dependencies")
        analysis = self.analyzer.analyze(tree)

        logger.debug("Chunking")
        chunks = self.chunker.chunk(tree, analysis, order_offset=order_offset)

        if self.beautifier:
            logger.debug("Beautifying")
            chunks = [self.beautifier.beautify_chunk(chunk) for chunk in chunks]

        return chunks

    def process_files(
        self,
        files: List[InputFile],
        on_file: Optional[Callable[[int, InputFile], None]] = None,
    ) -> PipelineResult:
        """Process files in order.

        A file that fails is logged. The run then aborts by re-raising,
        unless continue_on_error is set, in which case the failure is
        recorded and the next file is processed.
        """
        result = PipelineResult()

        for index, input_file in enumerate(files):
            if on_file:
                on_file(index, input_file)

            try:
                chunks = self.process_source(input_file.content, order_offset=len(result.chunks))
            except JSChunkerError as e:
                logger.warning("Failed to process %s: %s", input_file.path, e)
                if not self.config.continue_on_error:
                    raise
                result.failures.append(FileFailure(path=input_file.path, error=str(e)))
                continue

            logger.info(
                "%s: %d chunk(s) from %d segment(s)",
                input_file.path,
                len(chunks),
                sum(chunk.segment_count for chunk in chunks),
            )
            result.chunks.extend(chunks)
            result.processed.append(input_file.path)

        return result
