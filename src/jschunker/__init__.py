"""jschunker - Split JavaScript into dependency-aware, loadable chunks."""

__version__ = "0.1.0"

from .errors import ConfigError, FileIOError, GenerationError, JSChunkerError, ParseError
from .parser import ParseOptions, Parser
from .analyzer import AnalysisResult, Analyzer, FunctionInfo, Scope, Variable
from .generator import CodeGenerator, GeneratorOptions, HybridGenerator
from .chunking import Chunk, Chunker, ChunkerOptions, CodeSegment
from .beautifier import Beautifier, BeautifierOptions
from .config import Config
from .output import ChunkMetadata, Manifest, OutputWriter
from .pipeline import ChunkPipeline, PipelineResult

__all__ = [
    "ConfigError",
    "FileIOError",
    "GenerationError",
    "JSChunkerError",
    "ParseError",
    "ParseOptions",
    "Parser",
    "AnalysisResult",
    "Analyzer",
    "FunctionInfo",
    "Scope",
    "Variable",
    "CodeGenerator",
    "GeneratorOptions",
    "HybridGenerator",
    "Chunk",
    "Chunker",
    "ChunkerOptions",
    "CodeSegment",
    "Beautifier",
    "BeautifierOptions",
    "Config",
    "ChunkMetadata",
    "Manifest",
    "OutputWriter",
    "ChunkPipeline",
    "PipelineResult",
]
