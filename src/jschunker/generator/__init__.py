"""Code generators turning tree nodes back into JavaScript."""

from .types import CodeGenerator, GeneratorOptions
from .source import SourceTextGenerator
from .tokens import TokenStreamGenerator, Token, to_tokens
from .hybrid import HybridGenerator

__all__ = [
    "CodeGenerator",
    "GeneratorOptions",
    "SourceTextGenerator",
    "TokenStreamGenerator",
    "Token",
    "to_tokens",
    "HybridGenerator",
]
