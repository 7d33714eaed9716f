"""Reading input files and preparing the output directory."""

import glob
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from pathspec import PathSpec
from pathspec.patterns.gitwildmatch import GitWildMatchPattern

from .errors import FileIOError

logger = logging.getLogger(__name__)

_GLOB_CHARS = ("*", "?", "[", "{")


@dataclass
class InputFile:
    path: str
    content: str


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


class FileIO:
    """File system access for the command line tool."""

    def read_input_file(self, file_path: str) -> InputFile:
        """Read a UTF-8 source file.

        Raises:
            FileIOError: If the file cannot be read or decoded
        """
        try:
            content = Path(file_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FileIOError(f"Failed to read file {file_path}: {e}", path=file_path) from e
        return InputFile(path=file_path, content=content)

    def read_input_files(
        self,
        paths: List[str],
        continue_on_error: bool = False,
        exclude: Optional[List[str]] = None,
    ) -> List[InputFile]:
        """Expand glob patterns and read every matching file.

        Args:
            paths: File paths or glob patterns (``**`` recurses)
            continue_on_error: Skip unreadable files with a warning instead of
                raising
            exclude: .gitignore-style patterns of files to leave out
        """
        results: List[InputFile] = []
        for file_path in self.expand_paths(paths, exclude):
            try:
                results.append(self.read_input_file(file_path))
            except FileIOError as e:
                if not continue_on_error:
                    raise
                logger.warning("Skipping file due to error: %s", e)
        return results

    def expand_paths(self, paths: List[str], exclude: Optional[List[str]] = None) -> List[str]:
        """Expand glob patterns, keeping plain paths as given."""
        spec = PathSpec.from_lines(GitWildMatchPattern, exclude) if exclude else None
        expanded: List[str] = []

        for input_path in paths:
            if self.is_glob_pattern(input_path):
                matches = sorted(
                    m for m in glob.glob(input_path, recursive=True) if os.path.isfile(m)
                )
            else:
                matches = [input_path]

            for match in matches:
                if spec and spec.match_file(Path(match).as_posix()):
                    logger.debug("Excluded %s", match)
                    continue
                if match not in expanded:
                    expanded.append(match)

        return expanded

    @staticmethod
    def is_glob_pattern(pattern: str) -> bool:
        return any(char in pattern for char in _GLOB_CHARS)

    def create_output_directory(self, output_dir: Path, clean: bool = False) -> None:
        """Create the output directory, optionally removing files already in it.

        Raises:
            FileIOError: If the path exists but is not a directory, or cannot
                be cleaned or created
        """
        output_dir = Path(output_dir)
        if output_dir.exists() and not output_dir.is_dir():
            raise FileIOError(
                f"Output path exists but is not a directory: {output_dir}", path=str(output_dir)
            )

        if clean and output_dir.is_dir():
            try:
                for entry in output_dir.iterdir():
                    if entry.is_file():
                        entry.unlink()
            except OSError as e:
                raise FileIOError(
                    f"Failed to clean output directory {output_dir}: {e}", path=str(output_dir)
                ) from e

        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileIOError(
                f"Failed to create output directory {output_dir}: {e}", path=str(output_dir)
            ) from e

    def write_output_file(self, file_path: Path, content: str) -> None:
        """Write a UTF-8 text file, creating parent directories as needed."""
        file_path = Path(file_path)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise FileIOError(f"Failed to write file {file_path}: {e}", path=str(file_path)) from e

    def validate_paths(self, input_paths: List[str], output_path: str) -> ValidationResult:
        errors: List[str] = []

        if not input_paths:
            errors.append("No input files specified")
            return ValidationResult(valid=False, errors=errors)

        for input_path in input_paths:
            if not self.is_glob_pattern(input_path) and not Path(input_path).exists():
                errors.append(f"Input file not found: {input_path}")

        output_parent = Path(output_path).resolve().parent
        if not output_parent.exists():
            errors.append(f"Output parent directory not found: {output_parent}")

        return ValidationResult(valid=not errors, errors=errors)
