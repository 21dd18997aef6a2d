"""Recolección de contexto de código desde un directorio.

Comparte una única implementación de recorrido para `show`, `code` y
`gemini`; cada comando elige un `FileFilter` y el formato de salida.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable

from vibe.core.domain.errors import ContextError

logger = logging.getLogger(__name__)

SKIP_DIRS: frozenset[str] = frozenset(
    {".git", "node_modules", "vendor", "__pycache__", "venv", ".venv", "target", "build", "dist"}
)

# Extensiones (o nombres exactos) aceptados por `vibe code`.
SOURCE_EXTENSIONS: frozenset[str] = frozenset(
    {
        ".go", ".html", ".py", ".js", ".ts", ".jsx", ".tsx", ".rs", ".java", ".kt",
        ".c", ".h", ".cpp", ".cs", ".rb", ".php", ".md", ".yaml", ".yml", ".toml",
        ".json", ".sh", ".sql",
        "dockerfile", ".dockerignore", ".env", ".env.example",
    }
)

GEMINI_PERSONA = "Take on the persona of a distinguished software engineer."


class FileFilter(str, Enum):
    """Políticas de selección de archivos."""

    DEFAULT = "default"
    UNFILTERED = "unfiltered"
    SOURCE = "source"


@dataclass(frozen=True)
class FileEntry:
    path: Path
    content: str

    @property
    def language(self) -> str:
        ext = self.path.suffix.lower().lstrip(".")
        return ext or "text"


@dataclass
class ContextBundle:
    root: Path
    files: list[FileEntry] = field(default_factory=list)
    skipped_dirs: int = 0
    warnings: list[str] = field(default_factory=list)


def resolve_directory(target: str | Path) -> Path:
    """Ruta absoluta de `target`, validando que exista y sea un directorio."""

    path = Path(target).expanduser().resolve()
    if not path.exists():
        raise ContextError(f"directory not found: {path}")
    if not path.is_dir():
        raise ContextError(f"path is not a directory: {path}")
    return path


def _skip_dir(name: str) -> bool:
    return name in SKIP_DIRS or (name.startswith(".") and name != ".")


def _keep_file(name: str, policy: FileFilter) -> bool:
    if policy is FileFilter.UNFILTERED:
        return True

    if policy is FileFilter.SOURCE:
        lower = name.lower()
        if name.startswith(".") and lower not in SOURCE_EXTENSIONS:
            return False
        ext = os.path.splitext(lower)[1]
        return ext in SOURCE_EXTENSIONS or lower in SOURCE_EXTENSIONS

    if name.startswith("."):
        return False
    if name.endswith("_test.go") or name in ("go.mod", "go.sum", "LICENSE"):
        return False
    return not name.lower().endswith(".md")


def gather_context(
    root: Path,
    *,
    policy: FileFilter = FileFilter.DEFAULT,
    max_file_bytes: int | None = None,
    warn: Callable[[str], None] | None = None,
) -> ContextBundle:
    """Recorre `root` en orden lexicográfico y lee los archivos seleccionados.

    Errores de lectura o archivos demasiado grandes se anotan como warnings y
    el recorrido continúa.
    """

    bundle = ContextBundle(root=root)

    def note(message: str) -> None:
        bundle.warnings.append(message)
        logger.debug(message)
        if warn:
            warn(message)

    def on_walk_error(exc: OSError) -> None:
        note(f"Error accessing path {exc.filename!r}: {exc.strerror or exc}")

    for dirpath, dirnames, filenames in os.walk(root, topdown=True, onerror=on_walk_error):
        kept = sorted(d for d in dirnames if not _skip_dir(d))
        bundle.skipped_dirs += len(dirnames) - len(kept)
        dirnames[:] = kept

        for name in sorted(filenames):
            if not _keep_file(name, policy):
                continue
            path = Path(dirpath) / name
            try:
                if max_file_bytes is not None and path.stat().st_size > max_file_bytes:
                    note(f"Skipping large file {path} (> {max_file_bytes} bytes)")
                    continue
                content = path.read_bytes().decode("utf-8", errors="replace")
            except OSError as exc:
                note(f"Error reading file {path}: {exc}")
                continue
            bundle.files.append(FileEntry(path=path, content=content))

    logger.info("collected %d file(s) from %s", len(bundle.files), root)
    return bundle


def format_plain_entry(entry: FileEntry) -> str:
    return f"// File: {entry.path}\n\n{entry.content}\n"


def format_markdown_entry(entry: FileEntry) -> str:
    return f"## {entry.path}\n\n```{entry.language}\n{entry.content}\n```\n"


def format_code_context(bundle: ContextBundle) -> str:
    return "".join(f"// File: {f.path}\n{f.content}\n\n---\n\n" for f in bundle.files)


def format_gemini_context(bundle: ContextBundle) -> str:
    body = "".join(f"--- File: {f.path} ---\n{f.content}\n\n" for f in bundle.files)
    return body + GEMINI_PERSONA
