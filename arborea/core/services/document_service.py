from __future__ import annotations

"""Document lifecycle service: new, open, save and save-as.

Entry-point for any front-end (GUI, CLI) that needs to read or write
documents. The tree itself never touches the filesystem; this service owns
all file I/O and delegates parsing and serialization to the core.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from arborea.config import ConfigManager
from arborea.core.exceptions import MalformedInputError
from arborea.core.models import EditorDocument
from arborea.core.tree import Tree, load_tree

logger = logging.getLogger(__name__)

__all__ = ["DocumentService"]


class DocumentService:
    """Business-logic façade for document files with zero GUI dependencies."""

    def __init__(self, editor_config: Optional[Dict[str, Any]] = None) -> None:
        if editor_config is None:
            editor_config = ConfigManager().get_editor_config()
        self.root_title: str = editor_config.get("root_title", "")
        self.indent: int = int(editor_config.get("json_indent", 2))
        self.encoding: str = editor_config.get("encoding", "utf-8")
        self.file_extension: str = editor_config.get("file_extension", ".json")

    # ---------------------------------------------------------------------
    # PUBLIC API
    # ---------------------------------------------------------------------
    def new_document(self) -> EditorDocument:
        """Return an unsaved document holding only a titled root."""
        tree = Tree()
        tree.root.title = self.root_title
        logger.info("Document: new")
        return EditorDocument(tree=tree)

    def open_document(self, file_path: str | Path) -> EditorDocument:
        """Read and parse a document file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the path is not a file
            MalformedInputError: If the file is not valid JSON
            InvalidTreeError: If the JSON does not describe a valid tree
        """
        file_path = Path(file_path)
        logger.info("Document: open %s", file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Input file not found: {file_path}")
        if not file_path.is_file():
            raise ValueError(f"Path is not a file: {file_path}")

        raw = file_path.read_bytes()
        try:
            try:
                text = raw.decode(self.encoding)
            except UnicodeDecodeError as exc:
                raise MalformedInputError(f"File is not valid {self.encoding} text: {exc}", cause=exc) from exc
            tree = load_tree(text)
        except ValueError as e:
            logger.error("Document open failed for %s: %s", file_path, e)
            raise

        logger.info("Document opened: %s (%d nodes)", file_path, len(tree))
        return EditorDocument(tree=tree, path=file_path)

    def save_document(self, document: EditorDocument, file_path: str | Path | None = None) -> Path:
        """Write ``document`` to ``file_path`` or to the path it was opened from.

        Passing a path performs a save-as: the document remembers it for the
        next plain save. The previous file content stays intact if writing
        fails.

        Raises:
            ValueError: If no path is given and the document has none yet
        """
        target = Path(file_path) if file_path is not None else document.path
        if target is None:
            raise ValueError("Document has no file path; a path is required to save it")

        if not target.suffix and self.file_extension:
            target = target.with_suffix(self.file_extension)

        logger.info("Document: save %s", target)
        text = document.tree.export(indent=self.indent)
        self._write_atomic(target, text)

        document.path = target
        document.dirty = False
        logger.info("Document saved: %s (%d nodes)", target, len(document.tree))
        return target

    # ---------------------------------------------------------------------
    # Internals
    # ---------------------------------------------------------------------
    def _write_atomic(self, target: Path, text: str) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
        try:
            with os.fdopen(fd, "w", encoding=self.encoding, newline="\n") as fh:
                fh.write(text)
            os.replace(tmp_name, target)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise
