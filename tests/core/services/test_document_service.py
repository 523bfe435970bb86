import json
import os

import pytest

from arborea.core.exceptions import InvalidTreeError, MalformedInputError
from arborea.core.models import EditorDocument
from arborea.core.services import document_service as document_service_module
from arborea.core.services.document_service import DocumentService


@pytest.fixture
def service():
    return DocumentService({"root_title": "Root", "json_indent": 2, "file_extension": ".json"})


def test_defaults_come_from_editor_config():
    service = DocumentService()
    assert service.root_title == "Root"
    assert service.indent == 2
    assert service.encoding == "utf-8"


def test_new_document(service):
    document = service.new_document()

    assert len(document.tree) == 1
    assert document.tree.root.title == "Root"
    assert document.path is None
    assert document.dirty is False
    assert document.display_name == "Untitled"


def test_save_and_open_round_trip(service, sample_tree, structure, tmp_path):
    document = EditorDocument(tree=sample_tree, dirty=True)
    target = tmp_path / "notes.json"

    saved = service.save_document(document, target)

    assert saved == target
    assert document.path == target
    assert document.dirty is False
    assert target.read_text(encoding="utf-8") == sample_tree.export(indent=2)

    reopened = service.open_document(target)
    assert structure(reopened.tree) == structure(sample_tree)
    assert reopened.path == target
    assert reopened.display_name == "notes.json"


def test_plain_save_reuses_remembered_path(service, tmp_path):
    document = service.new_document()
    target = service.save_document(document, tmp_path / "doc.json")

    document.tree.root.create_child("Later")
    service.save_document(document)

    titles = [d["title"] for d in json.loads(target.read_text(encoding="utf-8"))]
    assert titles == ["Root", "Later"]


def test_save_without_any_path(service):
    with pytest.raises(ValueError):
        service.save_document(service.new_document())


def test_save_adds_default_extension(service, tmp_path):
    saved = service.save_document(service.new_document(), tmp_path / "outline")
    assert saved.name == "outline.json"
    assert saved.exists()


def test_failed_write_keeps_previous_file(service, tmp_path, monkeypatch):
    document = service.new_document()
    target = service.save_document(document, tmp_path / "doc.json")
    previous = target.read_text(encoding="utf-8")

    def boom(src, dst):
        raise OSError("disk full")

    document.tree.root.create_child("Unsaved")
    with monkeypatch.context() as m:
        m.setattr(document_service_module.os, "replace", boom)
        with pytest.raises(OSError):
            service.save_document(document)

    assert target.read_text(encoding="utf-8") == previous
    assert [name for name in os.listdir(tmp_path) if name.endswith(".tmp")] == []


def test_open_missing_file(service, tmp_path):
    with pytest.raises(FileNotFoundError):
        service.open_document(tmp_path / "missing.json")


def test_open_directory(service, tmp_path):
    with pytest.raises(ValueError):
        service.open_document(tmp_path)


def test_open_malformed_file(service, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("not json", encoding="utf-8")
    with pytest.raises(MalformedInputError):
        service.open_document(path)


def test_open_file_with_invalid_encoding(service, tmp_path):
    path = tmp_path / "latin.json"
    path.write_bytes(b'[{"id": 0, "title": "R\xe9sum\xe9", "content": "", "children": [], "parent": null}]')

    with pytest.raises(MalformedInputError) as excinfo:
        service.open_document(path)

    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)


def test_open_invalid_tree(service, tmp_path):
    path = tmp_path / "invalid.json"
    path.write_text('[{"id": 1, "title": "", "content": "", "children": [], "parent": null}]', encoding="utf-8")
    with pytest.raises(InvalidTreeError):
        service.open_document(path)
