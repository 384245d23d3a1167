"""
Tests for oxml_parts.package

Test Coverage:
- OpcPackage.open(): bytes, path and stream sources
- main_document_part: relationship resolution and failures
- Part streams: read, truncating write, append, read-only
- save() / close() / remove_part() and their cache effects
"""

import io
import zipfile

import pytest

from conftest import DOCUMENT_XML, make_docx
from oxml_parts.errors import PartNotFoundError, PartParseError
from oxml_parts.package import OpcPackage, Part


def test_open_from_bytes_keeps_member_order(docx_bytes):
    pkg = OpcPackage.open(docx_bytes)

    assert [p.name for p in pkg] == [
        "/[Content_Types].xml",
        "/_rels/.rels",
        "/docProps/core.xml",
        "/word/document.xml",
    ]
    assert pkg["/word/document.xml"].blob == DOCUMENT_XML


def test_parts_are_reached_by_iteration_and_name(docx_bytes):
    pkg = OpcPackage.open(docx_bytes)

    # 部件只通过迭代、len() 和名称查找访问，没有单独的列表属性
    assert not hasattr(pkg, "parts")
    assert len(pkg) == len(list(pkg)) == 4
    assert "word/document.xml" in pkg
    assert pkg["word/document.xml"] is pkg.main_document_part


def test_open_from_path_and_stream(docx_path):
    from_path = OpcPackage.open(docx_path)
    with open(docx_path, "rb") as fh:
        from_stream = OpcPackage.open(fh)

    assert len(from_path) == len(from_stream) == 4


def test_lookup_without_leading_slash(docx_bytes):
    pkg = OpcPackage.open(docx_bytes)

    assert "word/document.xml" in pkg
    assert pkg["word/document.xml"] is pkg["/word/document.xml"]


def test_missing_part_raises(docx_bytes):
    pkg = OpcPackage.open(docx_bytes)

    with pytest.raises(PartNotFoundError):
        pkg["/word/styles.xml"]


def test_main_document_part(docx_bytes):
    pkg = OpcPackage.open(docx_bytes)

    assert pkg.main_document_part.name == "/word/document.xml"


def test_main_document_part_with_absolute_target():
    rels = b"""<?xml version="1.0" encoding="UTF-8"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
<Relationship Id="rId1" Type="http://purl.oclc.org/ooxml/officeDocument/relationships/officeDocument" Target="/word/document2.xml"/>
</Relationships>"""
    data = make_docx(rels_xml=rels, extra=[("word/document2.xml", b"<doc/>")])

    pkg = OpcPackage.open(data)

    assert pkg.main_document_part.name == "/word/document2.xml"


def test_missing_office_document_relationship():
    rels = b"""<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships"/>"""
    pkg = OpcPackage.open(make_docx(rels_xml=rels))

    with pytest.raises(PartNotFoundError):
        pkg.main_document_part


def test_missing_package_relationships():
    pkg = OpcPackage.open(make_docx(rels_xml=None))

    with pytest.raises(PartNotFoundError):
        pkg.main_document_part


def test_malformed_package_relationships():
    pkg = OpcPackage.open(make_docx(rels_xml=b"<Relationships>"))

    with pytest.raises(PartParseError):
        pkg.main_document_part


def test_open_write_truncates():
    part = Part("word/document.xml", b"<old/>")

    with part.open_write() as stream:
        stream.write(b"<new/>")

    assert part.name == "/word/document.xml"
    assert part.blob == b"<new/>"


def test_open_write_without_truncate_appends():
    part = Part("/notes.txt", b"abc")

    with part.open_write(truncate=False) as stream:
        stream.write(b"def")

    assert part.blob == b"abcdef"


def test_read_only_package_refuses_writes(docx_bytes):
    pkg = OpcPackage.open(docx_bytes, writable=False)

    with pytest.raises(PermissionError):
        pkg.main_document_part.open_write()


def test_save_round_trip(tmp_path, docx_bytes):
    pkg = OpcPackage.open(docx_bytes)
    target = tmp_path / "out" / "copy.docx"

    pkg.save(target)

    with zipfile.ZipFile(target) as zf:
        assert zf.namelist() == [
            "[Content_Types].xml",
            "_rels/.rels",
            "docProps/core.xml",
            "word/document.xml",
        ]
        assert zf.read("word/document.xml") == DOCUMENT_XML


def test_save_writes_part_content_not_cached_edits(docx_bytes):
    pkg = OpcPackage.open(docx_bytes)
    pkg.trees.get(pkg.main_document_part).getroot().set("unsaved", "1")
    buf = io.BytesIO()

    pkg.save(buf)

    reopened = OpcPackage.open(buf.getvalue())
    assert reopened.main_document_part.blob == DOCUMENT_XML


def test_close_drops_cached_trees(docx_bytes):
    with OpcPackage.open(docx_bytes) as pkg:
        pkg.trees.get(pkg.main_document_part)
        assert len(pkg.trees) == 1

    assert pkg.closed
    assert len(pkg.trees) == 0


def test_remove_part_invalidates_tree(docx_bytes):
    pkg = OpcPackage.open(docx_bytes)
    part = pkg["/docProps/core.xml"]
    pkg.trees.get(part)

    pkg.remove_part("docProps/core.xml")

    assert part not in pkg.trees
    assert "/docProps/core.xml" not in pkg


def test_add_part_replaces_and_invalidates(docx_bytes):
    pkg = OpcPackage.open(docx_bytes)
    old = pkg["/docProps/core.xml"]
    pkg.trees.get(old)

    new = pkg.add_part("docProps/core.xml", b"<core/>")

    assert old not in pkg.trees
    assert pkg["/docProps/core.xml"] is new
    assert pkg.trees.get(new).getroot().tag == "core"


def test_bad_zip_raises():
    with pytest.raises(zipfile.BadZipFile):
        OpcPackage.open(b"not a zip file")
