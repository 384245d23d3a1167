import io
import sys
import zipfile
from pathlib import Path

import pytest

# 将项目根目录加入 sys.path，以便未安装时也能导入 oxml_parts
ROOT_PATH = Path(__file__).resolve().parent.parent
if ROOT_PATH.as_posix() not in sys.path:
    sys.path.insert(0, ROOT_PATH.as_posix())

from oxml_parts.package import Part  # noqa: E402

CONTENT_TYPES_XML = b"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
<Default Extension="xml" ContentType="application/xml"/>
<Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>
</Types>"""

PACKAGE_RELS_XML = b"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
<Relationship Id="rId2" Type="http://schemas.openxmlformats.org/package/2006/relationships/metadata/core-properties" Target="docProps/core.xml"/>
<Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="word/document.xml"/>
</Relationships>"""

DOCUMENT_XML = b"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<w:document xmlns:mc="http://schemas.openxmlformats.org/markup-compatibility/2006" xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main" xmlns:w14="http://schemas.microsoft.com/office/word/2010/wordml" xmlns:wp14="http://schemas.microsoft.com/office/word/2010/wordprocessingDrawing" mc:Ignorable="w14 wp14">
  <w:body>
    <w:p>
      <w:pPr><w:pStyle w:val="Heading1"/></w:pPr>
      <w:r><w:t>Title</w:t></w:r>
    </w:p>
    <!-- reviewer note -->
    <w:p>
      <w:r><w:t xml:space="preserve">Hello </w:t></w:r>
      <w:r><w:rPr><w:b/></w:rPr><w:t>world</w:t></w:r>
    </w:p>
    <w:sectPr><w:pgSz w:w="12240" w:h="15840"/></w:sectPr>
  </w:body>
</w:document>"""

# DOCUMENT_XML 中根元素之下的元素数量（不含注释）
DOCUMENT_ELEMENT_COUNT = 15

CORE_XML = b"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<cp:coreProperties xmlns:cp="http://schemas.openxmlformats.org/package/2006/metadata/core-properties" xmlns:dc="http://purl.org/dc/elements/1.1/"><dc:title>Sample</dc:title></cp:coreProperties>"""


def make_docx(document_xml=DOCUMENT_XML, rels_xml=PACKAGE_RELS_XML, extra=None):
    """在内存中构建一个最小的 .docx 包并返回其字节。"""
    members = [
        ("[Content_Types].xml", CONTENT_TYPES_XML),
        ("_rels/.rels", rels_xml),
        ("docProps/core.xml", CORE_XML),
        ("word/document.xml", document_xml),
    ]
    members.extend(extra or [])
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in members:
            if data is not None:
                zf.writestr(name, data)
    return buf.getvalue()


class CountingPart(Part):
    """记录 open_read() 调用次数的部件。"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.reads = 0

    def open_read(self):
        self.reads += 1
        return super().open_read()


@pytest.fixture
def docx_bytes():
    return make_docx()


@pytest.fixture
def docx_path(tmp_path, docx_bytes):
    path = tmp_path / "template.docx"
    path.write_bytes(docx_bytes)
    return path


@pytest.fixture
def document_part():
    return CountingPart("/word/document.xml", DOCUMENT_XML)
