"""
最小的 OPC 包实现：读取 zip 容器中的部件、定位主文档部件并保存。

用法:
    with OpcPackage.open("input.docx") as pkg:
        part = pkg.main_document_part
        tree = pkg.trees.get(part)
        ...
        pkg.trees.put(part)
        pkg.save("output.docx")

包拥有唯一的 PartTreeCache（pkg.trees）；关闭包或移除部件会丢弃对应的缓存树。
这里不做内容类型、关系完整性或架构验证。
"""

import io
import logging
import posixpath
import zipfile
from pathlib import Path

from defusedxml import ElementTree as SafeET

from .cache import PartTreeCache
from .config import OpenSettings
from .errors import PartNotFoundError, PartParseError
from .namespaces import (
    OFFICE_DOCUMENT_REL_TYPES,
    PACKAGE_RELATIONSHIPS_NAMESPACE,
    qn,
)

logger = logging.getLogger(__name__)

PACKAGE_RELS_PART = "/_rels/.rels"


class _PartWriter(io.BytesIO):
    """关闭时将写入的字节提交给部件。"""

    def __init__(self, part, initial=b""):
        super().__init__(initial)
        self.seek(0, io.SEEK_END)
        self._part = part

    def close(self):
        if not self.closed:
            self._part._blob = self.getvalue()
        super().close()


class Part:
    """包中的一个部件：名称 + 字节内容。

    部件的身份是对象本身；树缓存以部件对象为键。
    """

    def __init__(self, name, blob=b"", writable=True, zipinfo=None):
        if not name.startswith("/"):
            name = "/" + name
        self.name = name
        self.writable = writable
        self.zipinfo = zipinfo
        self._blob = blob

    def __repr__(self):
        return f"<Part {self.name}>"

    @property
    def blob(self):
        return self._blob

    def open_read(self):
        """返回部件内容的只读字节流。"""
        return io.BytesIO(self._blob)

    def open_write(self, truncate=True):
        """返回写入流，关闭时替换部件内容。

        抛出:
            PermissionError: 如果部件所在的包以只读方式打开
        """
        if not self.writable:
            raise PermissionError(f"Part {self.name} is read-only")
        return _PartWriter(self, b"" if truncate else self._blob)


class OpcPackage:
    """按 zip 成员顺序保存部件的文档包。"""

    def __init__(self, parts=(), writable=True, settings=None):
        self._parts = {}
        for part in parts:
            self._parts[part.name] = part
        self.writable = writable
        self.settings = settings or OpenSettings()
        self.trees = PartTreeCache()
        self.closed = False

    @classmethod
    def open(cls, source, writable=True, settings=None):
        """从路径、字节或二进制流打开包。

        参数:
            source: .docx 等文件的路径、bytes 或已打开的二进制流
            writable: 为 False 时所有部件拒绝写入
            settings: OpenSettings；其中的标记兼容性处理模式仅被记录

        抛出:
            zipfile.BadZipFile: 如果 source 不是 zip 容器
            OSError: 如果无法读取 source
        """
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(source)
        elif isinstance(source, (str, Path)):
            source = Path(source)

        parts = []
        with zipfile.ZipFile(source, "r") as zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue
                parts.append(
                    Part(info.filename, zf.read(info), writable=writable, zipinfo=info)
                )

        pkg = cls(parts, writable=writable, settings=settings)
        logger.debug(
            "Opened package with %d part(s), process mode %s, target %s",
            len(parts),
            pkg.settings.process_mode.value,
            pkg.settings.target_version.value,
        )
        return pkg

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __iter__(self):
        return iter(self._parts.values())

    def __len__(self):
        return len(self._parts)

    def __contains__(self, name):
        return _normalize_name(name) in self._parts

    def __getitem__(self, name):
        try:
            return self._parts[_normalize_name(name)]
        except KeyError:
            raise PartNotFoundError(f"Part not found: {name}") from None

    def add_part(self, name, blob=b""):
        """添加（或替换）部件并返回它。"""
        name = _normalize_name(name)
        old = self._parts.get(name)
        if old is not None:
            self.trees.invalidate(old)
        part = Part(name, blob, writable=self.writable)
        self._parts[name] = part
        return part

    def remove_part(self, name):
        """移除部件并丢弃其缓存树。"""
        part = self[name]
        self.trees.invalidate(part)
        del self._parts[part.name]

    @property
    def main_document_part(self):
        """通过 /_rels/.rels 中的 officeDocument 关系定位主文档部件。

        抛出:
            PartNotFoundError: 如果缺少关系或目标部件
            PartParseError: 如果关系部件不是格式良好的 XML
        """
        rels = self[PACKAGE_RELS_PART]
        try:
            root = SafeET.fromstring(rels.blob)
        except SafeET.ParseError as e:
            raise PartParseError(rels.name, str(e)) from e

        for rel in root.iter(qn(PACKAGE_RELATIONSHIPS_NAMESPACE, "Relationship")):
            if rel.get("Type") not in OFFICE_DOCUMENT_REL_TYPES:
                continue
            if rel.get("TargetMode") == "External":
                continue
            return self[_resolve_target(rel.get("Target", ""))]

        raise PartNotFoundError("Package has no officeDocument relationship")

    def save(self, target):
        """将所有部件写入 zip 容器（路径或二进制流）。

        只写出部件当前的字节内容；缓存中尚未 put() 的修改不会被保存。
        """
        if isinstance(target, (str, Path)):
            target = Path(target)
            target.parent.mkdir(parents=True, exist_ok=True)

        with zipfile.ZipFile(target, "w", zipfile.ZIP_DEFLATED) as zf:
            for part in self._parts.values():
                arcname = part.name.lstrip("/")
                compress_type = (
                    part.zipinfo.compress_type if part.zipinfo else zipfile.ZIP_DEFLATED
                )
                zf.writestr(arcname, part.blob, compress_type=compress_type)
        logger.debug("Saved package with %d part(s)", len(self._parts))

    def close(self):
        """关闭包并丢弃所有缓存树。"""
        self.trees.clear()
        self.closed = True


def _normalize_name(name):
    return name if name.startswith("/") else "/" + name


def _resolve_target(target):
    # 包级关系的目标相对于包根目录
    return posixpath.normpath(posixpath.join("/", target))
