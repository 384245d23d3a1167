"""
主文档部件的端到端处理：加载 → 分配 Unid → 注册可忽略命名空间 → 写回。

用法:
    from oxml_parts.document import stamp_document, verify_document

    report = stamp_document("input.docx", "output.docx")
    missing = verify_document("output.docx")   # [] 表示全部元素都有 Unid

三个步骤不是事务性的：如果写回失败，内存中的树仍保留已分配的 ID 和
mc:Ignorable 修改，之后成功的 put() 会把它们写出。由于每一步都是幂等的，
整体重跑是安全的。前缀冲突在分配 ID 之前就会报出，此时树保持不变。
"""

import logging
from dataclasses import dataclass

from .compat import ensure_namespace_declared, register_ignorable
from .config import OpenSettings
from .namespaces import qn
from .package import OpcPackage
from .unid import assign_unids, find_missing_unids

logger = logging.getLogger(__name__)


@dataclass
class StampReport:
    part_name: str
    stamped: int
    registered: bool


def stamp_part(package, part, settings=None):
    """对包中的一个部件执行 分配 ID + 注册命名空间，然后写回部件。

    参数:
        package: 拥有树缓存的 OpcPackage
        part: 要处理的部件
        settings: OpenSettings（默认使用包的设置）

    返回:
        StampReport: 处理结果
    """
    settings = settings or package.settings
    attr = qn(settings.namespace_uri, "Unid")

    root = package.trees.get(part).getroot()
    # 先在根元素上声明前缀，Unid 属性才会复用它，而不是在每个元素上生成 xmlns:ns0
    declared = ensure_namespace_declared(root, settings.prefix, settings.namespace_uri)
    stamped = assign_unids(root, attr=attr, include_root=settings.include_root)
    appended = register_ignorable(root, settings.prefix, settings.namespace_uri)
    registered = declared or appended
    package.trees.put(part)

    logger.info(
        "%s: stamped %d element(s), namespace %s",
        part.name,
        stamped,
        "registered" if registered else "already registered",
    )
    return StampReport(part.name, stamped, registered)


def stamp_package(package, settings=None):
    """处理包的主文档部件。"""
    return stamp_part(package, package.main_document_part, settings)


def stamp_document(source, destination, settings=None):
    """打开 source 的内存副本，处理主文档部件并保存到 destination。

    参数:
        source: 源文件路径、bytes 或二进制流（不会被修改）
        destination: 目标路径或二进制流
        settings: OpenSettings

    返回:
        StampReport: 处理结果
    """
    settings = settings or OpenSettings()
    with OpcPackage.open(source, writable=True, settings=settings) as package:
        report = stamp_package(package, settings)
        package.save(destination)
    return report


def verify_document(source, settings=None):
    """以只读方式打开 source，返回主文档部件中缺少 Unid 的元素路径列表。"""
    settings = settings or OpenSettings()
    attr = qn(settings.namespace_uri, "Unid")
    with OpcPackage.open(source, writable=False, settings=settings) as package:
        tree = package.trees.get(package.main_document_part)
        missing = find_missing_unids(
            tree.getroot(), attr=attr, include_root=settings.include_root
        )
        return [tree.getpath(elem) for elem in missing]
