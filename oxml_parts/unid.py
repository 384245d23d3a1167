"""
为元素分配唯一 ID（Unid）。

Unid 用于在多次 加载/编辑/保存 之间跟踪元素身份，因此已有的值从不改写：
重复运行 assign_unids() 只会为尚无 Unid 的元素补齐。

根元素策略：默认不为根元素分配 Unid（根元素是文档最外层的包装元素），
需要时传入 include_root=True。
"""

import logging
import uuid

import lxml.etree

from .errors import DuplicateUnidError, InvariantViolation
from .namespaces import UNID

logger = logging.getLogger(__name__)


def new_unid() -> str:
    """生成 32 位小写十六进制、不含分隔符的随机 ID。"""
    return uuid.uuid4().hex


def _iter_elements(root, include_root):
    if include_root:
        yield root
    # 只遍历元素节点；注释和处理指令没有属性
    yield from root.iterdescendants(tag=lxml.etree.Element)


def _require_root(root):
    if root is None:
        raise InvariantViolation("Tree has no root element")


def assign_unids(root, attr=UNID, include_root=False, id_factory=new_unid) -> int:
    """为 root 的每个后代元素（按文档顺序）补齐 Unid 属性。

    已携带该属性的元素保持不变。

    参数:
        root: 要处理的根元素
        attr: Clark 表示法的属性名（默认 {http://powertools.codeplex.com/2011}Unid）
        include_root: 是否同时为根元素分配 ID
        id_factory: 生成新 ID 的可调用对象

    返回:
        int: 新分配 ID 的元素数量

    抛出:
        InvariantViolation: 如果 root 为 None
        DuplicateUnidError: 如果树中出现重复的 Unid 值
    """
    _require_root(root)

    # 先收集已有的值：新 ID 不能与后面才遍历到的元素冲突
    seen = set()
    pending = []
    for elem in _iter_elements(root, include_root):
        unid = elem.get(attr)
        if unid is None:
            pending.append(elem)
            continue
        if unid in seen:
            raise DuplicateUnidError(unid)
        seen.add(unid)

    for elem in pending:
        unid = id_factory()
        if unid in seen:
            raise DuplicateUnidError(unid)
        seen.add(unid)
        elem.set(attr, unid)

    logger.debug(
        "Assigned %d new Unid value(s), %d already present",
        len(pending),
        len(seen) - len(pending),
    )
    return len(pending)


def find_missing_unids(root, attr=UNID, include_root=False):
    """返回缺少 Unid 属性的元素列表（按文档顺序）。"""
    _require_root(root)
    return [
        elem for elem in _iter_elements(root, include_root) if elem.get(attr) is None
    ]


def collect_unids(root, attr=UNID, include_root=False):
    """返回 {元素路径: Unid} 映射，仅包含已携带 Unid 的元素。

    路径为 lxml getpath() 给出的 XPath，在同一文档的多次保存之间保持稳定，
    可用于比较保存前后的 ID。
    """
    _require_root(root)
    tree = root.getroottree()
    return {
        tree.getpath(elem): elem.get(attr)
        for elem in _iter_elements(root, include_root)
        if elem.get(attr) is not None
    }
