"""
在根元素上注册可忽略（mc:Ignorable）的扩展命名空间。

不理解扩展命名空间的使用方可以安全跳过 mc:Ignorable 中列出的前缀，
因此带有私有属性（例如 pt14:Unid）的文档在 Word 等程序中仍能打开。

只修改根元素的命名空间声明和属性，不遍历后代元素。
"""

import logging

import lxml.etree

from .errors import InvariantViolation, PrefixConflictError
from .namespaces import IGNORABLE, MC_NAMESPACE, MC_PREFIX, qn

logger = logging.getLogger(__name__)


def ensure_namespace_declared(root, prefix, namespace_uri) -> bool:
    """确保根元素上声明了 xmlns:prefix="namespace_uri"。

    只在根元素上新增声明，后代元素的命名空间声明保持不变。

    返回:
        bool: 如果新增了声明则为 True

    抛出:
        PrefixConflictError: 如果前缀已绑定到其他 URI（不覆盖已有声明）
        InvariantViolation: 如果该 URI 已在根元素上以其他前缀声明
    """
    existing = root.nsmap.get(prefix)
    if existing == namespace_uri:
        return False
    if existing is not None:
        raise PrefixConflictError(prefix, existing, namespace_uri)
    aliases = sorted(p for p, uri in root.nsmap.items() if p and uri == namespace_uri)
    if aliases:
        raise InvariantViolation(
            f"Namespace {namespace_uri} is already declared on the root "
            f"as '{aliases[0]}', cannot also declare it as '{prefix}'"
        )

    # lxml 的 nsmap 是只读的。在根元素上设置该命名空间的属性时，lxml 只在根元素上
    # 新增声明，并使用 register_namespace() 登记的前缀；随后删除这个临时属性。
    lxml.etree.register_namespace(prefix, namespace_uri)
    marker = qn(namespace_uri, "declare")
    root.set(marker, "")
    del root.attrib[marker]
    logger.debug("Declared xmlns:%s=%s on root", prefix, namespace_uri)
    return True


def ignorable_prefixes(root):
    """返回 mc:Ignorable 中的前缀列表（按原有顺序，忽略多余空格）。"""
    value = root.get(IGNORABLE)
    if not value:
        return []
    return [token for token in value.split(" ") if token]


def add_ignorable_prefix(root, prefix) -> bool:
    """将 prefix 追加到根元素的 mc:Ignorable 列表末尾。

    前缀区分大小写。已存在时不做任何修改；否则保留原有标记及其顺序
    （包括重复的标记），去掉空白标记后以单个空格重新拼接。

    返回:
        bool: 如果属性被修改则为 True
    """
    tokens = ignorable_prefixes(root)
    if prefix in tokens:
        return False

    # 让属性以 mc: 前缀输出，而不是 lxml 自动生成的 ns0:
    if MC_NAMESPACE not in root.nsmap.values() and MC_PREFIX not in root.nsmap:
        ensure_namespace_declared(root, MC_PREFIX, MC_NAMESPACE)

    tokens.append(prefix)
    root.set(IGNORABLE, " ".join(tokens))
    logger.debug("mc:Ignorable is now %r", root.get(IGNORABLE))
    return True


def register_ignorable(root, prefix, namespace_uri) -> bool:
    """声明扩展命名空间并将其前缀标记为可忽略。

    两个步骤都是幂等的，重复调用不会产生任何修改。

    参数:
        root: 文档根元素
        prefix: 命名空间前缀（例如 "pt14"）
        namespace_uri: 命名空间 URI

    返回:
        bool: 如果根元素被修改则为 True

    抛出:
        PrefixConflictError: 如果前缀已绑定到其他 URI

    示例:
        register_ignorable(root, "pt14", "http://powertools.codeplex.com/2011")
        # <w:document xmlns:pt14="..." mc:Ignorable="w14 pt14">
    """
    declared = ensure_namespace_declared(root, prefix, namespace_uri)
    appended = add_ignorable_prefix(root, prefix)
    return declared or appended
