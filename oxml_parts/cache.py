"""
按部件缓存已解析的 XML 树。

用法:
    cache = PartTreeCache()
    tree = cache.get(part)          # 首次访问时解析
    assert cache.get(part) is tree  # 之后返回同一实例
    ...                             # 就地修改 tree
    cache.put(part)                 # 序列化并覆盖部件内容

get() 只读取，put() 只写入；多次修改可以合并为一次写入。
缓存不加锁：同一部件上的 get/修改/put 必须由调用方串行化。
"""

import logging

import lxml.etree

from .errors import CacheMissError, PartParseError

logger = logging.getLogger(__name__)


def _make_parser():
    """创建不解析实体、不访问网络的 XML 解析器。"""
    return lxml.etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        remove_blank_text=False,
    )


class PartTreeCache:
    """从部件标识到其已解析 XML 树的显式映射。

    部件以对象本身为键（而不是路径），因此不同包中同名的部件
    互不干扰。每个部件最多缓存一棵树。
    """

    def __init__(self):
        self._trees = {}

    def __contains__(self, part):
        return part in self._trees

    def __len__(self):
        return len(self._trees)

    def get(self, part):
        """返回部件的缓存树，必要时先解析部件内容。

        参数:
            part: 提供 open_read() 的部件

        返回:
            lxml.etree._ElementTree: 缓存的树（重复调用返回同一实例）

        抛出:
            PartParseError: 如果部件内容不是格式良好的 XML（不缓存任何内容）
            OSError: 如果无法读取部件流
        """
        tree = self._trees.get(part)
        if tree is not None:
            logger.debug("Cache hit for %s", part.name)
            return tree

        with part.open_read() as stream:
            try:
                tree = lxml.etree.parse(stream, _make_parser())
            except lxml.etree.XMLSyntaxError as e:
                raise PartParseError(part.name, str(e)) from e

        self._trees[part] = tree
        logger.debug("Parsed and cached %s", part.name)
        return tree

    def put(self, part):
        """将部件的缓存树写回部件，完全替换原有内容。

        输出包含 XML 声明，保留文档原有的编码和 standalone 标志，
        属性顺序与内存中的树一致。

        参数:
            part: 提供 open_write() 的部件

        抛出:
            CacheMissError: 如果此前没有对该部件调用 get()
            OSError: 如果无法打开部件的写入流
        """
        tree = self._trees.get(part)
        if tree is None:
            raise CacheMissError(part.name)

        docinfo = tree.docinfo
        with part.open_write(truncate=True) as stream:
            tree.write(
                stream,
                xml_declaration=True,
                encoding=docinfo.encoding or "UTF-8",
                standalone=docinfo.standalone,
            )
        logger.debug("Flushed %s", part.name)

    def put_all(self):
        """写回所有已缓存的树，返回写回的部件数量。"""
        for part in list(self._trees):
            self.put(part)
        return len(self._trees)

    def invalidate(self, part):
        """丢弃部件的缓存树（部件被释放时调用）。"""
        if self._trees.pop(part, None) is not None:
            logger.debug("Dropped cached tree for %s", part.name)

    def clear(self):
        """丢弃所有缓存树（包关闭时调用）。"""
        self._trees.clear()
