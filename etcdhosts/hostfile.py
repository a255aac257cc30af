"""
HostFile：原始 hosts 文本及其解析结果
"""

import logging
from typing import List, Optional, Tuple, Union

from etcdhosts.errors import HostsError, ParseError
from etcdhosts.hostlist import HostList, OutputFormat
from etcdhosts.parser import parse_line

DEFAULT_OSX = """
##
# Host Database
#
# localhost is used to configure the loopback interface
# when the system is booting.  Do not change this entry.
##

127.0.0.1       localhost
255.255.255.255 broadcasthost
::1             localhost
fe80::1%lo0     localhost
"""

DEFAULT_LINUX = """
127.0.0.1   localhost
127.0.1.1   HOSTNAME

# The following lines are desirable for IPv6 capable hosts
::1     localhost ip6-localhost ip6-loopback
fe00::0 ip6-localnet
ff00::0 ip6-mcastprefix
ff02::1 ip6-allnodes
ff02::2 ip6-allrouters
ff02::3 ip6-allhosts
"""


class HostFile:
    """
    代表一个 /etc/hosts（或其他系统上的同类文件）

    保存原始字节（只读，供检查和测试使用）和从中解析出的 HostList。
    逐行解析，单行出错只记录到 errors，不会丢弃文件其余部分。
    输出是有损但确定性的：空行、纯注释行和原有空白不会保留。
    """

    def __init__(
        self,
        data: Union[bytes, str] = b"",
        logger: Optional[logging.Logger] = None
    ):
        """
        解析 hosts 文本

        参数:
            data: 原始 hosts 文件内容
            logger: 日志记录器实例，默认使用 "etcdhosts"
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._data = bytes(data)
        self.logger = logger or logging.getLogger("etcdhosts")
        self.hosts = HostList()
        self.errors: List[Tuple[int, HostsError]] = []

        self.parse()
        self.hosts.sort()

    def parse(self) -> List[Tuple[int, HostsError]]:
        """
        逐行解析原始数据并合并到 hosts

        返回:
            (行号, 错误) 列表，包括解析错误和重复/冲突诊断
        """
        errors: List[Tuple[int, HostsError]] = []
        for number, raw in enumerate(self._data.split(b"\n"), start=1):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                self.logger.debug(f"第 {number} 行不是有效的 UTF-8: {e}")
                errors.append((number, ParseError(f"第 {number} 行不是有效的 UTF-8")))
                continue

            if not line.strip():
                continue
            try:
                entries = parse_line(line)
            except ParseError as e:
                self.logger.debug(f"第 {number} 行无法解析: {e}")
                errors.append((number, e))
                continue

            for entry in entries:
                diagnostic = self.hosts.add(entry)
                if diagnostic is not None:
                    errors.append((number, diagnostic))

        self.errors.extend(errors)
        return errors

    def get_data(self) -> bytes:
        """返回加载时的原始数据快照"""
        return self._data

    def format(self, output_format: OutputFormat = OutputFormat.UNIX) -> str:
        """
        格式化为目标系统的 hosts 文件文本

        1. 按 IP 地址排序
        2. 127.* 排在最前（避免启动时解析器出错）
        3. localhost 总是排在同一地址族的第一个
        4. 禁用的条目以 "# " 开头输出
        """
        return self.hosts.format(output_format)

    def dump(self) -> str:
        return self.hosts.dump()

    def __len__(self) -> int:
        return len(self.hosts)
