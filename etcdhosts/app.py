"""
etcdhosts 同步控制模块
"""

import logging
import sys
from typing import List, Optional

from etcdhosts.config import Config
from etcdhosts.errors import KeyNotFoundError
from etcdhosts.hostfile import HostFile
from etcdhosts.hosts_manager import HostsFileManager
from etcdhosts.models import new_host_entry
from etcdhosts.store import HostsStore, HostsVersion


class HostsSync:
    """
    主控制器，协调存储、hosts 文档和本地 hosts 文件

    - 从存储加载 hosts 文档（可指定修订号）
    - 编辑条目并发布回存储
    - 把存储中的 hosts 拉取到本地 hosts 文件
    - 把本地 hosts 文件中的条目推送到存储
    - 查询历史并恢复旧版本
    """

    def __init__(self, config: Config, store: HostsStore):
        """
        初始化同步控制器

        参数:
            config: 应用配置
            store: hosts 存储

        异常:
            ValueError: 如果配置无效
        """
        self.config = config
        self.config.validate()

        self.logger = self._setup_logging()
        self.store = store
        self.hosts_manager = HostsFileManager(
            config.hosts_file_path,
            self.logger
        )

    def _setup_logging(self) -> logging.Logger:
        """
        配置日志系统

        返回:
            配置好的日志记录器实例
        """
        logger = logging.getLogger('etcdhosts')
        logger.setLevel(self.config.log_level)

        # 避免重复的处理器
        if logger.handlers:
            return logger

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(self.config.log_level)

        # 格式: 时间戳 - 名称 - 级别 - 消息
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)

        logger.addHandler(handler)
        return logger

    def _parse(self, text: str) -> HostFile:
        hostfile = HostFile(text, self.logger)
        for line_number, error in hostfile.errors:
            self.logger.warning(f"第 {line_number} 行: {error}")
        return hostfile

    def load(self, revision: Optional[int] = None) -> HostFile:
        """
        从存储加载 hosts 文档

        参数:
            revision: 修订号，None 表示最新

        返回:
            解析后的 HostFile，键不存在且未指定修订号时为空文档

        异常:
            StoreError: 如果读取失败，或指定的修订号无法读取
        """
        try:
            text = self.store.get_hosts_with_revision(revision)
        except KeyNotFoundError:
            if revision is not None:
                raise
            self.logger.info(f"存储中还没有 hosts: {self.config.hosts_key}")
            text = ""
        return self._parse(text)

    def publish(self, hostfile: HostFile) -> str:
        """
        格式化 hosts 文档并写入存储

        返回:
            写入的文本
        """
        text = hostfile.format(self.config.format)
        self.store.put_hosts(text)
        self.logger.info(f"已发布 {len(hostfile)} 条主机记录到 {self.config.hosts_key}")
        return text

    def add_entry(self, domain: str, address: str, enabled: bool = True) -> HostFile:
        """
        添加或更新一条主机记录并发布

        异常:
            ParseError: 如果域名或地址无效
        """
        entry = new_host_entry(domain, address, enabled)
        hostfile = self.load()
        diagnostic = hostfile.hosts.add(entry)
        if diagnostic is not None:
            self.logger.warning(str(diagnostic))
        self.publish(hostfile)
        return hostfile

    def remove_domain(self, domain: str) -> int:
        """删除域名的所有条目并发布，返回删除数量"""
        hostfile = self.load()
        removed = hostfile.hosts.remove_domain(domain)
        if removed:
            self.publish(hostfile)
            self.logger.info(f"已移除主机记录: {domain}")
        else:
            self.logger.info(f"没有要移除的主机记录: {domain}")
        return removed

    def enable(self, domain: str) -> HostFile:
        """
        启用域名并发布

        异常:
            NotFoundError: 如果域名不存在
        """
        hostfile = self.load()
        hostfile.hosts.enable(domain)
        self.publish(hostfile)
        return hostfile

    def disable(self, domain: str) -> HostFile:
        """
        禁用域名并发布

        异常:
            NotFoundError: 如果域名不存在
        """
        hostfile = self.load()
        hostfile.hosts.disable(domain)
        self.publish(hostfile)
        return hostfile

    def history(self) -> List[HostsVersion]:
        return self.store.get_hosts_history()

    def restore(self, revision: int) -> HostFile:
        """
        把指定修订号的 hosts 重新发布为最新版本

        异常:
            StoreError: 如果修订号无法读取
        """
        hostfile = self.load(revision)
        self.publish(hostfile)
        self.logger.info(f"已恢复修订号 {revision}")
        return hostfile

    def pull(self) -> HostFile:
        """
        把存储中的 hosts 写入本地 hosts 文件的管理区块
        """
        hostfile = self.load()
        self.hosts_manager.update_hosts(hostfile.format(self.config.format))
        return hostfile

    def push(self) -> HostFile:
        """
        把本地 hosts 文件中的条目合并到存储中并发布

        只推送管理区块之外的行；区块内容来自存储，不会被当作本地条目。
        本地条目覆盖存储中同域名同地址族的条目。
        """
        hostfile = self.load()
        local_lines = self.hosts_manager.read_existing_entries()
        local = self._parse("".join(f"{line}\n" for line in local_lines))

        conflicts = 0
        for entry in local.hosts:
            diagnostic = hostfile.hosts.add(entry)
            if diagnostic is not None:
                conflicts += 1
                self.logger.debug(str(diagnostic))

        if conflicts:
            self.logger.info(f"合并本地条目时有 {conflicts} 条重复或冲突")
        self.publish(hostfile)
        return hostfile

    def cleanup(self) -> None:
        """
        移除本地 hosts 文件中的管理区块
        """
        self.logger.info("正在清理本地 hosts 文件...")
        try:
            self.hosts_manager.remove_managed_entries()
            self.logger.info("清理成功完成")
        except OSError as e:
            self.logger.error(f"清理期间出错: {e}", exc_info=True)
            raise
