"""
本地 hosts 文件管理模块，支持原子性更新
"""

import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import List


class HostsFileManager:
    """
    管理本地 hosts 文件中由 etcdhosts 维护的区块

    区块位于 BEGIN_MARKER 与 END_MARKER 之间，区块外的行原样保留。
    使用原子性文件操作（临时文件 + 重命名）防止文件损坏。
    """

    BEGIN_MARKER = "# etcdhosts: begin"
    END_MARKER = "# etcdhosts: end"

    def __init__(self, hosts_path: str, logger: logging.Logger):
        """
        初始化 hosts 文件管理器

        参数:
            hosts_path: hosts 文件路径
            logger: 日志记录器实例
        """
        self.hosts_path = Path(hosts_path)
        self.logger = logger
        self.lock = threading.Lock()

    def read_text(self) -> str:
        """
        读取整个 hosts 文件

        返回:
            文件内容，文件不存在时返回空字符串
        """
        if not self.hosts_path.exists():
            self.logger.warning(f"Hosts 文件不存在: {self.hosts_path}")
            return ""
        try:
            return self.hosts_path.read_text(encoding="utf-8")
        except PermissionError:
            self.logger.error(f"读取 hosts 文件权限被拒绝: {self.hosts_path}")
            raise

    def read_existing_entries(self) -> List[str]:
        """
        读取区块外的行

        返回:
            非 etcdhosts 管理的 hosts 文件行列表
        """
        existing_lines = []
        inside = False
        for line in self.read_text().splitlines():
            if line.strip() == self.BEGIN_MARKER:
                inside = True
            elif line.strip() == self.END_MARKER:
                inside = False
            elif not inside:
                existing_lines.append(line)

        # 去掉上次写入区块时留下的分隔空行
        while existing_lines and not existing_lines[-1].strip():
            existing_lines.pop()
        return existing_lines

    def update_hosts(self, hosts_text: str) -> None:
        """
        原子性更新 hosts 文件中的区块

        参数:
            hosts_text: 已格式化的 hosts 文本

        异常:
            PermissionError: 如果没有写入 hosts 文件的权限
            OSError: 如果文件系统操作失败
        """
        with self.lock:
            new_content = self.read_existing_entries()
            managed = hosts_text.splitlines()
            if managed:
                if new_content:
                    new_content.append('')
                new_content.append(self.BEGIN_MARKER)
                new_content.extend(managed)
                new_content.append(self.END_MARKER)

            self._write(new_content)
            self.logger.info(f"已更新 {len(managed)} 行 hosts 记录: {self.hosts_path}")

    def remove_managed_entries(self) -> None:
        """
        移除 etcdhosts 管理的区块，恢复 hosts 文件
        """
        with self.lock:
            self._write(self.read_existing_entries())
            self.logger.info("已移除所有 etcdhosts 条目")

    def _write(self, lines: List[str]) -> None:
        try:
            # 写入同一目录下的临时文件，再原子性替换
            temp_fd, temp_path = tempfile.mkstemp(
                dir=self.hosts_path.parent,
                prefix='.hosts.tmp.',
                text=True
            )

            try:
                with os.fdopen(temp_fd, 'w', encoding='utf-8') as f:
                    f.write('\n'.join(lines) + '\n' if lines else '')
                os.replace(temp_path, self.hosts_path)

            except Exception:
                if os.path.exists(temp_path):
                    os.unlink(temp_path)
                raise

        except PermissionError:
            self.logger.error(
                f"写入 hosts 文件权限被拒绝: {self.hosts_path}. "
                "请确保进程具有适当的权限。"
            )
            raise
        except OSError as e:
            self.logger.error(f"更新 hosts 文件失败: {e}")
            raise
