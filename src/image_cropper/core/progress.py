"""进度更新的数据模型。"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ExportProgress:
    """开始处理某个文件时发出的进度事件，current_index 从 1 开始。"""

    current_index: int
    total: int
    file_name: str
