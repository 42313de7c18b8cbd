"""核心数据模型定义。"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

STATUS_EXPORTED = "exported"
STATUS_SKIP_OUT_OF_BOUNDS = "skip-out-of-bounds"
STATUS_ERROR_LOAD = "error-load"
STATUS_ERROR_CROP = "error-crop"
STATUS_ERROR_MASK = "error-mask"
STATUS_ERROR_WRITE = "error-write"


@dataclass(frozen=True, slots=True)
class BatchItem:
    """目录扫描阶段得到的源图片信息。"""

    source_path: Path
    display_name: str
    extension: str

    @property
    def stem(self) -> str:
        return self.source_path.stem or "image"


@dataclass(slots=True)
class ItemOutcome:
    """记录单个文件的处理结果。"""

    item: BatchItem
    status: str
    message: Optional[str] = None
    output_path: Optional[Path] = None

    @property
    def is_error(self) -> bool:
        return self.status.startswith("error")


@dataclass(slots=True)
class ExportSummary:
    """批处理的汇总结果。

    ``errors`` 按出现顺序保存面向用户的消息，包括空目录提示与取消提示；
    ``outcomes`` 保存每个已尝试文件的结果记录。
    """

    exported: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)
    outcomes: list[ItemOutcome] = field(default_factory=list)
    cancelled: bool = False

    def record(self, outcome: ItemOutcome) -> None:
        """将单个文件的结果累加进汇总。"""

        self.outcomes.append(outcome)
        if outcome.status == STATUS_EXPORTED:
            self.exported += 1
        elif outcome.status == STATUS_SKIP_OUT_OF_BOUNDS:
            self.skipped += 1
        elif outcome.message:
            self.errors.append(outcome.message)

    def mark_cancelled(self, message: str) -> None:
        self.cancelled = True
        self.errors.append(message)

    @property
    def failed(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.is_error)
