"""批处理流水线：逐个文件执行裁剪导出，汇报进度并响应取消。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

from image_cropper.core.cancellation import CancellationToken
from image_cropper.core.config import BatchJobConfig, ExportConfig, NamingMode, validate_export_config
from image_cropper.core.models import BatchItem, ExportSummary
from image_cropper.core.output_manager import OutputManager
from image_cropper.core.progress import ExportProgress
from image_cropper.core.scanner import list_images_in_dir
from image_cropper.processing.worker import run_item

LOGGER = logging.getLogger(__name__)

NO_IMAGES_MESSAGE = "No supported images found."
CANCELLED_MESSAGE = "Export cancelled."

ProgressCallback = Optional[Callable[[ExportProgress], None]]


def run_batch(
    items: Sequence[BatchItem],
    output_dir: Path,
    config: ExportConfig,
    naming_mode: NamingMode,
    progress_callback: ProgressCallback = None,
    cancel_token: Optional[CancellationToken] = None,
) -> ExportSummary:
    """按给定顺序依次处理文件并返回汇总。

    配置错误（命名模式、形状、目标尺寸）在处理任何文件之前抛出
    InvalidConfigurationError；单个文件的失败只记录在汇总中。
    """

    token = cancel_token if cancel_token is not None else CancellationToken()
    token.reset()

    summary = ExportSummary()
    total = len(items)
    if total == 0:
        LOGGER.info("没有需要处理的图片")
        summary.errors.append(NO_IMAGES_MESSAGE)
        return summary

    output_manager = OutputManager(output_dir, naming_mode)
    validate_export_config(config)

    LOGGER.info("开始批量导出 %d 个文件 -> %s", total, output_manager.output_dir)
    for index, item in enumerate(items, start=1):
        if token.is_cancelled:
            LOGGER.info("导出已取消，剩余 %d 个文件未处理", total - index + 1)
            summary.mark_cancelled(CANCELLED_MESSAGE)
            break

        _emit_progress(progress_callback, index, total, item.display_name)

        outcome = run_item(item, config, output_manager.destination_for(item))
        if outcome.is_error:
            LOGGER.warning("处理失败：%s", outcome.message)
        summary.record(outcome)

    LOGGER.info(
        "批量导出结束：成功 %d，跳过 %d，失败 %d",
        summary.exported,
        summary.skipped,
        summary.failed,
    )
    return summary


def export_batch(
    job: BatchJobConfig,
    progress_callback: ProgressCallback = None,
    cancel_token: Optional[CancellationToken] = None,
) -> ExportSummary:
    """批量导出入口：扫描输入目录后执行 run_batch。"""

    LOGGER.info("开始扫描输入目录 %s", job.input_dir)
    items = list_images_in_dir(job.input_dir)
    return run_batch(
        items,
        job.output_dir,
        job.export,
        job.naming_mode,
        progress_callback=progress_callback,
        cancel_token=cancel_token,
    )


def _emit_progress(callback: ProgressCallback, index: int, total: int, file_name: str) -> None:
    if not callback:
        return
    callback(ExportProgress(current_index=index, total=total, file_name=file_name))
