"""命令行入口。"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional, Tuple

import typer
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from image_cropper.core.cancellation import CancellationToken
from image_cropper.core.config import (
    NAMING_IDENTITY,
    SHAPE_ROUNDED,
    BatchJobConfig,
    CropRect,
    ExportConfig,
    MaskConfig,
)
from image_cropper.core.exceptions import ImageCropperError, InvalidConfigurationError
from image_cropper.core.models import ExportSummary
from image_cropper.core.progress import ExportProgress
from image_cropper.core.scanner import list_images_in_dir
from image_cropper.processing.pipeline import export_batch
from image_cropper.processing.transform import export_single
from image_cropper.utils.logging import setup_logging

app = typer.Typer(help="图片裁剪、圆角蒙版与缩放导出工具。")

LOGGER = logging.getLogger(__name__)


def _parse_crop(value: str) -> CropRect:
    parts = value.split(",")
    if len(parts) != 4:
        raise typer.BadParameter("裁剪区域必须形如 x,y,w,h")
    try:
        x, y, w, h = (int(part.strip()) for part in parts)
    except ValueError as exc:
        raise typer.BadParameter("裁剪区域必须为整数") from exc
    if min(x, y, w, h) < 0:
        raise typer.BadParameter("裁剪区域不能为负数")
    return CropRect(x=x, y=y, w=w, h=h)


def _parse_size(value: str) -> Tuple[int, int]:
    parts = value.lower().split("x")
    if len(parts) != 2:
        raise typer.BadParameter("目标尺寸必须形如 1600x1200")
    try:
        w = int(parts[0])
        h = int(parts[1])
    except ValueError as exc:
        raise typer.BadParameter("目标尺寸必须为整数") from exc
    if w <= 0 or h <= 0:
        raise typer.BadParameter("目标尺寸必须大于 0")
    return w, h


def _build_export_config(
    crop: str,
    shape: str,
    radius: int,
    inset: int,
    size: str,
    transparent: bool,
) -> ExportConfig:
    return ExportConfig(
        crop=_parse_crop(crop),
        mask=MaskConfig(shape=shape, radius_px=radius, inset_px=inset, transparent=transparent),
        target_size=_parse_size(size),
    )


def _build_progress_callback(progress: Progress):
    task_id: Optional[int] = None

    def callback(update: ExportProgress) -> None:
        nonlocal task_id
        if task_id is None:
            task_id = progress.add_task("导出图片", total=update.total)
        progress.update(
            task_id,
            completed=update.current_index - 1,
            description=f"导出 {update.file_name}",
        )

    def finish(attempted: int) -> None:
        if task_id is not None:
            progress.update(task_id, completed=attempted, description="导出图片")

    return callback, finish


def _join_until_done(worker: threading.Thread) -> None:
    """等待工作线程结束，期间再次收到的中断信号被忽略。"""

    while worker.is_alive():
        try:
            worker.join(timeout=0.1)
        except KeyboardInterrupt:
            LOGGER.warning("导出正在停止，请等待当前文件完成")


def _print_summary(summary: ExportSummary) -> None:
    typer.echo(f"导出完成：成功 {summary.exported} 张，跳过 {summary.skipped} 张，失败 {summary.failed} 张。")
    for message in summary.errors:
        typer.echo(f"  - {message}")


@app.command("single")
def single_cli(  # noqa: PLR0913
    source: Path = typer.Argument(..., help="源图片文件"),
    destination: Path = typer.Argument(..., help="输出 PNG 文件路径"),
    crop: str = typer.Option(..., "--crop", help="裁剪区域，形如 x,y,w,h"),
    shape: str = typer.Option(SHAPE_ROUNDED, "--shape", help="形状，rectangular 或 rounded"),
    radius: int = typer.Option(18, "--radius", min=0, help="圆角半径 (px)"),
    inset: int = typer.Option(0, "--inset", min=0, help="蒙版内缩 (px)"),
    size: str = typer.Option("1600x1200", "--size", help="输出尺寸，形如 1600x1200"),
    transparent: bool = typer.Option(True, "--transparent/--opaque", help="蒙版外区域透明或填充白色"),
) -> None:
    """裁剪并导出单张图片。"""

    setup_logging()
    config = _build_export_config(crop, shape, radius, inset, size, transparent)

    try:
        output_path = export_single(source.expanduser().resolve(), destination.expanduser().resolve(), config)
    except ImageCropperError as exc:
        typer.echo(f"导出失败：{exc}", err=True)
        code = 2 if isinstance(exc, InvalidConfigurationError) else 1
        raise typer.Exit(code=code) from exc

    typer.echo(f"已写入：{output_path}")


@app.command("batch")
def batch_cli(  # noqa: PLR0913
    input_dir: Path = typer.Argument(..., help="源图片目录"),
    output_dir: Path = typer.Argument(..., help="输出目录"),
    crop: str = typer.Option(..., "--crop", help="裁剪区域，形如 x,y,w,h"),
    shape: str = typer.Option(SHAPE_ROUNDED, "--shape", help="形状，rectangular 或 rounded"),
    radius: int = typer.Option(18, "--radius", min=0, help="圆角半径 (px)"),
    inset: int = typer.Option(0, "--inset", min=0, help="蒙版内缩 (px)"),
    size: str = typer.Option("1600x1200", "--size", help="输出尺寸，形如 1600x1200"),
    transparent: bool = typer.Option(True, "--transparent/--opaque", help="蒙版外区域透明或填充白色"),
    naming: str = typer.Option(NAMING_IDENTITY, "--naming", help="文件命名模式，identity 或 cropped-suffix"),
) -> None:
    """使用同一裁剪参数批量导出目录中的图片，Ctrl-C 取消剩余文件。"""

    setup_logging()
    job = BatchJobConfig(
        input_dir=input_dir.expanduser().resolve(),
        output_dir=output_dir.expanduser().resolve(),
        export=_build_export_config(crop, shape, radius, inset, size, transparent),
        naming_mode=naming,
    )

    token = CancellationToken()
    outcome: dict[str, object] = {}

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
    )
    callback, finish = _build_progress_callback(progress)

    def _worker() -> None:
        try:
            outcome["summary"] = export_batch(job, progress_callback=callback, cancel_token=token)
        except ImageCropperError as exc:
            outcome["error"] = exc
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("批量导出异常：%s", exc)
            outcome["error"] = exc

    worker = threading.Thread(target=_worker, name="batch-export", daemon=True)
    with progress:
        worker.start()
        try:
            while worker.is_alive():
                worker.join(timeout=0.1)
        except KeyboardInterrupt:
            LOGGER.warning("收到中断信号，当前文件完成后停止导出")
            token.cancel()
            _join_until_done(worker)

        summary = outcome.get("summary")
        if isinstance(summary, ExportSummary):
            finish(len(summary.outcomes))

    error = outcome.get("error")
    if error is not None:
        typer.echo(f"导出失败：{error}", err=True)
        code = 2 if isinstance(error, InvalidConfigurationError) else 1
        raise typer.Exit(code=code)

    if not isinstance(summary, ExportSummary):
        raise typer.Exit(code=1)
    _print_summary(summary)
    if summary.failed:
        raise typer.Exit(code=1)


@app.command("list")
def list_cli(input_dir: Path = typer.Argument(..., help="源图片目录")) -> None:
    """列出目录中可处理的图片。"""

    try:
        items = list_images_in_dir(input_dir.expanduser().resolve())
    except InvalidConfigurationError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc

    for item in items:
        typer.echo(item.display_name)
    typer.echo(f"共 {len(items)} 张图片。")


if __name__ == "__main__":
    app()
