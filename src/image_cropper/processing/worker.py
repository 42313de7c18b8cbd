"""批处理中单个文件的工作单元。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PIL import Image

from image_cropper.core.config import ExportConfig
from image_cropper.core.exceptions import (
    CropOutOfBoundsError,
    DirectoryCreateError,
    ImageLoadingError,
    ImageWriteError,
    InvalidCropError,
    MaskError,
)
from image_cropper.core.models import (
    STATUS_ERROR_CROP,
    STATUS_ERROR_LOAD,
    STATUS_ERROR_MASK,
    STATUS_ERROR_WRITE,
    STATUS_EXPORTED,
    STATUS_SKIP_OUT_OF_BOUNDS,
    BatchItem,
    ItemOutcome,
)
from image_cropper.core.output_manager import save_png
from image_cropper.processing.image_loader import load_image
from image_cropper.processing.transform import crop_image, mask_and_resize

LOGGER = logging.getLogger(__name__)


def run_item(item: BatchItem, config: ExportConfig, destination: Path) -> ItemOutcome:
    """执行单个文件的 加载 -> 变换 -> 写出 流程，所有失败都转换为结果记录。"""

    name = item.display_name
    image: Optional[Image.Image] = None
    cropped: Optional[Image.Image] = None
    resized: Optional[Image.Image] = None

    try:
        image = load_image(item.source_path)
    except ImageLoadingError as exc:
        return ItemOutcome(item=item, status=STATUS_ERROR_LOAD, message=f"{name}: Load failed: {exc}")

    try:
        cropped = crop_image(image, config.crop)
    except InvalidCropError as exc:
        _close_if_needed(image)
        return ItemOutcome(item=item, status=STATUS_ERROR_CROP, message=f"{name}: {exc}")
    except CropOutOfBoundsError:
        LOGGER.info("裁剪区域超出图片范围，跳过：%s (%dx%d)", name, image.width, image.height)
        _close_if_needed(image)
        return ItemOutcome(item=item, status=STATUS_SKIP_OUT_OF_BOUNDS)

    try:
        resized = mask_and_resize(cropped, config)
    except MaskError as exc:
        _close_if_needed(image, cropped)
        return ItemOutcome(item=item, status=STATUS_ERROR_MASK, message=f"{name}: {exc}")

    try:
        save_png(resized, destination)
    except (DirectoryCreateError, ImageWriteError) as exc:
        _close_if_needed(image, cropped, resized)
        return ItemOutcome(item=item, status=STATUS_ERROR_WRITE, message=f"{name}: {exc}")

    _close_if_needed(image, cropped, resized)
    return ItemOutcome(item=item, status=STATUS_EXPORTED, output_path=destination)


def _close_if_needed(*images: Optional[Image.Image]) -> None:
    for img in images:
        if img is not None:
            img.close()
