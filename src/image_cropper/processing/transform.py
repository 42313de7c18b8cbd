"""单张图片的裁剪、蒙版与缩放流程。"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image

from image_cropper.core.config import SHAPE_ROUNDED, CropRect, ExportConfig, validate_export_config
from image_cropper.core.exceptions import CropOutOfBoundsError, InvalidCropError
from image_cropper.core.output_manager import save_png
from image_cropper.processing.image_loader import load_image
from image_cropper.processing.masking import apply_rounded_mask

LOGGER = logging.getLogger(__name__)


def check_crop(crop: CropRect, size: tuple[int, int]) -> None:
    """校验裁剪矩形：尺寸为 0 时抛出 InvalidCropError，越界时抛出 CropOutOfBoundsError。"""

    if crop.is_empty():
        raise InvalidCropError("Crop size must be greater than zero.")

    width, height = size
    if not crop.fits_within(width, height):
        raise CropOutOfBoundsError("Crop rectangle is out of bounds.")


def crop_image(image: Image.Image, crop: CropRect) -> Image.Image:
    """校验后裁剪出新的图像。"""

    check_crop(crop, image.size)
    cropped = image.crop(crop.box)
    cropped.load()
    return cropped


def mask_and_resize(cropped: Image.Image, config: ExportConfig) -> Image.Image:
    """对已裁剪的图像应用可选蒙版，再用 Lanczos 缩放到目标尺寸。

    cropped 在圆角模式下会被原地修改。
    """

    if config.mask.shape == SHAPE_ROUNDED:
        apply_rounded_mask(
            cropped,
            config.mask.radius_px,
            config.mask.inset_px,
            config.mask.transparent,
        )

    # 缩放放在最后，蒙版边缘与内容一起被抗锯齿。
    return cropped.resize(tuple(config.target_size), Image.LANCZOS)


def transform_image(image: Image.Image, config: ExportConfig) -> Image.Image:
    """裁剪 -> 蒙版 -> 缩放，返回新的图像，不修改输入。"""

    validate_export_config(config)
    source = image if image.mode == "RGBA" else image.convert("RGBA")
    cropped = crop_image(source, config.crop)
    try:
        return mask_and_resize(cropped, config)
    finally:
        cropped.close()


def export_single(input_path: Path, output_path: Path, config: ExportConfig) -> Path:
    """单张导出：加载、变换并写出 PNG。

    任一步骤失败都会直接抛出 ImageCropperError 子类，且不会写出任何文件。
    """

    validate_export_config(config)
    LOGGER.info("导出单张图片 %s -> %s", input_path, output_path)

    image = load_image(Path(input_path))
    try:
        result = transform_image(image, config)
    finally:
        image.close()

    try:
        save_png(result, Path(output_path))
    finally:
        result.close()

    return Path(output_path)
