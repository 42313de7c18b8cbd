"""图片加载与基础预处理实现。"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from image_cropper.core.exceptions import ImageLoadingError

LOGGER = logging.getLogger(__name__)


def load_image(path: Path) -> Image.Image:
    """加载单张图片并统一转换为 RGBA。

    不处理 EXIF 方向，裁剪坐标对应解码后的原始像素网格。
    返回值为新的 Image 对象，调用者负责关闭。
    """

    try:
        with Image.open(path) as img:
            img.load()
            if img.mode != "RGBA":
                return img.convert("RGBA")
            return img.copy()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        LOGGER.debug("无法识别图像文件 %s: %s", path, exc)
        raise ImageLoadingError(str(exc)) from exc
