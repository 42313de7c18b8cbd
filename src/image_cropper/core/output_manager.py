"""输出路径决策与 PNG 写入模块。"""

from __future__ import annotations

import io
import logging
from pathlib import Path

from PIL import Image

from image_cropper.core.config import NamingMode, resolve_name_suffix
from image_cropper.core.exceptions import DirectoryCreateError, ImageWriteError
from image_cropper.core.models import BatchItem

LOGGER = logging.getLogger(__name__)

OUTPUT_EXTENSION = ".png"


class OutputManager:
    """负责批处理的输出目录与文件命名。"""

    def __init__(self, output_dir: Path, naming_mode: NamingMode) -> None:
        self.output_dir = Path(output_dir)
        self.naming_mode = naming_mode
        self.suffix = resolve_name_suffix(naming_mode)

    def destination_for(self, item: BatchItem) -> Path:
        """根据命名模式确定输出路径，格式固定为 PNG。"""

        return self.output_dir / f"{item.stem}{self.suffix}{OUTPUT_EXTENSION}"


def save_png(image: Image.Image, destination: Path) -> None:
    """将 PIL Image 以 PNG 格式写入磁盘，已存在的文件会被覆盖。

    先在内存中完成编码再落盘，编码失败时不会留下残缺文件。
    """

    destination = Path(destination)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryCreateError(f"Create folder failed: {exc}") from exc

    image_to_save = image
    if image.mode not in {"RGB", "RGBA"}:
        image_to_save = image.convert("RGBA")

    buffer = io.BytesIO()
    try:
        image_to_save.save(buffer, format="PNG")
        destination.write_bytes(buffer.getvalue())
    except (OSError, ValueError) as exc:
        raise ImageWriteError(f"Write failed: {exc}") from exc

    LOGGER.debug("已写入 %s", destination)
