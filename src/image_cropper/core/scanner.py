"""文件扫描与筛选逻辑。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from image_cropper.core.exceptions import InvalidConfigurationError
from image_cropper.core.models import BatchItem

LOGGER = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "webp"}


def _iter_candidate_files(path: Path) -> Iterator[Path]:
    """遍历目录下第一层的普通文件。"""

    try:
        entries = list(path.iterdir())
    except OSError as exc:
        raise InvalidConfigurationError(f"Read folder failed: {exc}") from exc

    for candidate in entries:
        if candidate.is_file():
            yield candidate


def list_images_in_dir(input_dir: Path) -> list[BatchItem]:
    """扫描目录，返回扩展名受支持的图片，按名称（忽略大小写）升序排列。"""

    collected: list[BatchItem] = []
    for candidate in _iter_candidate_files(Path(input_dir)):
        extension = candidate.suffix[1:].lower()
        if extension not in IMAGE_EXTENSIONS:
            continue
        collected.append(
            BatchItem(
                source_path=candidate,
                display_name=candidate.name,
                extension=extension,
            )
        )

    collected.sort(key=lambda x: x.display_name.lower())
    LOGGER.debug("目录 %s 中发现 %d 个候选图片文件", input_dir, len(collected))
    return collected
