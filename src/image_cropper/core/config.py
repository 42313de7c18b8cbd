"""裁剪导出任务的配置模型。"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from image_cropper.core.exceptions import InvalidConfigurationError

MaskShape = str  # rectangular | rounded
NamingMode = str  # identity | cropped-suffix

SHAPE_RECTANGULAR = "rectangular"
SHAPE_ROUNDED = "rounded"
VALID_SHAPES = {SHAPE_RECTANGULAR, SHAPE_ROUNDED}

NAMING_IDENTITY = "identity"
NAMING_CROPPED_SUFFIX = "cropped-suffix"
NAMING_SUFFIXES = {
    NAMING_IDENTITY: "",
    NAMING_CROPPED_SUFFIX: "_cropped",
}


@dataclass(frozen=True, slots=True)
class CropRect:
    """源图片坐标系中的裁剪矩形，原点位于左上角。"""

    x: int
    y: int
    w: int
    h: int

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """返回 Pillow 使用的 (left, upper, right, lower) 元组。"""

        return self.x, self.y, self.x + self.w, self.y + self.h

    def is_empty(self) -> bool:
        return self.w <= 0 or self.h <= 0

    def fits_within(self, width: int, height: int) -> bool:
        """判断矩形是否完全落在 width x height 的图片内。"""

        return (
            self.x >= 0
            and self.y >= 0
            and self.x < width
            and self.y < height
            and self.x + self.w <= width
            and self.y + self.h <= height
        )


@dataclass(slots=True)
class MaskConfig:
    """蒙版形状与圆角参数。"""

    shape: MaskShape = SHAPE_ROUNDED
    radius_px: int = 18
    inset_px: int = 0
    transparent: bool = True


@dataclass(slots=True)
class ExportConfig:
    """单张与批量导出共享的几何配置。"""

    crop: CropRect
    mask: MaskConfig = field(default_factory=MaskConfig)
    target_size: Tuple[int, int] = (1600, 1200)


@dataclass(slots=True)
class BatchJobConfig:
    """单次批处理任务的配置集合。"""

    input_dir: Path
    output_dir: Path
    export: ExportConfig
    naming_mode: NamingMode = NAMING_IDENTITY


def validate_export_config(config: ExportConfig) -> None:
    """校验与具体图片无关的参数，失败时抛出 InvalidConfigurationError。"""

    if config.mask.shape not in VALID_SHAPES:
        raise InvalidConfigurationError(f"Invalid shape: {config.mask.shape}")
    if config.mask.radius_px < 0 or config.mask.inset_px < 0:
        raise InvalidConfigurationError("Radius and inset must not be negative.")

    target_w, target_h = config.target_size
    if target_w <= 0 or target_h <= 0:
        raise InvalidConfigurationError("Target size must be greater than zero.")


def resolve_name_suffix(naming_mode: NamingMode) -> str:
    """返回命名模式对应的文件名后缀。"""

    try:
        return NAMING_SUFFIXES[naming_mode]
    except KeyError:
        raise InvalidConfigurationError("Invalid filename mode.") from None
