"""圆角矩形蒙版引擎。

像素在中心点 (x + 0.5, y + 0.5) 处采样，所有区间均为闭区间：

* x 位于水平直边带 [left + r, right - r] 内时，y 落在 [top, bottom] 即为内部；
* 否则 y 位于竖直直边带 [top + r, bottom - r] 内时，x 落在 [left, right] 即为内部；
* 其余像素位于四个角的方格中，到对应圆心距离不超过 r 即为内部。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from PIL import Image

from image_cropper.core.exceptions import InsetTooLargeError, InvalidGeometryError

LOGGER = logging.getLogger(__name__)

TRANSPARENT_FILL = (0, 0, 0, 0)
OPAQUE_FILL = (255, 255, 255, 255)


@dataclass(frozen=True, slots=True)
class MaskGeometry:
    """钳制后的实际蒙版几何参数。"""

    width: int
    height: int
    inset: int
    radius: int

    @property
    def left(self) -> int:
        return self.inset

    @property
    def top(self) -> int:
        return self.inset

    @property
    def right(self) -> int:
        return self.width - self.inset

    @property
    def bottom(self) -> int:
        return self.height - self.inset


def resolve_mask_geometry(width: int, height: int, radius_px: int, inset_px: int) -> MaskGeometry:
    """计算实际使用的内缩与圆角半径。

    内缩钳制到宽高各自的一半以内，半径钳制到内缩后短边的一半（向下取整）。
    """

    if width <= 0 or height <= 0:
        raise InvalidGeometryError("Image has invalid dimensions.")

    inset = min(max(inset_px, 0), width // 2, height // 2)
    inner_w = width - inset * 2
    inner_h = height - inset * 2
    if inner_w <= 0 or inner_h <= 0:
        raise InsetTooLargeError("Inset is too large for the crop size.")

    radius = min(max(radius_px, 0), min(inner_w, inner_h) // 2)
    return MaskGeometry(width=width, height=height, inset=inset, radius=radius)


def _within(values: np.ndarray, low: float, high: float) -> np.ndarray:
    return (values >= low) & (values <= high)


def _in_corner_circle(xs: np.ndarray, ys: np.ndarray, geometry: MaskGeometry) -> np.ndarray:
    r = geometry.radius
    cx = np.where(xs < geometry.left + r, geometry.left + r, geometry.right - r)
    cy = np.where(ys < geometry.top + r, geometry.top + r, geometry.bottom - r)
    return (xs - cx) ** 2 + (ys - cy) ** 2 <= r * r


def region_from_geometry(geometry: MaskGeometry) -> np.ndarray:
    """返回形状为 (height, width) 的布尔数组，True 表示像素位于圆角矩形内。"""

    xs = np.arange(geometry.width, dtype=np.float64)[np.newaxis, :] + 0.5
    ys = np.arange(geometry.height, dtype=np.float64)[:, np.newaxis] + 0.5
    r = geometry.radius

    in_horizontal_band = _within(xs, geometry.left + r, geometry.right - r)
    in_vertical_band = _within(ys, geometry.top + r, geometry.bottom - r)
    in_columns = _within(xs, geometry.left, geometry.right)
    in_rows = _within(ys, geometry.top, geometry.bottom)

    return np.where(
        in_horizontal_band,
        in_rows,
        np.where(in_vertical_band, in_columns, _in_corner_circle(xs, ys, geometry)),
    )


def rounded_region(width: int, height: int, radius_px: int, inset_px: int) -> np.ndarray:
    """根据原始参数计算圆角区域，参数非法时抛出 MaskError 子类。"""

    return region_from_geometry(resolve_mask_geometry(width, height, radius_px, inset_px))


def apply_rounded_mask(image: Image.Image, radius_px: int, inset_px: int, transparent: bool) -> MaskGeometry:
    """原地修改 RGBA 图像：区域外的像素替换为填充色，区域内保持不变。

    transparent 为真时填充全透明黑色，否则填充不透明白色。
    返回实际使用的几何参数。
    """

    if image.mode != "RGBA":
        raise InvalidGeometryError(f"Unsupported image mode for masking: {image.mode}")

    geometry = resolve_mask_geometry(image.width, image.height, radius_px, inset_px)
    outside = ~region_from_geometry(geometry)
    if not outside.any():
        return geometry

    fill = TRANSPARENT_FILL if transparent else OPAQUE_FILL
    mask = Image.fromarray(outside.astype(np.uint8) * 255)
    image.paste(fill, (0, 0, image.width, image.height), mask)

    LOGGER.debug(
        "已应用圆角蒙版 size=%dx%d inset=%d radius=%d",
        geometry.width,
        geometry.height,
        geometry.inset,
        geometry.radius,
    )
    return geometry
