"""圆角蒙版引擎单元测试。"""

from __future__ import annotations

import numpy as np
import pytest
from PIL import Image

from image_cropper.core.exceptions import InsetTooLargeError, InvalidGeometryError
from image_cropper.processing.masking import (
    MaskGeometry,
    apply_rounded_mask,
    resolve_mask_geometry,
    rounded_region,
)


def _reference_inside(x: int, y: int, geometry: MaskGeometry) -> bool:
    """逐像素的参考实现，直接按区间规则判断。"""

    xf = x + 0.5
    yf = y + 0.5
    r = geometry.radius
    left, top, right, bottom = geometry.left, geometry.top, geometry.right, geometry.bottom
    if left + r <= xf <= right - r:
        return top <= yf <= bottom
    if top + r <= yf <= bottom - r:
        return left <= xf <= right
    cx = left + r if xf < left + r else right - r
    cy = top + r if yf < top + r else bottom - r
    return (xf - cx) ** 2 + (yf - cy) ** 2 <= r * r


def _solid(width: int, height: int, color=(200, 30, 30, 255)) -> Image.Image:
    return Image.new("RGBA", (width, height), color)


def test_zero_dimensions_are_rejected() -> None:
    with pytest.raises(InvalidGeometryError):
        resolve_mask_geometry(0, 10, 4, 0)
    with pytest.raises(InvalidGeometryError):
        resolve_mask_geometry(10, 0, 4, 0)


def test_inset_is_clamped_and_collapsing_area_fails() -> None:
    # inset 被钳制为 min(10, 5, 3) = 3，高度方向内部为 0。
    with pytest.raises(InsetTooLargeError, match="Inset is too large"):
        resolve_mask_geometry(10, 6, 0, 10)

    geometry = resolve_mask_geometry(11, 11, 0, 100)
    assert geometry.inset == 5
    assert (geometry.right - geometry.left, geometry.bottom - geometry.top) == (1, 1)


def test_radius_is_clamped_to_half_of_inner_short_side() -> None:
    geometry = resolve_mask_geometry(10, 8, 100, 2)
    assert geometry.inset == 2
    assert geometry.radius == 2  # inner 6x4

    odd = resolve_mask_geometry(9, 7, 100, 0)
    assert odd.radius == 3  # floor(7 / 2)


def test_zero_radius_is_plain_inset_rectangle() -> None:
    region = rounded_region(8, 6, 0, 2)

    expected = np.zeros((6, 8), dtype=bool)
    expected[2:4, 2:6] = True
    assert np.array_equal(region, expected)


def test_zero_radius_without_inset_keeps_everything() -> None:
    assert rounded_region(7, 5, 0, 0).all()


def test_max_radius_square_is_a_circle() -> None:
    region = rounded_region(10, 10, 50, 0)

    ys, xs = np.mgrid[0:10, 0:10]
    circle = (xs + 0.5 - 5) ** 2 + (ys + 0.5 - 5) ** 2 <= 25
    assert np.array_equal(region, circle)
    # 四条边的中点保持可见，四个角被遮住。
    assert region[0, 5] and region[9, 5] and region[5, 0] and region[5, 9]
    assert not region[0, 0] and not region[0, 9] and not region[9, 0] and not region[9, 9]


@pytest.mark.parametrize(
    ("width", "height", "radius", "inset"),
    [(20, 10, 3, 0), (17, 23, 6, 2), (31, 12, 100, 1), (16, 16, 4, 3)],
)
def test_region_matches_per_pixel_rule(width: int, height: int, radius: int, inset: int) -> None:
    geometry = resolve_mask_geometry(width, height, radius, inset)
    region = rounded_region(width, height, radius, inset)

    assert region.shape == (height, width)
    for y in range(height):
        for x in range(width):
            assert bool(region[y, x]) == _reference_inside(x, y, geometry), (x, y)


def test_corners_are_quarter_circles() -> None:
    region = rounded_region(20, 12, 4, 0)

    top_left = region[:4, :4]
    top_right = region[:4, -4:]
    bottom_left = region[-4:, :4]
    bottom_right = region[-4:, -4:]
    assert np.array_equal(top_right, top_left[:, ::-1])
    assert np.array_equal(bottom_left, top_left[::-1, :])
    assert np.array_equal(bottom_right, top_left[::-1, ::-1])
    assert not top_left[0, 0]
    assert top_left[3, 3]
    # 直边部分完整保留。
    assert region[0, 4:16].all()
    assert region[4:8, 0].all()


def test_transparent_fill_clears_outside_pixels() -> None:
    image = _solid(12, 12)
    region = rounded_region(12, 12, 4, 1)

    apply_rounded_mask(image, 4, 1, transparent=True)

    pixels = np.array(image)
    assert (pixels[~region] == (0, 0, 0, 0)).all()
    assert (pixels[region] == (200, 30, 30, 255)).all()

    # 再次执行不会在区域外产生非零 alpha。
    apply_rounded_mask(image, 4, 1, transparent=True)
    assert np.array_equal(np.array(image), pixels)


def test_opaque_fill_paints_outside_white() -> None:
    image = _solid(15, 9)
    region = rounded_region(15, 9, 3, 0)

    geometry = apply_rounded_mask(image, 3, 0, transparent=False)

    assert geometry.radius == 3
    pixels = np.array(image)
    assert (pixels[~region] == (255, 255, 255, 255)).all()
    assert (pixels[region] == (200, 30, 30, 255)).all()


def test_mask_requires_rgba_image() -> None:
    with pytest.raises(InvalidGeometryError):
        apply_rounded_mask(Image.new("RGB", (8, 8), "red"), 2, 0, transparent=True)
