"""Gaussian kernels and in-place region helpers for float images."""

from __future__ import annotations

import cv2
import numpy as np

from cv_image_utils.errors import UnsupportedPixelTypeError
from cv_image_utils.pixel_types import PixelType, as_single_channel, pixel_type


def generate_gaussian_kernel(ksize: int, sigma: float) -> np.ndarray:
    """
    Create a 2-D 32F Gaussian kernel image.

    Args:
        ksize: Kernel width and height; must be odd.
        sigma: Standard deviation. Non-positive values let OpenCV derive
            it from ksize.

    Returns:
        (ksize, ksize) float32 kernel, the outer product of the 1-D
        kernel with itself, so it sums to 1.

    """
    if ksize % 2 == 0 or ksize < 1:
        msg = f"Kernel size must be odd and positive, got {ksize}"
        raise ValueError(msg)

    gaussian_1d = cv2.getGaussianKernel(ksize, sigma, ktype=cv2.CV_32F)
    return gaussian_1d @ gaussian_1d.T


def add_kernel_to_image(
    image: np.ndarray,
    kernel: np.ndarray,
    x: int,
    y: int,
) -> None:
    """
    Add a small float kernel to an image in place.

    The kernel's top-left corner goes at (x, y); parts falling outside
    the image are skipped. 32F images get the kernel added as is, 8U
    images get the truncated kernel values with uint8 wrap-around.
    """
    ptype = pixel_type(as_single_channel(image), "add_kernel_to_image")
    if ptype not in (PixelType.FLOAT32, PixelType.UINT8):
        raise UnsupportedPixelTypeError("add_kernel_to_image", ptype.value)
    image = as_single_channel(image)

    rows, cols = image.shape
    k_rows, k_cols = kernel.shape[:2]
    x0, y0 = max(x, 0), max(y, 0)
    x1, y1 = min(x + k_cols, cols), min(y + k_rows, rows)
    if x0 >= x1 or y0 >= y1:
        return

    patch = kernel[y0 - y:y1 - y, x0 - x:x1 - x]
    region = image[y0:y1, x0:x1]
    if ptype is PixelType.FLOAT32:
        region += patch.astype(np.float32)
    else:
        region += patch.astype(np.uint8)


def zero_outside_roi(img: np.ndarray, roi: tuple[int, int, int, int]) -> None:
    """
    Set every pixel of a 32F image outside roi to zero, in place.

    Args:
        img: 32F single-channel image.
        roi: (x, y, width, height), which must lie inside the image.

    """
    ptype = pixel_type(as_single_channel(img), "zero_outside_roi")
    if ptype is not PixelType.FLOAT32:
        raise UnsupportedPixelTypeError("zero_outside_roi", ptype.value)
    img = as_single_channel(img)

    x, y, w, h = roi
    rows, cols = img.shape
    if x < 0 or y < 0 or w < 0 or h < 0 or x + w > cols or y + h > rows:
        msg = f"ROI {roi} is outside the {cols}x{rows} image"
        raise ValueError(msg)

    keep = np.zeros(img.shape, dtype=bool)
    keep[y:y + h, x:x + w] = True
    img[~keep] = 0
