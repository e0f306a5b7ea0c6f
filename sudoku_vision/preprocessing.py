"""Image preprocessing utilities: loading, resizing and cell normalization."""


import cv2
import numpy as np
from typing import Optional, Sequence


MAX_IMAGE_SIZE = 800
DEFAULT_BLOCK_DIVISOR = 20
DEFAULT_BIAS = 2.5
DEFAULT_CONTRAST = 1.4
DEFAULT_BRIGHTNESS = 1.1

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def load_image(image_path: str) -> np.ndarray:
    """Read an image from disk as an RGB array."""
    image = cv2.imread(image_path, cv2.IMREAD_COLOR)
    if image is None:
        raise ValueError(f"Could not read {image_path}")
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def resize_to_fit(image: np.ndarray, max_size: int = MAX_IMAGE_SIZE) -> np.ndarray:
    """
    Scale the image so its longer side equals max_size, keeping aspect ratio.

    Small photos are scaled up as well as large ones down, so cell crops end up
    with a usable number of pixels either way.
    """
    height, width = image.shape[:2]
    scale = min(max_size / width, max_size / height)
    new_w = max(1, int(round(width * scale)))
    new_h = max(1, int(round(height * scale)))
    if (new_w, new_h) == (width, height):
        return image
    interpolation = cv2.INTER_AREA if scale < 1 else cv2.INTER_CUBIC
    return cv2.resize(image, (new_w, new_h), interpolation=interpolation)


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """
    Project an RGB(A) buffer onto luminance.

    Rounds half up in float64 so the result is identical on every platform;
    the sample vote depends on this being reproducible.
    """
    if image.ndim == 2:
        return image.astype(np.uint8, copy=False)
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ValueError(f"Expected an RGB or RGBA image, got shape {image.shape}")

    rgb = image[:, :, :3].astype(np.float64)
    wr, wg, wb = LUMA_WEIGHTS
    gray = wr * rgb[:, :, 0] + wg * rgb[:, :, 1] + wb * rgb[:, :, 2]
    return np.clip(np.floor(gray + 0.5), 0, 255).astype(np.uint8)


def adaptive_block_size(width: int, height: int, divisor: int = DEFAULT_BLOCK_DIVISOR) -> int:
    return max(3, min(width, height) // divisor)


def adaptive_threshold(gray: np.ndarray, block_size: int, bias: float = DEFAULT_BIAS) -> np.ndarray:
    """
    Mean-of-neighbourhood thresholding.

    A pixel becomes ink (0) when it is darker than the mean of the square
    window around it minus ``bias``, background (255) otherwise. Window
    positions that fall outside the image are left out of the mean rather than
    padded, so border pixels are judged only against real neighbours.

    Args:
        gray: 8-bit single channel image
        block_size: Window size; the window spans block_size // 2 pixels on
            each side of the centre
        bias: Constant subtracted from the local mean

    Returns:
        Binary image with values 0 and 255
    """
    h, w = gray.shape
    half = block_size // 2

    integral = cv2.integral(np.ascontiguousarray(gray, dtype=np.uint8)).astype(np.int64)

    ys = np.arange(h)
    xs = np.arange(w)
    y0 = np.clip(ys - half, 0, h)
    y1 = np.clip(ys + half + 1, 0, h)
    x0 = np.clip(xs - half, 0, w)
    x1 = np.clip(xs + half + 1, 0, w)

    sums = (integral[np.ix_(y1, x1)] - integral[np.ix_(y0, x1)]
            - integral[np.ix_(y1, x0)] + integral[np.ix_(y0, x0)])
    counts = np.outer(y1 - y0, x1 - x0)

    mean = sums / counts
    return np.where(gray < mean - bias, 0, 255).astype(np.uint8)


def boost_contrast(image: np.ndarray, contrast: float = DEFAULT_CONTRAST,
                   brightness: float = DEFAULT_BRIGHTNESS) -> np.ndarray:
    """Scale colour channels by contrast * brightness, clamped to [0, 255]. Alpha is kept."""
    factor = contrast * brightness
    result = image.copy()
    if image.ndim == 3 and image.shape[2] == 4:
        color = result[:, :, :3]
        result[:, :, :3] = np.clip(color.astype(np.float64) * factor, 0, 255).astype(np.uint8)
    else:
        result = np.clip(result.astype(np.float64) * factor, 0, 255).astype(np.uint8)
    return result


def normalize_cell(image: np.ndarray,
                   block_divisor: int = DEFAULT_BLOCK_DIVISOR,
                   bias: float = DEFAULT_BIAS,
                   contrast: float = DEFAULT_CONTRAST,
                   brightness: float = DEFAULT_BRIGHTNESS) -> np.ndarray:
    """
    Binarize one region for the recognizer.

    Steps: luminance, adaptive threshold, write the binary value back into
    every colour channel, contrast/brightness boost.

    Returns:
        Image with the same shape as the input
    """
    h, w = image.shape[:2]
    gray = to_grayscale(image)
    block_size = adaptive_block_size(w, h, block_divisor)
    binary = adaptive_threshold(gray, block_size, bias)

    if image.ndim == 2:
        composed = binary
    else:
        composed = image.astype(np.uint8, copy=True)
        for ch in range(3):
            composed[:, :, ch] = binary

    return boost_contrast(composed, contrast, brightness)


def show_samples(cell: np.ndarray, presets: Sequence, title: Optional[str] = None):
    """Display one cell next to its normalized view under each preset."""
    import matplotlib.pyplot as plt

    fig, axes = plt.subplots(1, len(presets) + 1, figsize=(3 * (len(presets) + 1), 3))
    axes = np.atleast_1d(axes).ravel()

    axes[0].imshow(cell, cmap='gray' if cell.ndim == 2 else None)
    axes[0].set_title(title or 'Cell')
    axes[0].axis('off')

    for ax, preset in zip(axes[1:], presets):
        view = normalize_cell(cell, preset.block_divisor, preset.bias)
        ax.imshow(view, cmap='gray' if view.ndim == 2 else None)
        ax.set_title(f'/{preset.block_divisor}, C={preset.bias}')
        ax.axis('off')

    plt.tight_layout()
    plt.show()
