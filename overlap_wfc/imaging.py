"""PNG files <-> (index grid, palette) pairs, through Pillow."""
import numpy as np
from PIL import Image


def to_indices(img):
    """
    Replace every distinct color by a palette index.
    Args:
        img: (H, W) or (H, W, C) array
    Returns:
        grid: (H, W) int64 color indices
        palette: (num_colors, C) array, palette[grid] == img
    """
    arr = np.asarray(img)
    if arr.ndim == 2:
        arr = arr[..., None]
    H, W, C = arr.shape
    palette, inverse = np.unique(arr.reshape(-1, C), axis=0, return_inverse=True)
    return inverse.reshape(H, W).astype(np.int64), palette


def load_indexed(path, convert_grayscale=False):
    """Load an image file as (index grid, palette)."""
    sample = Image.open(path)
    sample = sample.convert("L") if convert_grayscale else sample.convert("RGB")
    return to_indices(np.array(sample))


def save_indexed(grid, palette, path):
    """Save an index grid as an image, mapping indices through the palette."""
    outimg = np.asarray(palette)[np.asarray(grid)].astype(np.uint8)
    if outimg.shape[-1] == 1:
        outimg = outimg[:, :, 0]
    Image.fromarray(outimg).save(path)
    return outimg
