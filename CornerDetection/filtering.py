"""
Separable filtering: Gaussian-derivative gradients and the structure tensor.

All filters correlate with replicate borders (the edge pixel is repeated
outside the image). Output buffers always have the shape of the input.
"""

from typing import Tuple

import numpy as np

from .core_data_structures import StructureTensor

BORDER_MODE = 'edge'


def correlate_1d(image: np.ndarray, kernel: np.ndarray, axis: int) -> np.ndarray:
    """
    Correlate a 2-D image with an odd-length 1-D kernel along one axis

    Symmetric and antisymmetric kernels are evaluated as sums of mirrored
    pixel pairs, so a constant image gives an exactly constant result
    (exactly zero for a derivative kernel).

    Args:
        image: 2-D float array
        kernel: 1-D kernel of odd length
        axis: 0 to filter along rows (y), 1 along columns (x)

    Returns:
        Filtered float64 array of the same shape as image
    """
    if image.ndim != 2:
        raise ValueError(f"Expected a 2-D image, got shape {image.shape}")
    if kernel.ndim != 1 or len(kernel) % 2 == 0:
        raise ValueError(f"Kernel must be 1-D with odd length, got shape {kernel.shape}")

    radius = len(kernel) // 2
    length = image.shape[axis]
    pad = [(0, 0), (0, 0)]
    pad[axis] = (radius, radius)
    padded = np.pad(np.asarray(image, dtype=np.float64), pad, mode=BORDER_MODE)

    def shifted(offset: int) -> np.ndarray:
        index = [slice(None), slice(None)]
        index[axis] = slice(radius + offset, radius + offset + length)
        return padded[tuple(index)]

    symmetric = np.array_equal(kernel, kernel[::-1])
    antisymmetric = np.array_equal(kernel, -kernel[::-1])

    result = kernel[radius] * shifted(0)
    for i in range(1, radius + 1):
        if symmetric:
            result = result + kernel[radius + i] * (shifted(i) + shifted(-i))
        elif antisymmetric:
            result = result + kernel[radius + i] * (shifted(i) - shifted(-i))
        else:
            result = result + kernel[radius + i] * shifted(i) + kernel[radius - i] * shifted(-i)
    return result


def separable_filter(image: np.ndarray, kernel_x: np.ndarray, kernel_y: np.ndarray) -> np.ndarray:
    """Apply kernel_y along rows then kernel_x along columns"""
    return correlate_1d(correlate_1d(image, kernel_y, axis=0), kernel_x, axis=1)


def estimate_gradients(image: np.ndarray,
                       smoothing_kernel: np.ndarray,
                       derivative_kernel: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Estimate image gradients with Gaussian-derivative filters

    Ix differentiates along x and smooths along y; Iy swaps the roles.

    Args:
        image: 2-D intensity image
        smoothing_kernel: 1-D Gaussian kernel
        derivative_kernel: 1-D Gaussian-derivative kernel

    Returns:
        Tuple of (Ix, Iy), each with the shape of image
    """
    Ix = separable_filter(image, kernel_x=derivative_kernel, kernel_y=smoothing_kernel)
    Iy = separable_filter(image, kernel_x=smoothing_kernel, kernel_y=derivative_kernel)
    return Ix, Iy


def build_structure_tensor(Ix: np.ndarray, Iy: np.ndarray,
                           window_kernel: np.ndarray) -> StructureTensor:
    """
    Form the windowed second-moment matrix of the gradient field

    Args:
        Ix: Gradient along x
        Iy: Gradient along y
        window_kernel: 1-D Gaussian window applied along both axes

    Returns:
        StructureTensor with components A = w*(Ix^2), B = w*(Ix Iy), C = w*(Iy^2)
    """
    if Ix.shape != Iy.shape:
        raise ValueError(f"Gradient shapes differ: {Ix.shape} vs {Iy.shape}")

    A = separable_filter(Ix * Ix, window_kernel, window_kernel)
    B = separable_filter(Ix * Iy, window_kernel, window_kernel)
    C = separable_filter(Iy * Iy, window_kernel, window_kernel)

    return StructureTensor(A=A, B=B, C=C)
