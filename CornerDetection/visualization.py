"""
Visualization Functions for the Corner Detection System

Debug display of the intermediate buffers and keypoint plots, using
matplotlib. Nothing in the detection pipeline depends on this module.
"""

from typing import List, Optional, Tuple, Union

import cv2
import matplotlib.pyplot as plt
import numpy as np

from .core_data_structures import DebugBuffers, Keypoint


def normalized_response(buffers: DebugBuffers) -> np.ndarray:
    """Response scaled for display so the strongest corners saturate"""
    if buffers.max_response > 0:
        return buffers.response / (0.9 * buffers.max_response)
    return np.zeros_like(buffers.response)


def show_debug_buffers(buffers: DebugBuffers,
                       figsize: Tuple[int, int] = (16, 8),
                       block: bool = True):
    """
    Show gradients, tensor components, response and local maxima

    Args:
        buffers: Buffers returned by CornerDetector.detect_with_buffers
        figsize: Figure size (width, height)
        block: Whether plt.show() blocks
    """
    panels = buffers.as_dict()
    panels['Response'] = normalized_response(buffers)
    panels['Local max'] = buffers.local_max.astype(np.float64)

    fig, axes = plt.subplots(2, 4, figsize=figsize)
    axes = axes.ravel()

    for ax, (title, data) in zip(axes, panels.items()):
        if title == 'Response':
            im = ax.imshow(data, cmap='gray', vmin=0.0, vmax=1.0)
        else:
            im = ax.imshow(data, cmap='gray')
        ax.set_title(title)
        ax.axis('off')
        fig.colorbar(im, ax=ax, fraction=0.046, pad=0.04)

    for ax in axes[len(panels):]:
        ax.axis('off')

    plt.tight_layout()
    plt.show(block=block)
    return fig


def visualize_keypoints(image: np.ndarray,
                        keypoints: List[Union[Keypoint, cv2.KeyPoint]],
                        title: str = "Corners",
                        max_keypoints: Optional[int] = 500,
                        color_by_response: bool = True,
                        figsize: Tuple[int, int] = (12, 8)):
    """Visualize detected keypoints"""
    keypoints = list(keypoints)[:max_keypoints]

    fig = plt.figure(figsize=figsize)
    plt.imshow(image, cmap='gray' if image.ndim == 2 else None)

    if keypoints:
        points = np.array([kp.pt for kp in keypoints], dtype=np.float64)
        responses = np.array([kp.response for kp in keypoints])

        if color_by_response:
            scatter = plt.scatter(
                points[:, 0], points[:, 1],
                c=responses, cmap='viridis',
                s=20, alpha=0.7
            )
            plt.colorbar(scatter, label='Response')
        else:
            plt.scatter(points[:, 0], points[:, 1], c='red', s=20, alpha=0.7)

    plt.title(f"{title} - {len(keypoints)} keypoints")
    plt.axis('off')
    plt.tight_layout()
    plt.show()
    return fig


def draw_keypoints(image: np.ndarray, keypoints: List[Union[Keypoint, cv2.KeyPoint]],
                   color: Tuple[int, int, int] = (0, 0, 255)) -> np.ndarray:
    """
    Draw keypoints onto a BGR copy of an image with OpenCV

    Args:
        image: Grayscale or BGR image (uint8, or float scaled to 0..1 or 0..255)
        keypoints: Keypoints to draw
        color: BGR circle colour

    Returns:
        BGR uint8 image with the keypoints drawn
    """
    canvas = np.asarray(image)
    if canvas.dtype != np.uint8:
        scale = 255.0 if canvas.size and canvas.max() <= 1.0 else 1.0
        canvas = np.clip(canvas * scale, 0, 255).astype(np.uint8)
    if canvas.ndim == 2:
        canvas = cv2.cvtColor(canvas, cv2.COLOR_GRAY2BGR)

    return cv2.drawKeypoints(
        canvas, [kp.to_cv2() if isinstance(kp, Keypoint) else kp for kp in keypoints], None, color=color,
        flags=cv2.DRAW_MATCHES_FLAGS_DRAW_RICH_KEYPOINTS
    )
