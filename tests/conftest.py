"""Shared fixtures for the corner detection tests"""

import sys
from pathlib import Path

import numpy as np
import pytest

project_root = Path(__file__).parent.parent  # Go up from tests/ to project root
sys.path.insert(0, str(project_root))


@pytest.fixture
def square_image():
    """9x9 dark image with a centred 7x7 bright square (rows/cols 1..7)"""
    image = np.zeros((9, 9), dtype=np.float64)
    image[1:8, 1:8] = 1.0
    return image


@pytest.fixture
def noise_image():
    rng = np.random.default_rng(42)
    return rng.random((32, 40))


@pytest.fixture
def checkerboard_image():
    """64x64 image of 16-pixel checker squares"""
    y, x = np.mgrid[0:64, 0:64]
    return (((x // 16) + (y // 16)) % 2).astype(np.float64)
