"""
Setup script for the Structure-Tensor Corner Detection package.
"""

from setuptools import setup, find_packages
import os


def read_readme():
    """Read README file for long description."""
    if os.path.exists('README.md'):
        with open('README.md', 'r', encoding='utf-8') as f:
            return f.read()
    return "Structure-tensor corner detection (Harris, Harmonic-Mean, Min-Eigen)"


# Core requirements (always installed)
install_requires = [
    'opencv-python>=4.5.0',
    'numpy>=1.19.0',
    'matplotlib>=3.3.0'
]

# Optional dependencies for different use cases
extras_require = {
    'dev': [
        'pytest>=6.0.0',
        'pytest-cov>=2.12.0',
        'black>=21.0.0',
        'isort>=5.9.0',
        'flake8>=3.9.0'
    ]
}

setup(
    name="corner-detection",
    version="1.0.0",
    author="Corner Detection Team",
    description="Structure-tensor corner detection with Harris, Harmonic-Mean and Min-Eigen metrics",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=['CornerDetection', 'CornerDetection.*']),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Image Processing",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        'console_scripts': [
            'corner-detect=CornerDetection.cli:main',
        ],
    },
    keywords=[
        "computer vision",
        "corner detection",
        "Harris",
        "Shi-Tomasi",
        "structure tensor",
        "opencv"
    ]
)
