"""
Image handling: conversion to and from pixel samples, file I/O and
color quantization.

Example:
    >>> from pixelcluster.imaging import load_image, quantize_image
    >>> from pixelcluster.kmeans import KMeansConfig
    >>>
    >>> image = load_image('leaf.png')
    >>> quantized = quantize_image(image, KMeansConfig(n_clusters=4, tol=0.05))
    >>> quantized.palette  # (4, 3) uint8 colors
"""

from .converters import ArrayToImage, ImageToArray
from .io import load_image, save_image
from .quantize import QuantizationResult, quantize_image, quantize_image_meanshift, recolor

__all__ = [
    'ArrayToImage',
    'ImageToArray',
    'QuantizationResult',
    'load_image',
    'quantize_image',
    'quantize_image_meanshift',
    'recolor',
    'save_image',
]
