"""
pixelcluster - Color image clustering and quantization.

Este paquete reduce el número de colores de una imagen agrupando sus
píxeles (K-Means, Mean-Shift) y sustituyendo cada píxel por el color
representativo de su cluster. Incluye además un clasificador Naive Bayes
gaussiano con estadísticas de matriz de confusión.
"""

from .exceptions import DimensionMismatchError, InvalidParameterError

__version__ = "0.1.0"

__all__ = ['DimensionMismatchError', 'InvalidParameterError', '__version__']
