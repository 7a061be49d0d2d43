"""
Mean-Shift clustering module for pixel quantization.
"""

from .meanshift import MeanShiftClusterer, MeanShiftConfig, MeanShiftResult

__all__ = ['MeanShiftClusterer', 'MeanShiftConfig', 'MeanShiftResult']
