"""
Utility helpers for TestMaxx.
"""

from src.testmaxx.utils.env_loader import load_env

__all__ = ["load_env"]
