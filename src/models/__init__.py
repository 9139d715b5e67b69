"""
Data models for the PEEVEM validator
"""

from .classification import PEEVEM_BASE_URI, ClassificationRule, ClassifierConfig

__all__ = [
    "PEEVEM_BASE_URI",
    "ClassificationRule",
    "ClassifierConfig",
]
