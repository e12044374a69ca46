"""Shared model base classes."""

from .base import ApkshipBaseModel


__all__ = ["ApkshipBaseModel"]
