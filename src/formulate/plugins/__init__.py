"""Plugins for formulate."""

from formulate.plugins.audit_trail import AuditTrailPlugin
from formulate.plugins.base import NormalizerPlugin
from formulate.plugins.logger import LoggerPlugin
from formulate.plugins.registry import PluginRegistry, default_registry
from formulate.plugins.sanitizer import SanitizerPlugin

__all__ = [
    "AuditTrailPlugin",
    "LoggerPlugin",
    "NormalizerPlugin",
    "PluginRegistry",
    "SanitizerPlugin",
    "default_registry",
]
