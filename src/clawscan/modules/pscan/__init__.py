"""Passive scan module for ClawScan - detectors over captured HTTP traffic."""

from .base import PassiveDetector
from .messages import MessageCatalog, YamlMessageCatalog, default_catalog
from .models import (
    Alert,
    AlertThreshold,
    Confidence,
    EvidenceMatch,
    HeaderField,
    HtmlAttribute,
    HttpMessage,
    Parameter,
    ParameterOrigin,
    Risk,
)
from .registry import DetectorRegistry, create_default_registry, validate_detector
from .reporting import alerts_to_json, print_alerts_summary
from .scanner import DetectorError, PassiveScanner, ScanOutcome

__all__ = [
    "Alert",
    "AlertThreshold",
    "Confidence",
    "DetectorError",
    "DetectorRegistry",
    "EvidenceMatch",
    "HeaderField",
    "HtmlAttribute",
    "HttpMessage",
    "MessageCatalog",
    "Parameter",
    "ParameterOrigin",
    "PassiveDetector",
    "PassiveScanner",
    "Risk",
    "ScanOutcome",
    "YamlMessageCatalog",
    "alerts_to_json",
    "create_default_registry",
    "default_catalog",
    "print_alerts_summary",
    "validate_detector",
]
