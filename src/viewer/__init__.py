"""
viewer — embedded web page viewer integration.

Public API
──────────
Bounds         — viewer rectangle in window content coordinates
ProbeResult    — outcome of ViewerBridge.probe_and_activate()
normalize_url  — address-bar validation

ViewerBridge lives in src.viewer.bridge and is imported from there; it
pulls in PyQt6, which the view models must not depend on.
"""

from src.viewer.models import Bounds, ProbeResult
from src.viewer.urls import normalize_url

__all__ = ["Bounds", "ProbeResult", "normalize_url"]
