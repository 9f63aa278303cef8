# src/taskodoro/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .service import AppCore


@dataclass
class AppState:
    # Settings object (real Settings or a test namespace).
    settings: Any
    core: AppCore
