# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Lifecycle Module
Public API for match review transitions.
"""

from reunite.modules.lifecycle.manager import MatchLifecycleManager

__all__ = ["MatchLifecycleManager"]
