"""Artifact Deduplication Engine.

Detects near-duplicate workflow, AI agent and tool metadata records pooled
from heterogeneous sources and decides how to consolidate them.
"""

__version__ = "0.1.0"
