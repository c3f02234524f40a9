"""
State machines for multi-step flows.

The extraction pipeline is tracked by ExtractionFlowMachine.
"""

from .base import FlowMachine
from .extraction_flow import ExtractionFlowMachine

__all__ = ["FlowMachine", "ExtractionFlowMachine"]
