"""Deployment topology."""

from .builder import build_topology
from .config import StackConfig
from .graph import Topology
from .synth import synthesize, write_template


__all__ = ["build_topology", "StackConfig", "Topology", "synthesize", "write_template"]
