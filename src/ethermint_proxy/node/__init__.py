"""Node orchestrator for the ethermint proxy."""

from .node import Node, NodeConfig

__all__ = ["Node", "NodeConfig"]
