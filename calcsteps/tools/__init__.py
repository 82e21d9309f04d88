from .algebra import equation_tool
from .calculus import calculus_tool
from .graph import graph_tool

__all__ = ["calculus_tool", "equation_tool", "graph_tool"]
