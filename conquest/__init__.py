"""
Capital Conquest - two-player territory game on a fixed node graph.
"""
