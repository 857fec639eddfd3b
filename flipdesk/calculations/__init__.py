"""
Flip Financial Analysis Engine

Pure formulas for fix-and-flip deals and the orchestrator that composes
them into a full analysis.
"""

from flipdesk.calculations import formulas, analysis
from flipdesk.calculations.analysis import AnalysisResult, DealInputs, recompute

__all__ = ["formulas", "analysis", "AnalysisResult", "DealInputs", "recompute"]
