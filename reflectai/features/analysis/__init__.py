from reflectai.features.analysis.client import AnalysisClient

__all__ = ["AnalysisClient"]
