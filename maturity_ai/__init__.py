"""
Maturity Assessment pipeline

Adaptive business self-assessment questionnaire plus the expert-panel
analysis that turns answers into scores, alerts and tiered recommendations.
"""

__version__ = "1.0.0"
