"""Enterprise AI Adoption Assessment service.

Collects organisational data for AI platform selection, scores the four
major platforms on ROI, compliance, integrations and pain-point fit, and
wraps a hosted LLM for every narrative analysis (readiness, forecasting,
compliance, strategy, onboarding and reporting).
"""

__version__ = "0.1.0"
