"""
Family Fund Fraud Engine
------------------------
Risk scoring for payment claims submitted to a family contribution fund.
Usage: from familyfund.fraud_engine.scoring import assess_risk
"""

__version__ = "1.0.0"
__all__ = ["api", "fraud_engine", "models", "services", "utils", "config"]
