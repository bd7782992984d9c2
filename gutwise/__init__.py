"""
GutWise digestive-safety engine.

Scores dishes against a user's digestive health profile and correlates
logged meals with later symptom check-ins to surface trigger foods.

Structure:
- domain/: Business logic and domain models
- application/: Use cases orchestrating domain services
- infrastructure/: External concerns (AI gateway, record store, logging)
- tests/: Test suite
"""

__version__ = "1.0.0"
