"""Infrastructure layer for the progression service.

Modules:
    metrics     Prometheus registry and recording helpers for generation requests.
"""
