"""drstatus - disaster-recovery status aggregation for protected workloads."""

__version__ = "0.1.0"
