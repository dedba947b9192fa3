"""Horizon — account loading, transaction submission and path search."""

from microstellar.horizon.client import HorizonClient
from microstellar.horizon.models import HorizonProblem, PathRecord, TxResponse

__all__ = ["HorizonClient", "HorizonProblem", "PathRecord", "TxResponse"]
