"""
Donations domain package.

Public API:
- Domain models: Location, Record, Supply, Demand, RankedDemand
- Errors: MalformedRecordError
- Matching entry: split_donation, SplitResult
"""
from .models import Demand, Location, MalformedRecordError, RankedDemand, Record, Supply
from .matching import SplitResult, split_donation

__all__ = [
    "Location",
    "Record",
    "Supply",
    "Demand",
    "RankedDemand",
    "MalformedRecordError",
    "split_donation",
    "SplitResult",
]
