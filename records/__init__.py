#Marks records as a package.
#Re-exports the file adapters so scripts import from records without knowing internal file names.
#No business logic.

from .loader import RecordSourceError, parse_data_line, read_donation, read_orders
from .writer import NO_MATCH_MESSAGE, save_results
from .pipeline import split_donation_to_orders

__all__ = [
    "read_donation",
    "read_orders",
    "parse_data_line",
    "RecordSourceError",
    "save_results",
    "NO_MATCH_MESSAGE",
    "split_donation_to_orders",
]
