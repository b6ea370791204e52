"""Environment validations, reporting, log de-duplication and collection helpers for PTP sync setups."""

__version__ = "0.1.0"