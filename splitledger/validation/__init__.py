"""Record validation package."""

from splitledger.validation.validator import RecordValidator

__all__ = ["RecordValidator"]
