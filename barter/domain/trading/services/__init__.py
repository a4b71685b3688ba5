"""Domain services for the Trading bounded context."""

from .negotiation_validator import NegotiationValidator, ValidatedOffer

__all__ = ["NegotiationValidator", "ValidatedOffer"]
