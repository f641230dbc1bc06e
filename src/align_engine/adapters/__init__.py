"""Host integrations for the alignment engine."""

__all__ = ["textual"]
