"""Fact extraction: emails, ranked phones, plain text, address cues, brands."""
from contact_scout.extractor.facts import extract_facts
from contact_scout.extractor.phones import validate_phone

__all__ = ["extract_facts", "validate_phone"]
