"""Country inference from addresses, dialing codes, ccTLDs and an optional LLM."""
from contact_scout.country.engine import (
    CountryInferenceEngine,
    LLMCountryStrategy,
    infer_heuristic,
    merge_country,
)

__all__ = ["CountryInferenceEngine", "LLMCountryStrategy", "infer_heuristic", "merge_country"]
