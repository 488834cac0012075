"""Admin tooling: interview link generation."""
from .links import CandidateLink, GeneratedLinks, generate_links, mint_tokens, normalize_group_id, to_base36

__all__ = [
    "CandidateLink",
    "GeneratedLinks",
    "generate_links",
    "mint_tokens",
    "normalize_group_id",
    "to_base36",
]
