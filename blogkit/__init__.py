"""Related-posts selection for the static blog."""

from .models import Post
from .related import build_candidate_pool, rank_candidates, score_post, select_related

__all__ = ["Post", "build_candidate_pool", "rank_candidates", "score_post", "select_related"]
