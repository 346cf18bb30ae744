"""Set-overlap relevance scoring between a query and a candidate video."""

from models.tags import TagSet

# Enumerate matches in the candidate's insight order (text search)
ORDER_CANDIDATE = "candidate"
# Enumerate matches in the query's order (image search)
ORDER_QUERY = "query"


def score(
    query: TagSet, candidate: TagSet, order: str = ORDER_QUERY
) -> tuple[list[str], float]:
    """Score a candidate tag set against a query tag set.

    The score is the fraction of query tags found in the candidate,
    |Q ∩ C| / |Q|. Extra candidate tags do not lower it. An empty query
    scores 0.0.

    Args:
        query: Tags derived from the user's query
        candidate: Tags derived from a video's insights
        order: ORDER_CANDIDATE or ORDER_QUERY, controls match ordering

    Returns:
        Tuple of (matching tags, score)
    """
    if order == ORDER_CANDIDATE:
        matches = [tag for tag in candidate if tag in query]
    elif order == ORDER_QUERY:
        matches = [tag for tag in query if tag in candidate]
    else:
        raise ValueError(f"Unknown match order: {order}")

    if not query:
        return [], 0.0
    return matches, len(matches) / len(query)
