"""Turn a free-text question into a bounded list of search terms."""

import re

from codebook_outline.normalize import normalize_search_text

NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")

DEFAULT_MAX_TERMS = 24
MIN_TOKEN_LEN = 3
MIN_BIGRAM_LEN = 7


def extract_keywords(question: str | None, max_terms: int = DEFAULT_MAX_TERMS) -> list[str]:
    """
    Unigrams of 3+ characters (plural tokens longer than 4 also give their singular),
    then bigrams of adjacent raw tokens at least 7 characters long ('fire rated').
    Deduplicated in discovery order and truncated to max_terms.
    """
    if max_terms < 0:
        raise ValueError(f"max_terms must be >= 0, got {max_terms}")
    cleaned = NON_ALNUM_RE.sub(" ", normalize_search_text(question)).strip()
    raw_tokens = cleaned.split()

    tokens: list[str] = []
    for token in raw_tokens:
        if len(token) < MIN_TOKEN_LEN:
            continue
        tokens.append(token)
        if token.endswith("s") and len(token) > 4:
            tokens.append(token[:-1])

    phrases = []
    for first, second in zip(raw_tokens, raw_tokens[1:]):
        pair = f"{first} {second}"
        if len(pair) >= MIN_BIGRAM_LEN:
            phrases.append(pair)

    return list(dict.fromkeys(tokens + phrases))[:max_terms]
