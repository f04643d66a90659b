"""
Text extraction and tokenization of interview messages.

The tokenizer has no morphological analysis: Japanese runs are split into
overlapping 2-4 character candidates, other words are kept whole.
"""

import re
from typing import Any, Iterable, List, Mapping

_DIGITS = re.compile(r'[0-9０-９]')
_PUNCTUATION = re.compile(r'[、。！？「」『』（）().,!?]')
_WHITESPACE = re.compile(r'\s+')
_JAPANESE = re.compile(r'[\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]')

STOP_WORDS = frozenset([
    # Particles and auxiliaries
    "の", "に", "は", "を", "た", "が", "で", "て", "と", "し", "れ", "さ",
    "ある", "いる", "する", "です", "ます", "でき", "これ", "それ", "あれ",
    "この", "その", "あの", "ここ", "そこ", "あそこ", "こう", "そう", "ああ",
    "どう", "して", "くれ", "やる", "もの", "ので", "から", "ため", "ない",
    "なら", "なく", "ても", "ては", "では", "より", "まで", "だけ", "ほど",
    "など", "とか", "ばかり", "まま", "ながら", "ところ", "こと", "ところが",
    "ものの", "ものを", "ことに", "ことは", "ことが", "ことを", "こんな",
    "そんな", "あんな", "どんな", "いう", "いった", "いって", "いない", "いく",
    "いけ", "いける",
    # Common verbs
    "思う", "思い", "思っ", "思わ", "考え", "考える", "感じ", "感じる", "見る",
    "見て", "見た", "聞く", "聞い", "聞こ", "話す", "話し", "言う", "言っ", "言わ",
    # English
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "from", "as", "is", "was", "are", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "should",
    "could", "may", "might", "must", "can", "it", "this", "that", "these",
    "those", "i", "you", "he", "she", "we", "they", "me", "him", "her", "us",
    "them", "my", "your", "his", "our", "their",
])

MIN_JAPANESE_LENGTH = 2
MAX_JAPANESE_LENGTH = 4
MIN_LATIN_LENGTH = 3


def extract_user_messages(logs: Iterable[Mapping[str, Any]]) -> str:
    """
    Concatenate the user-authored messages of interview logs.

    Args:
        logs: Logs containing 'messages' ({'role', 'content'} entries)

    Returns:
        User message contents joined by newlines
    """
    texts = []

    for log in logs:
        for message in log.get('messages') or []:
            if message.get('role') == 'user' and message.get('content'):
                texts.append(message['content'])

    return "\n".join(texts)


def is_stop_word(token: str) -> bool:
    """Check whether a token should be excluded from the word cloud."""
    return token in STOP_WORDS or len(token) < 2


def simple_tokenize(text: str) -> List[str]:
    """
    Split text into candidate keywords.

    Digits are removed and punctuation treated as whitespace. Words
    containing Japanese characters yield every substring of 2 to 4
    characters; other words of at least 3 characters yield the lowercased
    word. Stop words are dropped.

    Args:
        text: Input text

    Returns:
        Tokens in text order
    """
    cleaned = _DIGITS.sub('', text)
    cleaned = _PUNCTUATION.sub(' ', cleaned)
    cleaned = _WHITESPACE.sub(' ', cleaned).strip()

    tokens = []
    for word in cleaned.split(' '):
        if not word:
            continue

        if _JAPANESE.search(word):
            if len(word) < MIN_JAPANESE_LENGTH:
                continue
            for start in range(len(word) - MIN_JAPANESE_LENGTH + 1):
                longest = min(MAX_JAPANESE_LENGTH, len(word) - start)
                for length in range(MIN_JAPANESE_LENGTH, longest + 1):
                    token = word[start:start + length]
                    if not is_stop_word(token):
                        tokens.append(token)
        elif len(word) >= MIN_LATIN_LENGTH:
            lowered = word.lower()
            if not is_stop_word(lowered):
                tokens.append(lowered)

    return tokens
