"""
Word cloud aggregation for interview logs.

This module provides keyword extraction, message tokenization and
frequency ranking for the admin word cloud.
"""

from surveymath.wordcloud.builder import build_word_cloud, resolve_time_range
from surveymath.wordcloud.aggregator import process_to_word_cloud
from surveymath.wordcloud.processor import extract_keywords, filter_by_frequency, get_date_range
from surveymath.wordcloud.text_extractor import extract_user_messages, simple_tokenize
