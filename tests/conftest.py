"""Shared fixtures for chaitok tests."""

import pytest

import chaitok as ctok


@pytest.fixture
def small_vocab():
    """Return the five-token vocabulary used in the worked examples."""
    return ctok.build_vocab(["Hello", "world", ",", "!", " "])


@pytest.fixture
def tokenizer(small_vocab):
    """Return a code point tokenizer over ``small_vocab``."""
    return ctok.Tokenizer(small_vocab)


@pytest.fixture
def utf16_tokenizer(small_vocab):
    """Return a UTF-16 code unit tokenizer over ``small_vocab``."""
    return ctok.Tokenizer(small_vocab, fallback="utf16")
