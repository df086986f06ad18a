"""Unit tests for greedy longest-match encoding and decoding."""

import pytest

import chaitok as ctok
from chaitok.errors import ConfigError, VocabularyError


REFERENCE_TEXT = "Hello, world! Chai > Coffee! Let's tokenize this. Price: 199.99 INR"


# Worked examples
# ---------------------------------------------------------------------------


def test_encode_hello_world(small_vocab):
    """Encoding splits on the longest tokens with their ids."""
    tokens, ids = ctok.encode("Hello, world!", small_vocab)
    assert tokens == ["Hello", ",", " ", "world", "!"]
    assert ids == [0, 2, 4, 1, 3]


def test_decode_hello_world(small_vocab):
    """Decoding the worked example restores the text."""
    assert ctok.decode([0, 2, 4, 1, 3], small_vocab) == "Hello, world!"


def test_unknown_char_gets_fallback_id(small_vocab):
    """A character outside the vocabulary is emitted alone with N + codepoint."""
    tokens, ids = ctok.encode("Z", small_vocab)
    assert tokens == ["Z"]
    assert ids == [95]
    assert ctok.decode([95], small_vocab) == "Z"


def test_reference_sentence_with_default_vocab():
    """The built-in vocabulary reproduces the reference ids."""
    tokens, ids = ctok.encode(REFERENCE_TEXT)
    assert ids == [
        0, 56, 51, 1, 54, 51, 20, 51, 142, 51, 21, 54, 51, 22, 23, 51,
        24, 51, 25, 17, 51, 14, 15, 51, 16, 17, 18, 51, 19,
    ]  # fmt: skip
    assert tokens[14] == "'s"
    assert "".join(tokens) == REFERENCE_TEXT
    assert ctok.decode(ids) == REFERENCE_TEXT


# Greedy matching
# ---------------------------------------------------------------------------


def test_longest_match_wins():
    """A token is preferred over its own prefixes."""
    vocab = ctok.build_vocab(["a", "ab", "abc"])
    tokens, ids = ctok.encode("abcab", vocab)
    assert tokens == ["abc", "ab"]
    assert ids == [2, 1]


def test_match_length_is_bounded():
    """Tokens longer than MAX_TOKEN_LEN are never matched."""
    long_tok = "x" * (ctok.MAX_TOKEN_LEN + 1)
    vocab = ctok.build_vocab([long_tok, "x"])
    tokens, ids = ctok.encode(long_tok, vocab)
    assert tokens == ["x"] * len(long_tok)
    assert ids == [1] * len(long_tok)


def test_token_of_max_len_is_matched():
    """A token exactly MAX_TOKEN_LEN long is still matched."""
    tok = "y" * ctok.MAX_TOKEN_LEN
    vocab = ctok.build_vocab(["y", tok])
    tokens, ids = ctok.encode(tok + "y", vocab)
    assert tokens == [tok, "y"]
    assert ids == [1, 0]


def test_custom_max_token_len():
    """A smaller lookahead window splits longer tokens."""
    tokenizer = ctok.Tokenizer(ctok.build_vocab(["abc", "a", "b", "c"]), max_token_len=2)
    assert tokenizer.encode("abc").tokens == ["a", "b", "c"]


@pytest.mark.parametrize("bad_len", [0, -3])
def test_invalid_max_token_len_raises(small_vocab, bad_len):
    """A lookahead window below one is rejected."""
    with pytest.raises(ConfigError):
        ctok.Tokenizer(small_vocab, max_token_len=bad_len)


def test_fallback_between_matches(tokenizer):
    """Unknown characters fall back one at a time between vocabulary tokens."""
    result = tokenizer.encode("Hello?!")
    assert result.tokens == ["Hello", "?", "!"]
    assert result.ids == [0, 5 + ord("?"), 3]
    assert result.pairs() == [("Hello", 0), ("?", 68), ("!", 3)]
    assert len(result) == 3


# Totality
# ---------------------------------------------------------------------------


def test_empty_text(tokenizer):
    """Empty text encodes to empty sequences."""
    result = tokenizer.encode("")
    assert result.tokens == []
    assert result.ids == []


def test_empty_ids(tokenizer):
    """An empty id sequence decodes to the empty string."""
    assert tokenizer.decode([]) == ""


def test_empty_vocab_encodes_everything_as_fallback():
    """With N = 0 every id is the plain code point."""
    tokens, ids = ctok.encode("hi", ctok.build_vocab([]))
    assert tokens == ["h", "i"]
    assert ids == [ord("h"), ord("i")]
    assert ctok.decode(ids, ctok.build_vocab([])) == "hi"


@pytest.mark.parametrize(
    "text",
    [
        "Hello, world!",
        "world world  Hello",
        "café naïve 日本語",
        "tabs\tand\nnewlines\r\n",
        "\x00\x01 control",
    ],
)
def test_tokens_concatenate_to_input(tokenizer, text):
    """Joined tokens give back the input and decode restores it."""
    result = tokenizer.encode(text)
    assert "".join(result.tokens) == text
    assert len(result.tokens) == len(result.ids)
    assert tokenizer.decode(result.ids) == text


def test_decode_accepts_implausible_fallback_ids(tokenizer):
    """Any non-negative id is accepted, even ones no encoder produced."""
    assert tokenizer.decode([5]) == "\x00"
    assert tokenizer.decode([5 + 0xD800]) == "\ud800"


def test_decode_beyond_unicode_replaces(tokenizer):
    """Fallback values past U+10FFFF decode to U+FFFD by default."""
    assert tokenizer.decode([0, 5 + 0x110000]) == "Hello\ufffd"


def test_decode_beyond_unicode_strict_raises(tokenizer):
    """Under errors="strict" an unrepresentable fallback id raises."""
    with pytest.raises(VocabularyError) as exc_info:
        tokenizer.decode([5 + 0x110000], errors="strict")
    assert exc_info.value.invalid_id == 5 + 0x110000


def test_decode_negative_id_raises(tokenizer):
    """Negative ids are outside the decoder's input domain."""
    with pytest.raises(VocabularyError):
        tokenizer.decode([0, -1])


def test_decode_unknown_error_policy_raises(tokenizer):
    """Only "replace" and "strict" are accepted."""
    with pytest.raises(ConfigError):
        tokenizer.decode([0], errors="ignore")


def test_duplicate_tokens_decode_by_surviving_id():
    """Only the surviving id of a duplicated token is a vocabulary id."""
    vocab = ctok.build_vocab(["a", "b", "a"])
    tokens, ids = ctok.encode("ab", vocab)
    assert ids == [2, 1]
    assert ctok.decode([2, 1], vocab) == "ab"
    # id 0 lost its token: 0 - N has no character
    assert ctok.decode([0], vocab) == "\ufffd"
    assert ctok.Tokenizer(vocab, fallback="utf16").decode([0]) == "\ufffe"


def test_duplicate_tokens_fallback_id_can_hit_surviving_id():
    """With duplicates, N counts distinct tokens, so N + codepoint may be a vocabulary id."""
    vocab = ctok.build_vocab(["a", "b", "a"])
    assert vocab.size == 2
    tokens, ids = ctok.encode("\x00", vocab)
    assert tokens == ["\x00"]
    assert ids == [2]
    # id 2 belongs to the surviving "a", so the fallback does not round-trip
    assert ctok.decode(ids, vocab) == "a"


# Determinism
# ---------------------------------------------------------------------------


def test_encode_is_deterministic(tokenizer):
    """Repeated calls give identical results."""
    text = "Hello, world! Zebra"
    assert tokenizer.encode(text) == tokenizer.encode(text)
    assert ctok.encode(text) == ctok.encode(text)


def test_tokenizers_share_vocab(small_vocab):
    """Two tokenizers over one vocabulary agree."""
    a = ctok.Tokenizer(small_vocab)
    b = ctok.Tokenizer(small_vocab)
    assert a.vocab is b.vocab
    assert a.encode("Hello world").ids == b.encode("Hello world").ids


# Supplementary-plane characters
# ---------------------------------------------------------------------------


def test_astral_char_codepoint_mode(tokenizer):
    """In codepoint mode an emoji is a single fallback id."""
    result = tokenizer.encode("😀")
    assert result.tokens == ["😀"]
    assert result.ids == [5 + 0x1F600]
    assert tokenizer.decode(result.ids) == "😀"


def test_astral_char_utf16_mode(utf16_tokenizer):
    """In utf16 mode an emoji becomes its two surrogate code units."""
    result = utf16_tokenizer.encode("😀")
    assert result.tokens == ["\ud83d", "\ude00"]
    assert result.ids == [5 + 0xD83D, 5 + 0xDE00]
    assert utf16_tokenizer.decode(result.ids) == "😀"


def test_utf16_mode_matches_codepoint_mode_on_bmp_text(tokenizer, utf16_tokenizer):
    """Both modes agree when no astral characters are present."""
    text = "Hello, world! Zé"
    assert utf16_tokenizer.encode(text) == tokenizer.encode(text)


def test_utf16_decode_wraps_to_16_bits(utf16_tokenizer):
    """utf16 fallback values are reduced modulo 65536."""
    assert utf16_tokenizer.decode([5 + 0x10000 + ord("A")]) == "A"


def test_utf16_window_counts_code_units():
    """The lookahead window is measured in code units in utf16 mode."""
    vocab = ctok.build_vocab(["😀😀", "😀"])
    by_char = ctok.Tokenizer(vocab, max_token_len=2)
    by_unit = ctok.Tokenizer(vocab, max_token_len=2, fallback="utf16")

    assert by_char.encode("😀😀").tokens == ["😀😀"]
    assert by_unit.encode("😀😀").tokens == ["😀", "😀"]
    assert by_unit.encode("😀😀").ids == [1, 1]


def test_astral_vocab_token_in_utf16_mode():
    """Vocabulary tokens with astral characters are matched in utf16 mode."""
    vocab = ctok.build_vocab(["chai", "☕", "🍵"])
    tokenizer = ctok.Tokenizer(vocab, fallback="utf16")
    result = tokenizer.encode("chai🍵")
    assert result.tokens == ["chai", "🍵"]
    assert result.ids == [0, 2]
    assert tokenizer.decode(result.ids) == "chai🍵"


def test_utf16_clashing_keys_keep_higher_id():
    """An astral token and its spelled-out surrogate pair resolve to the higher id."""
    vocab = ctok.build_vocab(["b", "😀", "\ud83d\ude00", "😀"])
    tokenizer = ctok.Tokenizer(vocab, fallback="utf16")
    assert tokenizer.encode("😀").ids == [3]


def test_unknown_fallback_mode_raises(small_vocab):
    """Unknown fallback names are rejected."""
    with pytest.raises(ConfigError):
        ctok.Tokenizer(small_vocab, fallback="utf8")


# Batch encode/decode
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("mode", ["auto", "batch", "off", ctok.ParallelMode.BATCH])
def test_encode_batch_matches_single(tokenizer, mode):
    """Batch results equal per-text results, in input order."""
    texts = ["Hello", "world!", "Z", "", "Hello, world!"]
    results = tokenizer.encode_batch(texts, num_workers=3, parallel_mode=mode)
    assert results == [tokenizer.encode(t) for t in texts]


@pytest.mark.parametrize("mode", ["auto", "batch", "off"])
def test_decode_batch_matches_single(tokenizer, mode):
    """Batch decoding equals per-sequence decoding."""
    batch = [[0, 2, 4, 1, 3], [95], []]
    assert tokenizer.decode_batch(batch, parallel_mode=mode) == [
        "Hello, world!",
        "Z",
        "",
    ]


def test_batch_empty_input(tokenizer):
    """Empty batches give empty results."""
    assert tokenizer.encode_batch([]) == []
    assert tokenizer.decode_batch([]) == []


def test_decode_batch_propagates_errors(tokenizer):
    """An invalid id inside a batch raises from the batch call."""
    with pytest.raises(VocabularyError):
        tokenizer.decode_batch([[0], [-4]], parallel_mode="batch")


def test_unknown_parallel_mode_raises(tokenizer):
    """Unknown parallel mode names are rejected."""
    with pytest.raises(ConfigError):
        tokenizer.encode_batch(["Hello"], parallel_mode="chunk")