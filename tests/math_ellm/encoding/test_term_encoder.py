import math

import pytest

from math_ellm.encoding.primes import PrimeSource
from math_ellm.encoding.term_encoder import (
    COMMON_SYMBOLS,
    TermEncoder,
    is_key_term,
    strip_delimiters,
    tokenize,
)


@pytest.fixture
def encoder():
    return TermEncoder()


class TestPrimeAssignment:
    def test_common_symbols_get_the_smallest_primes_in_order(self, encoder):
        source = PrimeSource()
        expected = [source.nth_prime(i) for i in range(len(COMMON_SYMBOLS))]

        assert [encoder.get_prime(s) for s in COMMON_SYMBOLS] == expected
        assert encoder.get_prime("+") == 2
        assert encoder.get_prime("sqrt") == 73
        assert encoder.assigned_count == len(COMMON_SYMBOLS)

    def test_first_corpus_token_gets_next_prime(self, encoder):
        assert encoder.get_prime("x") == 79
        assert encoder.get_prime("y") == 83
        assert encoder.assigned_count == len(COMMON_SYMBOLS) + 2

    def test_get_prime_is_idempotent_and_case_folded(self, encoder):
        first = encoder.get_prime("Theta")
        count = encoder.assigned_count

        assert encoder.get_prime("theta") == first
        assert encoder.get_prime("THETA") == first
        assert encoder.assigned_count == count

    def test_distinct_tokens_never_share_a_prime(self, encoder):
        tokens = ["a", "b", "ab", "10", "1", "frac", "SIN", "≤", "mc"]
        primes = [encoder.get_prime(t) for t in tokens]

        # "SIN" folds onto the seeded "sin"
        assert primes[6] == encoder.get_prime("sin")
        assert len(set(primes)) == len(set(t.lower() for t in tokens))

    def test_term_for_prime_reverses_assignment(self, encoder):
        prime = encoder.get_prime("Lambda")

        assert encoder.term_for_prime(prime) == "lambda"
        assert encoder.term_for_prime(2) == "+"
        assert encoder.term_for_prime(4) is None

    def test_assigned_primes_in_assignment_order(self, encoder):
        encoder.get_prime("q")
        primes = encoder.assigned_primes()

        assert primes[0] == 2
        assert primes[-1] == encoder.get_prime("q")
        assert primes == sorted(primes)

    def test_shared_prime_source(self):
        source = PrimeSource(sieve_limit=10)
        encoder = TermEncoder(source)

        assert encoder.prime_source is source
        assert encoder.get_prime("x") == 79


@pytest.mark.parametrize(
    "expression,expected",
    [
        ("x^2 + 3x", ["x", "^", "2", "+", "3x"]),
        ("$\\frac{a}{b}$", ["(", "a", ")", "/", "(", "b", ")"]),
        ("\\sqrt{x+1}", ["sqrt", "(", "x", "+", "1", ")"]),
        ("\\sin(x)", ["sin", "(", "x", ")"]),
        ("\\(a=b\\)", ["a", "=", "b"]),
        ("\\[a<b\\]", ["a", "<", "b"]),
        ("$$E = mc^2$$", ["E", "=", "mc", "^", "2"]),
        ("f'(x)=2x", ["f'", "(", "x", ")", "=", "2x"]),
        ("a - b * c", ["a", "-", "b", "*", "c"]),
        ("", []),
        ("   ", []),
    ],
)
def test_tokenize(expression, expected):
    assert tokenize(expression) == expected


@pytest.mark.parametrize(
    "expression", ["\\frac{a}{", "\\sqrt{{x}", "}}{{", "$$$", "\\", "x^{2"]
)
def test_tokenize_degrades_gracefully_on_malformed_latex(expression):
    tokens = tokenize(expression)

    assert isinstance(tokens, list)
    assert all(token and not token.isspace() for token in tokens)


@pytest.mark.parametrize(
    "expression,expected",
    [
        ("$x$", "x"),
        ("$$x$$", "x"),
        ("\\(x\\)", "x"),
        ("\\[x\\]", "x"),
        ("  $x$  ", "x"),
        ("$x", "$x"),
        ("$", "$"),
    ],
)
def test_strip_delimiters(expression, expected):
    assert strip_delimiters(expression) == expected


class TestEncoding:
    def test_empty_sequence_encodes_to_one(self, encoder):
        assert encoder.encode_expression([]) == 1
        assert encoder.encode_expression("") == 1
        assert encoder.encode_key_terms([]) == 1

    def test_encoding_is_product_of_primes(self, encoder):
        tokens = ["x", "^", "2"]
        expected = math.prod(encoder.get_prime(t) for t in tokens)

        assert encoder.encode_expression(tokens) == expected

    def test_encoding_ignores_order(self, encoder):
        tokens = ["x", "+", "y", "=", "3"]

        assert encoder.encode_expression(tokens) == encoder.encode_expression(
            list(reversed(tokens))
        )
        assert encoder.encode_expression(tokens) == encoder.encode_expression(
            ["=", "3", "y", "x", "+"]
        )

    def test_repetition_multiplies_by_the_tokens_prime(self, encoder):
        base = encoder.encode_expression(["x", "y"])
        prime_x = encoder.get_prime("x")

        assert encoder.encode_expression(["x", "y", "x"]) == base * prime_x
        assert encoder.encode_expression(["x", "x", "y", "x"]) == base * prime_x**2

    def test_string_input_is_tokenized(self, encoder):
        assert encoder.encode_expression("x^2 + 1") == encoder.encode_expression(
            ["x", "^", "2", "+", "1"]
        )

    def test_large_encodings_stay_exact(self, encoder):
        tokens = [f"t{i}" for i in range(200)]
        encoding = encoder.encode_expression(tokens)

        assert encoding.bit_length() > 64
        for token in tokens:
            assert encoding % encoder.get_prime(token) == 0

    def test_key_terms_filter(self, encoder):
        tokens = ["x", "^", "2", "foo", "sin", "ln", "3.14", "3.", "xy", "(", "int"]

        assert encoder.key_terms(tokens) == ["x", "^", "2", "sin", "3.14", "int"]

    def test_encode_key_terms_uses_only_key_terms(self, encoder):
        tokens = ["Whatis", "x", "^", "2", "?", "sqrt"]

        assert encoder.encode_key_terms(tokens) == encoder.encode_expression(
            ["x", "^", "2"]
        )

    def test_encode_key_terms_of_question_text(self, encoder):
        # Whitespace is removed before splitting, so prose collapses into one token
        assert encoder.encode_key_terms(
            "What is the derivative of x^2?"
        ) == encoder.get_prime("^")
        assert encoder.encode_key_terms("derivative of x^2") == encoder.get_prime(
            "^"
        ) * encoder.get_prime("2")

    def test_decode_recovers_tokens_with_multiplicity(self, encoder):
        encoding = encoder.encode_expression(["y", "x", "x", "^"])

        assert sorted(encoder.decode(encoding)) == ["^", "x", "x", "y"]

    def test_decode_of_one_is_empty(self, encoder):
        assert encoder.decode(1) == []

    def test_decode_drops_unassigned_factors(self, encoder):
        encoding = encoder.encode_expression(["x"])
        unassigned = encoder.prime_source.nth_prime(encoder.assigned_count)

        assert encoder.decode(encoding * unassigned) == ["x"]


@pytest.mark.parametrize(
    "token,expected",
    [
        ("x", True),
        ("X", True),
        ("42", True),
        ("0.5", True),
        ("=", True),
        ("int", True),
        ("xy", False),
        ("<", False),
        ("ln", False),
        ("(", False),
        (".5", False),
        ("٣", False),
        ("٣.٥", False),
        ("７", False),
    ],
)
def test_is_key_term(token, expected):
    assert is_key_term(token) is expected
