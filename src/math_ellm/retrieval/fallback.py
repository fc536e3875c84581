"""
Templated answers for questions the knowledge base cannot match.

Rules are tried in a fixed order and the first one whose predicate matches the
question produces the answer. Each rule carries a ``FallbackKind`` tag so that
categories can be tested on their own.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

DERIVATIVE_RE = re.compile(r"derivative|differentiate|d/dx", re.IGNORECASE)
INTEGRAL_RE = re.compile(r"integrate|integral|antiderivative", re.IGNORECASE)
EQUATION_RE = re.compile(r"equation|solve|find.*x", re.IGNORECASE)
POWER_RE = re.compile(r"x\^(\d+)", re.IGNORECASE)
SIN_RE = re.compile(r"sin\(x\)", re.IGNORECASE)
QUADRATIC_RE = re.compile(r"quadratic|x\^2", re.IGNORECASE)


class FallbackKind(str, Enum):
    DERIVATIVE_OF_POWER = "derivative_of_power"
    DERIVATIVE_OF_SIN = "derivative_of_sin"
    DERIVATIVE = "derivative"
    INTEGRAL_OF_POWER = "integral_of_power"
    INTEGRAL_OF_SIN = "integral_of_sin"
    INTEGRAL = "integral"
    QUADRATIC_EQUATION = "quadratic_equation"
    LINEAR_EQUATION = "linear_equation"
    DEFAULT = "default"


@dataclass(frozen=True)
class GeneratedAnswer:
    kind: FallbackKind
    expression: str
    answer: str


@dataclass(frozen=True)
class FallbackRule:
    kind: FallbackKind
    predicate: Callable[[str], bool]
    produce: Callable[[str], Tuple[str, str]]

    def apply(self, question: str) -> Optional[GeneratedAnswer]:
        if not self.predicate(question):
            return None
        expression, answer = self.produce(question)
        return GeneratedAnswer(kind=self.kind, expression=expression, answer=answer)


def _power(question: str) -> int:
    return int(POWER_RE.search(question).group(1))


def _derivative_of_power(question: str) -> Tuple[str, str]:
    n = _power(question)
    return (
        f"\\frac{{d}}{{dx}}(x^{n}) = {n}x^{n - 1}",
        f"The derivative of $x^{n}$ is ${n}x^{n - 1}$.",
    )


def _integral_of_power(question: str) -> Tuple[str, str]:
    n = _power(question)
    m = n + 1
    return (
        f"\\int x^{n} dx = \\frac{{x^{m}}}{{{m}}} + C",
        f"The integral of $x^{n}$ is $\\frac{{x^{m}}}{{{m}}} + C$.",
    )


def _fixed(expression: str, answer: str) -> Callable[[str], Tuple[str, str]]:
    return lambda question: (expression, answer)


def _all(*patterns: re.Pattern) -> Callable[[str], bool]:
    return lambda question: all(p.search(question) for p in patterns)


FALLBACK_RULES: List[FallbackRule] = [
    FallbackRule(
        FallbackKind.DERIVATIVE_OF_POWER,
        _all(DERIVATIVE_RE, POWER_RE),
        _derivative_of_power,
    ),
    FallbackRule(
        FallbackKind.DERIVATIVE_OF_SIN,
        _all(DERIVATIVE_RE, SIN_RE),
        _fixed(
            "\\frac{d}{dx}\\sin(x) = \\cos(x)",
            "The derivative of $\\sin(x)$ is $\\cos(x)$.",
        ),
    ),
    FallbackRule(
        FallbackKind.DERIVATIVE,
        _all(DERIVATIVE_RE),
        _fixed(
            "\\frac{d}{dx}f(x) = f'(x)",
            "To find the derivative, apply the differentiation rules to the "
            "function.",
        ),
    ),
    FallbackRule(
        FallbackKind.INTEGRAL_OF_POWER,
        _all(INTEGRAL_RE, POWER_RE),
        _integral_of_power,
    ),
    FallbackRule(
        FallbackKind.INTEGRAL_OF_SIN,
        _all(INTEGRAL_RE, SIN_RE),
        _fixed(
            "\\int \\sin(x) dx = -\\cos(x) + C",
            "The integral of $\\sin(x)$ is $-\\cos(x) + C$.",
        ),
    ),
    FallbackRule(
        FallbackKind.INTEGRAL,
        _all(INTEGRAL_RE),
        _fixed(
            "\\int f(x) dx = F(x) + C",
            "To find the integral, apply the integration rules to the function.",
        ),
    ),
    FallbackRule(
        FallbackKind.QUADRATIC_EQUATION,
        _all(EQUATION_RE, QUADRATIC_RE),
        _fixed(
            "x = \\frac{-b \\pm \\sqrt{b^2 - 4ac}}{2a}",
            "For a quadratic equation $ax^2 + bx + c = 0$, the solution is given "
            "by the quadratic formula: $x = \\frac{-b \\pm \\sqrt{b^2 - 4ac}}{2a}$.",
        ),
    ),
    FallbackRule(
        FallbackKind.LINEAR_EQUATION,
        _all(EQUATION_RE),
        _fixed(
            "ax + b = 0 \\implies x = -\\frac{b}{a}",
            "For a linear equation $ax + b = 0$, the solution is "
            "$x = -\\frac{b}{a}$.",
        ),
    ),
]

DEFAULT_ANSWER = GeneratedAnswer(
    kind=FallbackKind.DEFAULT,
    expression="E = mc^2",
    answer="I couldn't determine the specific equation for this question. "
    "Here's a famous equation: $E = mc^2$.",
)


def generate_answer(
    question: str, rules: Optional[List[FallbackRule]] = None
) -> GeneratedAnswer:
    """Return the answer of the first matching rule, or the default answer."""
    for rule in FALLBACK_RULES if rules is None else rules:
        generated = rule.apply(question)
        if generated is not None:
            return generated
    return DEFAULT_ANSWER
