"""
Pytest configuration and shared fixtures for Kanon tests.
"""

import sys

import pytest
from loguru import logger

from kanon.config import LanguageConfig, LintConfig
from kanon.parsing import parse

CLEAN_SWIFT = '''import Foundation

/// A point in the plane.
struct Point {
    let x: Double
    let y: Double

    func distance(to other: Point) -> Double {
        let dx = x - other.x
        let dy = y - other.y
        return (dx * dx + dy * dy).squareRoot()
    }
}

enum Direction {
    case north, south
}

func describe(_ values: [Int]) -> String {
    let total = values.reduce(0, +)
    if values.isEmpty {
        return "empty"
    } else {
        return "total \\(total)"
    }
}
'''


@pytest.fixture
def clean_source():
    """Swift source that satisfies every builtin rule."""
    return CLEAN_SWIFT


@pytest.fixture
def check():
    """Run a single rule's check over source text and return its findings."""

    def run(rule, source, language=None):
        return list(rule.check(parse(source, language or LanguageConfig())))

    return run


@pytest.fixture
def only():
    """Build a LintConfig restricted to the given categories."""

    def build(*categories):
        return LintConfig().with_categories(list(categories))

    return build


@pytest.fixture(autouse=True)
def reset_logging():
    """Commands reconfigure loguru; give every test the default stderr sink back."""
    yield
    logger.remove()
    logger.add(sys.stderr)
