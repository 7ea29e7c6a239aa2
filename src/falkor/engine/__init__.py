"""
Falkor Test Case Engine

Request building, execution, response evaluation and chaining.
"""

from .options import Evaluator, OptionSet
from .builder import OptionsBuilder
from .adapter import TestFunction
from .chain import ChainStep, StepKind
from .testcase import TestCase
from .template import TestTemplate

__all__ = [
    "Evaluator",
    "OptionSet",
    "OptionsBuilder",
    "TestFunction",
    "ChainStep",
    "StepKind",
    "TestCase",
    "TestTemplate",
]
