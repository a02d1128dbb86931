"""
Test configuration for Lvar pipeline tests
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from parsing import tokenize, parse
from stdlib import make_scripted_line_source


@pytest.fixture
def parse_text():
  """Tokenize and parse a source string"""
  def _parse_text(text, strict_arity=False):
    return parse(tokenize(text), strict_arity=strict_arity)
  return _parse_text


@pytest.fixture
def lines():
  """Build a scripted line source for read"""
  return make_scripted_line_source
