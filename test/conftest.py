"""
Test configuration for Tern tests
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from parsing import parse_program
from interpreter import eval_program
from environment import make_environment


@pytest.fixture
def root_env():
  """A fresh, empty root environment"""
  return make_environment()


@pytest.fixture
def run():
  """Parse and evaluate a program, returning (final_env, values)"""
  def _run(source, env=None):
    env, results = eval_program(parse_program(source), env)
    return env, [value for _, value in results]
  return _run
