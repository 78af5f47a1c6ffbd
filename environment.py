"""
Tern runtime environments - Pure Functional Style
Scopes are plain dictionaries; stores return a new scope instead of mutating,
and lookups walk the parent chain
"""

from typing import Dict, Iterator, Optional, Sequence, Tuple

from error_handling import UndefinedBinding, UndefinedFunction


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_environment(parent: Optional[Dict] = None) -> Dict:
  """Create an empty environment; with no parent this is the root scope"""
  return {
      'parent': parent,
      'bindings': {},
      'functions': {}
  }


def make_function(params: Sequence[str], body) -> Dict:
  """Create a stored function definition"""
  return {
      'params': tuple(params),
      'body': body
  }


def create_child(env: Dict) -> Dict:
  """Return a new empty scope whose parent is `env`"""
  return make_environment(parent=env)


# ============================================================================
# ENVIRONMENT OPERATIONS (Pure Functions)
# ============================================================================

def store_binding(env: Dict, name: str, value: Dict) -> Dict:
  """Return `env` with name bound to value in the current scope only"""
  return {
      **env,
      'bindings': {**env['bindings'], name: value}
  }


def store_function(env: Dict, name: str, params: Sequence[str], body) -> Dict:
  """Return `env` with a function stored in the current scope only"""
  return {
      **env,
      'functions': {**env['functions'], name: make_function(params, body)}
  }


def _lookup(env: Optional[Dict], table: str, name: str) -> Optional[Dict]:
  while env is not None:
    if name in env[table]:
      return env[table][name]
    env = env['parent']
  return None


def get_binding(env: Dict, name: str) -> Dict:
  """Look up a binding in the environment chain"""
  value = _lookup(env, 'bindings', name)
  if value is None:
    raise UndefinedBinding(name)
  return value


def get_function(env: Dict, name: str) -> Dict:
  """Look up a function in the environment chain"""
  func = _lookup(env, 'functions', name)
  if func is None:
    raise UndefinedFunction(name)
  return func


def _visible(env: Optional[Dict], table: str) -> Iterator[Tuple[str, Dict]]:
  seen = set()
  while env is not None:
    for name, entry in env[table].items():
      if name not in seen:
        seen.add(name)
        yield name, entry
    env = env['parent']


def iter_bindings(env: Dict) -> Iterator[Tuple[str, Dict]]:
  """Visible bindings, innermost definition first"""
  return _visible(env, 'bindings')


def iter_functions(env: Dict) -> Iterator[Tuple[str, Dict]]:
  """Visible functions, innermost definition first"""
  return _visible(env, 'functions')


def has_function(env: Dict, name: str) -> bool:
  return _lookup(env, 'functions', name) is not None


def scope_depth(env: Dict) -> int:
  """Number of scopes between `env` and the root, the root itself being 0"""
  depth = 0
  while env['parent'] is not None:
    env = env['parent']
    depth += 1
  return depth
