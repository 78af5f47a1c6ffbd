"""
Tern Interpreter - Pure Functional Style
Tree-walking evaluation over the AST from parsing.py. The only state is the
environment chain, threaded through every call and returned alongside the value.
"""

from typing import Dict, List, Optional, Tuple

from parsing import (
  Number,
  Operation,
  FunctionCall,
  BindingUsage,
  Block,
  BindingDefinition,
  FunctionDefinition,
  ExpressionStatement,
)
from environment import (
  make_environment,
  create_child,
  get_binding,
  get_function,
  has_function,
  store_binding,
  store_function,
  scope_depth,
)
from error_handling import (
  UndefinedBinding,
  ArityMismatch,
  EmptyOrNonExpressionBlock,
  NonExpressionBody,
  RecursionDepthExceeded,
)
from stdlib import make_number, BUILTIN_OPERATORS


# ============================================================================
# EVALUATION FUNCTIONS
# ============================================================================

def eval_ast(ast_node, env: Dict, debug: bool = False) -> Tuple[Optional[Dict], Dict]:
  """
  Evaluate an AST node and return (result_value, updated_environment).
  Expressions never change the environment; definitions evaluate to None.
  """
  if debug:
    print(f"Evaluating: {type(ast_node).__name__} (scope depth {scope_depth(env)})")

  if isinstance(ast_node, Number):
    return eval_number(ast_node, env, debug)
  elif isinstance(ast_node, Operation):
    return eval_operation(ast_node, env, debug)
  elif isinstance(ast_node, FunctionCall):
    return eval_function_call(ast_node, env, debug)
  elif isinstance(ast_node, BindingUsage):
    return eval_binding_usage(ast_node, env, debug)
  elif isinstance(ast_node, Block):
    return eval_block(ast_node, env, debug)
  elif isinstance(ast_node, BindingDefinition):
    return eval_binding_definition(ast_node, env, debug)
  elif isinstance(ast_node, FunctionDefinition):
    return eval_function_definition(ast_node, env, debug)
  elif isinstance(ast_node, ExpressionStatement):
    return eval_ast(ast_node.expr, env, debug)
  else:
    raise TypeError(f"Unknown node type: {type(ast_node).__name__}")


def eval_number(ast_node: Number, env: Dict, debug: bool = False) -> Tuple[Dict, Dict]:
  """Evaluate number literal"""
  return make_number(ast_node.value), env


def eval_operation(ast_node: Operation, env: Dict, debug: bool = False) -> Tuple[Dict, Dict]:
  """Evaluate binary operation, left operand first"""
  left_val, _ = eval_ast(ast_node.lhs, env, debug)
  right_val, _ = eval_ast(ast_node.rhs, env, debug)

  if ast_node.op in BUILTIN_OPERATORS:
    return BUILTIN_OPERATORS[ast_node.op](left_val, right_val), env
  raise TypeError(f"Unknown operation: {ast_node.op}")


def eval_function_call(ast_node: FunctionCall, env: Dict, debug: bool = False) -> Tuple[Dict, Dict]:
  """
  Evaluate a call: arguments are evaluated in the caller's scope and bound
  into a fresh child of it, then the body runs in that child.
  """
  call_env = create_child(env)
  func = get_function(env, ast_node.callee)

  declared = func['params']
  if len(ast_node.params) != len(declared):
    raise ArityMismatch(len(declared), len(ast_node.params), ast_node.callee)

  for param_name, param_ast in zip(declared, ast_node.params):
    arg_val, _ = eval_ast(param_ast, env, debug)
    call_env = store_binding(call_env, param_name, arg_val)

  if debug:
    print(f"  Calling {ast_node.callee} with {list(declared)}")

  result_val, _ = eval_ast(func['body'], call_env, debug)
  if result_val is None:
    raise NonExpressionBody(ast_node.callee)
  return result_val, env


def eval_binding_usage(ast_node: BindingUsage, env: Dict, debug: bool = False) -> Tuple[Dict, Dict]:
  """
  Look the name up as a binding first. A function of the same name is
  called with no arguments instead; if there is neither, the binding
  error is the one reported.
  """
  try:
    return get_binding(env, ast_node.name), env
  except UndefinedBinding:
    if not has_function(env, ast_node.name):
      raise

  if debug:
    print(f"  {ast_node.name} is a function, calling it with no arguments")
  return eval_function_call(FunctionCall(ast_node.name, ()), env, debug)


def eval_block(ast_node: Block, env: Dict, debug: bool = False) -> Tuple[Dict, Dict]:
  """Evaluate statements in one child scope; the last one gives the value"""
  if not ast_node.statements:
    raise EmptyOrNonExpressionBlock()

  block_env = create_child(env)
  result_val = None
  for stmt in ast_node.statements:
    result_val, block_env = eval_ast(stmt, block_env, debug)

  if result_val is None:
    raise EmptyOrNonExpressionBlock()
  return result_val, env


def eval_binding_definition(ast_node: BindingDefinition, env: Dict, debug: bool = False) -> Tuple[None, Dict]:
  value, _ = eval_ast(ast_node.value, env, debug)
  return None, store_binding(env, ast_node.name, value)


def eval_function_definition(ast_node: FunctionDefinition, env: Dict, debug: bool = False) -> Tuple[None, Dict]:
  return None, store_function(env, ast_node.name, ast_node.params, ast_node.body)


# ============================================================================
# ENTRY POINTS
# ============================================================================

def evaluate(ast_node, env: Dict, debug: bool = False) -> Tuple[Optional[Dict], Dict]:
  """
  Evaluate a statement or an expression against `env`.

  Returns (value, env): value is None for definitions, and env is the
  scope to keep using afterwards (it holds any new definition).

  Raises:
    TernRuntimeError subclasses; running out of host stack is reported
    as RecursionDepthExceeded
  """
  try:
    return eval_ast(ast_node, env, debug)
  except RecursionError as e:
    raise RecursionDepthExceeded() from e


def eval_program(statements: List, env: Optional[Dict] = None,
                 debug: bool = False) -> Tuple[Dict, List[Tuple[object, Optional[Dict]]]]:
  """
  Evaluate statements in order against one root environment.
  Returns (final_env, list of (statement, value) pairs)
  """
  if env is None:
    env = make_environment()
  results = []

  for stmt in statements:
    value, env = evaluate(stmt, env, debug)
    results.append((stmt, value))

  return env, results
