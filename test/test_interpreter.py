"""
Evaluation tests for Tern programs
"""

import pytest
from parsing import (
  Number,
  FunctionCall,
  BindingUsage,
  Block,
  ExpressionStatement,
  parse
)
from interpreter import evaluate, eval_program
from environment import get_binding, iter_bindings
from stdlib import make_number
from error_handling import (
  UndefinedBinding,
  UndefinedFunction,
  ArityMismatch,
  EmptyOrNonExpressionBlock,
  NonExpressionBody,
  DivisionByZero,
  RecursionDepthExceeded
)


class TestExpressions:

  def test_number(self, root_env):
    value, env = evaluate(Number(7), root_env)
    assert value == make_number(7)
    assert env is root_env

  def test_operation(self, run):
    _, values = run("2 * 3")
    assert values == [make_number(6)]

  def test_division_truncates(self, run):
    _, values = run("7 / 2\n{ 0 - 7 } / 2")
    assert values == [make_number(3), make_number(-3)]

  def test_division_by_zero(self, run):
    with pytest.raises(DivisionByZero):
      run("1 / 0")

  def test_definitions_have_no_value(self, run):
    _, values = run("let a = 1\nfn f => 2")
    assert values == [None, None]

  def test_redefinition_shadows(self, run):
    _, values = run("let a = 1\nlet a = 2\na")
    assert values[-1] == make_number(2)


class TestBlocks:

  def test_block_sequencing(self, run):
    _, values = run("{ let a = 10\n let b = a\n b }")
    assert values == [make_number(10)]

  def test_block_bindings_do_not_leak(self, run):
    env, values = run("let a = 1\n{ let a = 2\n a }\na")
    assert values[1:] == [make_number(2), make_number(1)]
    assert get_binding(env, "a") == make_number(1)

  def test_block_sees_outer_bindings(self, run):
    _, values = run("let a = 4\n{ a * a }")
    assert values[-1] == make_number(16)

  def test_empty_block(self, root_env):
    with pytest.raises(EmptyOrNonExpressionBlock):
      evaluate(Block(()), root_env)

  def test_block_ending_in_definition(self, run):
    with pytest.raises(EmptyOrNonExpressionBlock):
      run("{ let a = 1 }")


class TestFunctionCalls:

  def test_add(self, run, root_env):
    env, _ = run("fn add x y => x + y")
    value, _ = evaluate(FunctionCall("add", (Number(2), Number(2))), env)
    assert value == make_number(4)

  def test_call_with_block_argument(self, run):
    _, values = run("fn add x y => x + y\nfn mul x y => x * y\nadd { mul 2 3 } 1")
    assert values[-1] == make_number(7)

  def test_undefined_function(self, root_env):
    call = FunctionCall("i_dont_exist", (Number(1),))
    with pytest.raises(UndefinedFunction) as exc_info:
      evaluate(call, root_env)
    assert exc_info.value.name == "i_dont_exist"

  def test_undefined_function_is_not_a_parse_error(self, root_env):
    stmt = parse("i_dont_exist 1")
    with pytest.raises(UndefinedFunction):
      evaluate(stmt, root_env)

  @pytest.mark.parametrize("params, actual", [
      ((Number(1),), 1),
      ((Number(1), Number(2), Number(3)), 3),
  ])
  def test_arity_mismatch(self, run, params, actual):
    env, _ = run("fn mul x y => x * y")
    with pytest.raises(ArityMismatch) as exc_info:
      evaluate(FunctionCall("mul", params), env)
    assert exc_info.value.expected == 2
    assert exc_info.value.actual == actual

  def test_arity_checked_before_arguments(self, run):
    env, _ = run("fn mul x y => x * y")
    with pytest.raises(ArityMismatch):
      evaluate(FunctionCall("mul", (BindingUsage("not_defined"),)), env)

  def test_failed_call_leaves_environment_untouched(self, run):
    env, _ = run("let a = 1\nfn mul x y => x * y")
    before = dict(iter_bindings(env))
    with pytest.raises(ArityMismatch):
      evaluate(FunctionCall("mul", (Number(1),)), env)
    assert dict(iter_bindings(env)) == before
    assert "x" not in env['bindings']

  def test_arguments_use_caller_scope(self, run):
    _, values = run("let x = 5\nfn f y => y * 2\n{ let x = 1\n f x }")
    assert values[-1] == make_number(2)

  def test_body_sees_call_site_scope(self, run):
    _, values = run("let x = 5\nfn f y => y + x\nf 10\n{ let x = 1\n f 10 }")
    assert values[-2:] == [make_number(15), make_number(11)]

  def test_parameters_do_not_leak(self, run):
    env, _ = run("fn id x => x\nid 3")
    with pytest.raises(UndefinedBinding):
      get_binding(env, "x")

  def test_function_body_definition_has_no_value(self, run):
    with pytest.raises(NonExpressionBody) as exc_info:
      run("fn f x => let a = x\nf 1")
    assert exc_info.value.name == "f"

  def test_unbounded_recursion(self, run):
    with pytest.raises(RecursionDepthExceeded):
      run("fn loop => loop\nloop")


class TestBindingUsage:

  def test_zero_argument_function_via_binding_usage(self, run):
    _, values = run("fn answer => 42\nanswer")
    assert values[-1] == make_number(42)

  def test_binding_preferred_over_function(self, run):
    _, values = run("fn a => 1\nlet a = 2\na")
    assert values[-1] == make_number(2)

  def test_missing_name_reports_binding_error(self, root_env):
    with pytest.raises(UndefinedBinding) as exc_info:
      evaluate(ExpressionStatement(BindingUsage("typo")), root_env)
    assert exc_info.value.name == "typo"

  def test_function_with_parameters_reports_arity(self, run):
    with pytest.raises(ArityMismatch) as exc_info:
      run("fn inc x => x + 1\ninc")
    assert exc_info.value.expected == 1
    assert exc_info.value.actual == 0


class TestProgram:

  def test_eval_program_threads_environment(self):
    stmts = [parse("let a = 3"), parse("fn sq x => x * x"), parse("sq a")]
    env, results = eval_program(stmts)
    assert [value for _, value in results] == [None, None, make_number(9)]
    assert get_binding(env, "a") == make_number(3)
