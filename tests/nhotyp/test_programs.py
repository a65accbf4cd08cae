"""End-to-end tests running complete programs."""

import pytest

from nhotyp import NhotypBufferingOutput, NhotypListInput


MIN_MAX = """
# Read pairs until 0 0, printing each pair in order.
function min a b as
  let r = a
  if < b a then
    let r = b
  end if
  return r
end function

function max a b as
  let r = a
  if > b a then
    let r = b
  end if
  return r
end function

function main as
  let a = scan
  let b = scan
  while or != a 0 != b 0 do
    let lo = min a b
    let hi = max a b
    print lo hi
    let a = scan
    let b = scan
  end while
  return 0
end function
"""

FIBONACCI = """
function fib n as
  let r = 1
  if > n 2 then
    let r = + fib - n 1 fib - n 2   # both earlier terms
  end if
  return r
end function

function main as
  let count = scan
  while > count 0 do
    let n = scan
    let f = fib n
    print f
    let count = - count 1
  end while
  return 0
end function
"""

GCD = """
function gcd a b as
  while != b 0 do
    let t = % a b
    let a = b
    let b = t
  end while
  return a
end function

function main as
  let x = scan
  let y = scan
  let g = gcd x y
  print x y g
  return g
end function
"""

PRIMES = """
function is_prime n as
  let prime = > n 1
  let d = 2
  while and prime <= * d d n do
    if == % n d 0 then
      let prime = 0
    end if
    let d = + d 1
  end while
  return prime
end function

function main as
  let n = 2
  let found = 0
  while < found 10 do
    if is_prime n then
      print n
      let found = + found 1
    end if
    let n = + n 1
  end while
  return found
end function
"""


class TestPrograms:
    """Test complete programs with input and output."""

    def test_min_max_pairs(self, nhotyp, helpers):
        """Test reading pairs until a terminating pair."""
        result = helpers.assert_prints(
            nhotyp, MIN_MAX, ["23333 76543", "89 1234"], [23333, 76543, 1234, 89, 0, 0]
        )
        assert result.value == 0

    def test_fibonacci(self, nhotyp, helpers):
        """Test recursive Fibonacci over a list of terms."""
        helpers.assert_prints(
            nhotyp, FIBONACCI, ["1", "1", "2", "3", "5", "8", "21"], [7, 1, 2, 3, 4, 5, 6, 8]
        )

    @pytest.mark.parametrize("x,y,expected", [
        (48, 18, 6),
        (17, 5, 1),
        (0, 9, 9),
        (-12, 8, 4),
    ])
    def test_gcd(self, nhotyp, x, y, expected):
        """Test Euclid's algorithm with the non-negative remainder."""
        result = nhotyp.run(GCD, input_values=[x, y])
        assert result.value == expected
        assert result.output == [f"{x} {y} {expected}"]

    def test_primes(self, nhotyp):
        """Test nested loops and conditionals calling a predicate."""
        result = nhotyp.run(PRIMES)
        assert result.output == ["2", "3", "5", "7", "11", "13", "17", "19", "23", "29"]
        assert result.value == 10

    def test_constant_main(self, nhotyp):
        """Test a program that neither reads nor prints."""
        result = nhotyp.run("function main as\n  return 42\nend function\n")
        assert result.value == 42
        assert result.output == []

    def test_load_once_run_twice(self, nhotyp):
        """Test that a loaded program can be run repeatedly."""
        program = nhotyp.load(GCD)
        for x, y, expected in [(10, 4, 2), (9, 6, 3)]:
            output = NhotypBufferingOutput()
            assert nhotyp.run_program(program, NhotypListInput([x, y]), output) == expected
            assert output.get_lines() == [f"{x} {y} {expected}"]
