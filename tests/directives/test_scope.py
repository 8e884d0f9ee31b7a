"""
Tests for the scope stack state machine.
"""

import pytest

from lgate.directives import ScopeFlag, ScopeStack
from lgate.errors import UnbalancedElifError, UnbalancedElseError, UnbalancedEndifError


class TestScopeStack:

    def setup_method(self):
        self.stack = ScopeStack()

    def test_initially_empty(self):
        assert self.stack.depth == 0
        assert self.stack.top is None
        assert not self.stack.erasing

    def test_open(self):
        self.stack.open(True)
        assert self.stack.top == ScopeFlag.PASSING
        self.stack.open(False)
        assert self.stack.top == ScopeFlag.ERASING
        assert self.stack.erasing
        assert self.stack.depth == 2

    def test_open_deep(self):
        self.stack.open_deep()
        assert self.stack.top == ScopeFlag.ERASING | ScopeFlag.DEEP
        assert self.stack.deep_erasing

    @pytest.mark.parametrize("passed,expected", [
        (True, ScopeFlag.ERASING | ScopeFlag.ELSE),
        (False, ScopeFlag.PASSING | ScopeFlag.ELSE),
    ])
    def test_else_flips(self, passed, expected):
        self.stack.open(passed)
        self.stack.enter_else()
        assert self.stack.top == expected

    def test_else_on_empty_stack(self):
        with pytest.raises(UnbalancedElseError) as exc:
            self.stack.enter_else()
        assert not exc.value.duplicate

    def test_duplicate_else(self):
        self.stack.open(True)
        self.stack.enter_else()
        with pytest.raises(UnbalancedElseError) as exc:
            self.stack.enter_else()
        assert exc.value.duplicate
        assert self.stack.top == ScopeFlag.ERASING | ScopeFlag.ELSE

    def test_elif_after_taken_branch(self):
        self.stack.open(True)
        assert self.stack.elif_taken() is True
        self.stack.skip_elif()
        assert self.stack.top == ScopeFlag.ERASING | ScopeFlag.ELSEIF | ScopeFlag.DEEP

    @pytest.mark.parametrize("passed,expected", [
        (True, ScopeFlag.PASSING | ScopeFlag.ELSEIF),
        (False, ScopeFlag.ERASING | ScopeFlag.ELSEIF),
    ])
    def test_elif_not_yet_taken(self, passed, expected):
        self.stack.open(False)
        assert self.stack.elif_taken() is False
        self.stack.take_elif(passed)
        assert self.stack.top == expected

    def test_else_after_elif_branch(self):
        self.stack.open(False)
        self.stack.take_elif(True)
        self.stack.enter_else()
        assert self.stack.top == ScopeFlag.ERASING | ScopeFlag.ELSE

    def test_elif_on_empty_stack(self):
        with pytest.raises(UnbalancedElifError) as exc:
            self.stack.elif_taken()
        assert not exc.value.after_else

    def test_elif_after_else(self):
        self.stack.open(True)
        self.stack.enter_else()
        with pytest.raises(UnbalancedElifError) as exc:
            self.stack.elif_taken()
        assert exc.value.after_else

    def test_close(self):
        self.stack.open(True)
        self.stack.open_deep()
        assert self.stack.close() == ScopeFlag.ERASING | ScopeFlag.DEEP
        assert self.stack.close() == ScopeFlag.PASSING
        assert self.stack.depth == 0

    def test_close_empty(self):
        with pytest.raises(UnbalancedEndifError):
            self.stack.close()
