"""Pylint bridge: expose every registered hypcheck checker as a pylint message."""

from typing import TYPE_CHECKING

import astroid
from pylint.checkers import BaseChecker

from hypcheck.domain.config import ConfigurationResolver, EffectiveConfig
from hypcheck.domain.registry import CheckerRegistry
from hypcheck.domain.rule_msgs import RuleMsgBuilder
from hypcheck.domain.rules import Violation
from hypcheck.use_cases.analysis_engine import AnalysisEngine, AnalysisSession

if TYPE_CHECKING:
    from pylint.lint import PyLinter


class HypRulesChecker(BaseChecker):
    """Thin: runs one engine session per module and reports through add_message."""

    name: str = "hypcheck-rules"

    def __init__(
        self,
        linter: "PyLinter",
        registry: CheckerRegistry,
        effective: EffectiveConfig | None = None,
        check_tests: bool = True,
    ) -> None:
        self.msgs = RuleMsgBuilder.build_msgs(registry)  # type: ignore[assignment]
        super().__init__(linter)
        self._msgids = RuleMsgBuilder.msgid_map(registry)
        self._engine = AnalysisEngine(registry)
        self._effective = effective or ConfigurationResolver(registry).defaults()
        self._check_tests = check_tests
        self._session: AnalysisSession | None = None
        self._module: astroid.nodes.Module | None = None
        self._file_path = ""

    def visit_module(self, node: astroid.nodes.Module) -> None:
        self._module = node
        self._file_path = node.file or node.name
        self._session = self._engine.open_session(self._effective, check_tests=self._check_tests)
        outcome = self._session.check_file(node, self._file_path)
        for violation in outcome.violations:
            self._report(violation)

    def leave_module(self, node: astroid.nodes.Module) -> None:
        """Finish run-scoped checkers; lock-order cycles are per module in plugin mode."""
        if self._session is None:
            return
        violations, _ = self._session.finish()
        for violation in sorted(violations, key=lambda v: (v.line, v.column)):
            if violation.file_path == self._file_path:
                self._report(violation)
        self._session = None
        self._module = None

    def _report(self, violation: Violation) -> None:
        msgid = self._msgids.get(violation.code)
        if msgid is None or self._module is None:
            return
        self.add_message(
            msgid,
            line=violation.line,
            node=self._module,
            args=(violation.message,),
            col_offset=max(violation.column - 1, 0),
        )
