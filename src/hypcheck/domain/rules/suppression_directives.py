"""E1902: inline lint-suppression directives hide findings from every reviewer."""

import io
import re
import tokenize
from typing import ClassVar

import astroid

from hypcheck.domain.constants import CATEGORY_COMPLIANCE
from hypcheck.domain.entities import CheckerConfig, CheckerMetadata, NodeKind, Severity
from hypcheck.domain.rules import CheckContext, Checker, Violation


class InlineSuppressionDirective(Checker):
    """Scan comment tokens (never string literals) for configured directives."""

    metadata: ClassVar[CheckerMetadata] = CheckerMetadata(
        code="E1902",
        display_name="Inline suppression directive",
        suggestion="Fix the underlying finding, or configure the exception centrally with a justification.",
        node_kinds=frozenset({NodeKind.MODULE}),
        config_key="e1902_inline_directives",
    )
    default_config: ClassVar[CheckerConfig] = CheckerConfig(
        severity=Severity.MEDIUM,
        categories=frozenset({CATEGORY_COMPLIANCE}),
        options={"directives": "noqa,type: ignore,pylint: disable"},
    )

    def check(self, node: astroid.nodes.NodeNG, ctx: CheckContext) -> list[Violation]:
        if not isinstance(node, astroid.nodes.Module) or not ctx.source_lines:
            return []
        pattern = self._directive_pattern(str(ctx.config.option("directives")))
        if pattern is None:
            return []
        source = "\n".join(ctx.source_lines) + "\n"
        violations = []
        for token in tokenize.generate_tokens(io.StringIO(source).readline):
            if token.type != tokenize.COMMENT:
                continue
            match = pattern.search(token.string)
            if match is None:
                continue
            line, column = token.start
            violations.append(
                Violation.from_node(
                    metadata=self.metadata,
                    ctx=ctx,
                    message=f"Inline directive '# {match.group(0)}' suppresses tool findings.",
                    node=node,
                    line=line,
                    column=column + 1,
                )
            )
        return violations

    @staticmethod
    def _directive_pattern(raw: str) -> re.Pattern[str] | None:
        directives = [d.strip() for d in raw.split(",") if d.strip()]
        if not directives:
            return None
        alternatives = "|".join(
            r"\s*".join(re.escape(part) for part in directive.split()) for directive in directives
        )
        return re.compile(rf"(?i)\b(?:{alternatives})\b")
