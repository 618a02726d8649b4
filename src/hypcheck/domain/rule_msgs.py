"""Pure message-building from a checker registry. No I/O or infrastructure imports."""

import logging

from hypcheck.domain.constants import PYLINT_MSGID_BASE, PYLINT_MSGID_CAPACITY
from hypcheck.domain.entities import Severity
from hypcheck.domain.registry import CheckerRegistry

logger = logging.getLogger(__name__)

_SEVERITY_LETTERS: dict[Severity, str] = {
    Severity.LOW: "C",
    Severity.MEDIUM: "W",
    Severity.HIGH: "E",
}


class RuleMsgBuilder:
    """
    Builds the Pylint msgs dict for registered checkers.

    Entries map in registry order to message ids <C|W|E>95NN; the letter
    follows the default severity so pylint's own category filters apply.
    """

    @staticmethod
    def msgid_map(registry: CheckerRegistry) -> dict[str, str]:
        """Return { checker code: pylint msgid }."""
        result: dict[str, str] = {}
        for index, entry in enumerate(registry.all()):
            if index >= PYLINT_MSGID_CAPACITY:
                logger.warning(
                    "Checker %s not exposed to pylint: message id range exhausted", entry.code
                )
                continue
            letter = _SEVERITY_LETTERS[entry.default_config.severity]
            result[entry.code] = f"{letter}{PYLINT_MSGID_BASE + index}"
        return result

    @staticmethod
    def build_msgs(registry: CheckerRegistry) -> dict[str, tuple[str, str, str]]:
        """Return { msgid: (message_template, symbol, description) } for checker.msgs."""
        msgids = RuleMsgBuilder.msgid_map(registry)
        msgs: dict[str, tuple[str, str, str]] = {}
        for entry in registry.all():
            msgid = msgids.get(entry.code)
            if msgid is None:
                continue
            meta = entry.metadata
            msgs[msgid] = (
                f"[{meta.code}] %s",
                meta.pylint_symbol,
                f"{meta.display_name}. {meta.suggestion}",
            )
        return msgs
