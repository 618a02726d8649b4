"""Explicit registration list of the built-in checkers, in code order."""

from hypcheck.domain.registry import CheckerRegistry
from hypcheck.domain.rules import Checker
from hypcheck.domain.rules.arithmetic import DivisionByZero, FloatEquality, ModuloByZero
from hypcheck.domain.rules.complexity_rule import (
    DeeplyNestedConditionals,
    DeeplyNestedLogic,
    DeeplyNestedMatch,
    HighCyclomaticComplexity,
)
from hypcheck.domain.rules.concurrency import (
    BlockingCallInAsync,
    RawThreadSpawn,
    SleepInsteadOfSync,
)
from hypcheck.domain.rules.exception_hygiene import (
    BareExcept,
    ErrorContextLoss,
    GenericExceptionRaised,
    RaiseInFinalizer,
    SuppressedBroadException,
    SwallowedException,
)
from hypcheck.domain.rules.lock_order import AbbaDeadlock, NestedLockAcquisition
from hypcheck.domain.rules.performance import ExpensiveOpInLoop, StringConcatInLoop
from hypcheck.domain.rules.runtime_safety import (
    AssertForRuntimeChecks,
    DirectExit,
    DynamicCodeExecution,
    NotImplementedStub,
    ShellInjection,
    UnsafeDeserialization,
)
from hypcheck.domain.rules.style import BadNaming, MissingDocumentation, MutableDefaultArgument
from hypcheck.domain.rules.suppression_directives import InlineSuppressionDirective
from hypcheck.domain.rules.surface_rules import (
    BooleanParameterHell,
    DeeplyNestedClosures,
    ExcessiveChaining,
    ExcessiveTupleComplexity,
    LargeClass,
    LongFunction,
    MagicNumbers,
    TooManyParameters,
)


class CheckerCatalog:
    """Built-in checker classes grouped by category prefix. No top-level functions."""

    GROUPS: dict[str, tuple[type[Checker], ...]] = {
        "E10": (
            DirectExit,
            AssertForRuntimeChecks,
            DynamicCodeExecution,
            NotImplementedStub,
            UnsafeDeserialization,
            ShellInjection,
        ),
        "E11": (
            HighCyclomaticComplexity,
            DeeplyNestedLogic,
            TooManyParameters,
            LargeClass,
            BooleanParameterHell,
            LongFunction,
            DeeplyNestedConditionals,
            DeeplyNestedMatch,
            ExcessiveChaining,
            DeeplyNestedClosures,
            ExcessiveTupleComplexity,
            MagicNumbers,
        ),
        "E12": (AbbaDeadlock,),
        "E13": (
            BareExcept,
            SuppressedBroadException,
            SwallowedException,
            GenericExceptionRaised,
            RaiseInFinalizer,
            ErrorContextLoss,
        ),
        "E14": (DivisionByZero, ModuloByZero, FloatEquality),
        "E15": (NestedLockAcquisition, SleepInsteadOfSync, RawThreadSpawn, BlockingCallInAsync),
        "E17": (StringConcatInLoop, ExpensiveOpInLoop),
        "E18": (BadNaming, MissingDocumentation, MutableDefaultArgument),
        "E19": (InlineSuppressionDirective,),
    }

    @classmethod
    def builtin_checkers(cls) -> list[type[Checker]]:
        return [checker for group in cls.GROUPS.values() for checker in group]

    @classmethod
    def register_builtins(cls, registry: CheckerRegistry) -> CheckerRegistry:
        for checker_cls in cls.builtin_checkers():
            registry.register_checker(checker_cls)
        return registry

    @classmethod
    def default_registry(cls) -> CheckerRegistry:
        return cls.register_builtins(CheckerRegistry())
