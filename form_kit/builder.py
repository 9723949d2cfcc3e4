# form_kit/builder.py
"""
BATCH BUILDER: One Transaction, Partial Success
===============================================

PURPOSE:
--------
Turn a list of geometric primitives into model elements inside a single
transaction, where one rejected element does not void the rest:

    with repo.transaction(name):
        for item in items:
            try:    create(item)          -> created ids
            except ElementCreationFailure -> failures (logged, counted)

Anything other than ElementCreationFailure escapes the block, and the
transaction rolls back every element of the batch.

REPORTING:
----------
BuildReport.summary_lines() always starts with the success count
("Created 176 of 180 ...") followed by the diagnostic list.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional

from .kernel.errors import ElementCreationFailure
from .model import ProfileStack, Segment
from .repository import ElementType, Level, ModelRepository

logger = logging.getLogger(__name__)


@dataclass
class BuildReport:
    """
    Outcome of one workflow run.
    
    Attributes:
    -----------
    operation : str
        Transaction / workflow name
    noun : str
        What was built, for messages ("wall", "model line", ...)
    attempted : int
        Number of primitives offered to the repository
    created : List[int]
        Ids of elements that were created (or modified / deleted)
    failures : List[str]
        One message per rejected element
    warnings : List[str]
        Non-fatal diagnostics (skipped geometry, fallbacks, ...)
    details : dict
        Workflow-specific extras (e.g. a pandas update log)
    """
    operation: str
    noun: str = 'element'
    attempted: int = 0
    created: List[int] = field(default_factory=list)
    failures: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    details: dict = field(default_factory=dict)

    @property
    def success_count(self) -> int:
        return len(self.created)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def ok(self) -> bool:
        return self.success_count > 0 and not self.failures

    def warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    def summary_lines(self) -> List[str]:
        """Success count first, then every failure and warning."""
        if self.attempted:
            head = f"{self.operation}: created {self.success_count} of {self.attempted} {self.noun}(s)."
        else:
            head = f"{self.operation}: {self.success_count} {self.noun}(s)."
        lines = [head]
        lines.extend(f"  failed: {msg}" for msg in self.failures)
        lines.extend(f"  warning: {msg}" for msg in self.warnings)
        return lines

    def log(self) -> None:
        for line in self.summary_lines():
            logger.info(line)


def build_batch(
    repo: ModelRepository,
    operation: str,
    items: Iterable[Any],
    create: Callable[[Any], int],
    noun: str = 'element',
    report: Optional[BuildReport] = None,
) -> BuildReport:
    """
    Create one element per item inside a single transaction.
    
    Parameters:
    -----------
    repo : ModelRepository
        Target model
    operation : str
        Transaction name
    items : Iterable
        Primitives to build (fully computed before the call)
    create : Callable[[item], int]
        Builds one element and returns its id
    noun : str
        Element noun for messages
    report : Optional[BuildReport]
        Existing report to extend (keeps earlier warnings)
    
    Returns:
    --------
    BuildReport
    """
    items = list(items)
    if report is None:
        report = BuildReport(operation=operation, noun=noun)
    report.attempted += len(items)
    
    with repo.transaction(operation):
        for index, item in enumerate(items):
            try:
                report.created.append(create(item))
            except ElementCreationFailure as exc:
                message = f"{noun} {index}: {exc}"
                logger.warning("Could not create %s", message)
                report.failures.append(message)
    
    report.log()
    return report


def build_walls(
    repo: ModelRepository,
    segments: Iterable[Segment],
    wall_type: ElementType,
    level: Level,
    height: float,
    room_bounding: bool = False,
    operation: str = "Create Walls",
    report: Optional[BuildReport] = None,
) -> BuildReport:
    """One wall per segment, all on `level`, in one transaction."""
    return build_batch(
        repo, operation, segments,
        lambda seg: repo.create_wall(seg, wall_type, level, height, room_bounding),
        noun='wall', report=report,
    )


def build_model_lines(
    repo: ModelRepository,
    segments: Iterable[Segment],
    operation: str = "Create Model Lines",
    report: Optional[BuildReport] = None,
) -> BuildReport:
    """One model line per segment, in one transaction."""
    return build_batch(
        repo, operation, segments, repo.create_model_line,
        noun='model line', report=report,
    )


def build_loft(
    repo: ModelRepository,
    stack: ProfileStack,
    solid: bool = True,
    operation: str = "Create Loft",
    report: Optional[BuildReport] = None,
) -> BuildReport:
    """Loft a profile stack into one form."""
    return build_batch(
        repo, operation, [stack],
        lambda s: repo.create_loft(s, solid),
        noun='loft', report=report,
    )
