"""Batch pipeline that adds missing Javadoc to a source tree.

Processes files one at a time: parse, scan for undocumented
declarations, request documentation for each, attach the results and
write the file back when at least one comment was attached. Two
run-scoped budgets bound how many files may be rewritten and how many
failures are tolerated before the run is aborted.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Union

from docwriter.analysis.scanner import MissingDocScanner
from docwriter.generators.comment_inserter import CommentInserter
from docwriter.generators.llm_client import GenerationError, LLMClient, TokenUsage
from docwriter.generators.prompt_builder import PromptBuilder
from docwriter.parsers.java_parser import JavaParser, ParseError, SourceFile
from docwriter.parsers.structure import DeclarationNode
from docwriter.utils.config import AppConfig
from docwriter.utils.files import write_atomic

logger = logging.getLogger(__name__)


@dataclass
class RunBudget:
    """Run-scoped counters that only ever decrease.

    Attributes:
        files_remaining: Files that may still be rewritten.
        errors_remaining: Failures still tolerated before aborting.
    """

    files_remaining: int
    errors_remaining: int

    @property
    def files_exhausted(self) -> bool:
        """Whether no further file may be rewritten."""
        return self.files_remaining <= 0

    def consume_file(self) -> None:
        """Account for one rewritten file."""
        self.files_remaining -= 1

    def consume_error(self) -> bool:
        """Account for one failure.

        Returns:
            True if the error budget is now exhausted.
        """
        self.errors_remaining -= 1
        return self.errors_remaining <= 0


@dataclass(frozen=True)
class Continue:
    """File outcome: the run goes on.

    Attributes:
        changed: Whether the file was rewritten.
    """

    changed: bool = False


@dataclass(frozen=True)
class AbortRun:
    """File outcome: the error budget is exhausted and the run stops.

    Attributes:
        reason: Human readable reason for stopping.
        error: The failure that exhausted the budget.
    """

    reason: str
    error: Optional[BaseException] = None


FileOutcome = Union[Continue, AbortRun]


@dataclass
class FileContext:
    """State of the file currently being processed.

    Owned by the DocWriter for the duration of one file and discarded
    before the next file starts.
    """

    source: SourceFile
    candidates: list[DeclarationNode] = field(default_factory=list)
    attached: int = 0


@dataclass
class RunReport:
    """Summary of a batch run.

    Attributes:
        files_scanned: Files that were parsed successfully.
        files_changed: Files that were rewritten.
        documented: Qualified names of declarations that gained docs.
        skipped: Qualified names of declarations left undocumented.
        errors: Number of budgeted failures.
        usage: Token usage across all generation calls.
        aborted: The abort outcome, if the run stopped early on errors.
    """

    files_scanned: int = 0
    files_changed: list[Path] = field(default_factory=list)
    documented: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: int = 0
    usage: TokenUsage = field(default_factory=TokenUsage)
    aborted: Optional[AbortRun] = None

    @property
    def succeeded(self) -> bool:
        """Whether the run completed without exhausting the error budget."""
        return self.aborted is None


class DocWriter:
    """Adds generated Javadoc to the undocumented declarations of files.

    Wires the parser, scanner, prompt builder, LLM client and comment
    inserter together and enforces the file-change and error budgets.
    """

    def __init__(
        self,
        config: AppConfig,
        llm_client: LLMClient,
        parser: Optional[JavaParser] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        inserter: Optional[CommentInserter] = None,
    ) -> None:
        """Initialize the writer.

        Args:
            config: Immutable application configuration.
            llm_client: Client used for every generation call.
            parser: Java parser. Creates a default instance if not provided.
            prompt_builder: Prompt builder. Creates one for the configured
                author if not provided.
            inserter: Comment inserter. Creates a default instance if
                not provided.
        """
        self.config = config
        self.llm = llm_client
        self.parser = parser or JavaParser()
        self.scanner = MissingDocScanner(config.docs)
        self.prompts = prompt_builder or PromptBuilder(author=config.docs.author)
        self.inserter = inserter or CommentInserter()

    def run(self, files: Iterable[Path]) -> RunReport:
        """Process files in order until they or the budgets run out.

        Args:
            files: Source files to process.

        Returns:
            A RunReport. ``aborted`` is set when the error budget was
            exhausted.

        Raises:
            PersistError: If a rewritten file cannot be written back.
        """
        budget = RunBudget(
            files_remaining=self.config.run.max_files_to_change,
            errors_remaining=self.config.run.max_errors,
        )
        report = RunReport()

        for path in files:
            if budget.files_exhausted:
                logger.info("File change limit reached, stopping")
                break

            outcome = self.process_file(Path(path), budget, report)
            if isinstance(outcome, AbortRun):
                logger.error("Aborting run: %s", outcome.reason)
                report.aborted = outcome
                break

        logger.info(
            "Run finished: %d files scanned, %d changed, %d declarations documented, %d errors",
            report.files_scanned,
            len(report.files_changed),
            len(report.documented),
            report.errors,
        )
        return report

    def process_file(self, path: Path, budget: RunBudget, report: RunReport) -> FileOutcome:
        """Document one file and save it if anything was attached.

        Args:
            path: File to process.
            budget: Budgets of the current run, updated in place.
            report: Report of the current run, updated in place.

        Returns:
            Continue, or AbortRun when the error budget is exhausted.
        """
        try:
            source = self.parser.parse_file(str(path))
        except ParseError as e:
            logger.warning("Skipping %s: %s", path, e)
            return Continue()
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read %s: %s", path, e)
            return self._record_failure(budget, report, e, f"failed to read {path}")

        report.files_scanned += 1
        logger.info("Processing %s", path)
        context = FileContext(source=source, candidates=self.scanner.scan(source))

        for node in context.candidates:
            try:
                if self._document(context, node, report):
                    context.attached += 1
                    report.documented.append(node.name)
                else:
                    report.skipped.append(node.name)
            except GenerationError as e:
                logger.error("Failed to generate Javadoc for %s: %s", node.name, e)
                report.skipped.append(node.name)
                outcome = self._record_failure(budget, report, e, f"generation failed for {node.name}")
                if isinstance(outcome, AbortRun):
                    return outcome
            except Exception as e:
                logger.exception("Failed to process %s", path)
                report.skipped.append(node.name)
                outcome = self._record_failure(budget, report, e, f"failed to process {path}")
                if isinstance(outcome, AbortRun):
                    return outcome
                break

        if not context.attached:
            logger.debug("No documentation attached to %s, leaving it untouched", path)
            return Continue()

        logger.info("Writing docs to %s", path)
        write_atomic(path, source.render())
        budget.consume_file()
        report.files_changed.append(path)
        return Continue(changed=True)

    def _document(self, context: FileContext, node: DeclarationNode, report: RunReport) -> bool:
        """Request and attach documentation for one declaration."""
        logger.info("Adding missing Javadoc for %s %s", node.kind.value, node.name)
        request = self.prompts.build(node, context.source)
        result = self.llm.generate(request)
        report.usage.add(result.usage)
        if not result.found:
            logger.error("No Javadoc block in response for %s, skipping", node.name)
            return False
        return self.inserter.attach(context.source, node, result, author=request.author)

    def _record_failure(
        self, budget: RunBudget, report: RunReport, error: BaseException, reason: str
    ) -> FileOutcome:
        report.errors += 1
        if budget.consume_error():
            return AbortRun(reason=f"error budget exhausted ({reason})", error=error)
        logger.warning("Error budget: %d remaining", budget.errors_remaining)
        return Continue()
