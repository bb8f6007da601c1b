"""Sequential pipeline coordinating planning, generation, segmentation, and sync."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from codestorm.agents import (
    AgentResult,
    CodeGeneratorAgent,
    CodeModifierAgent,
    DesignArchitectAgent,
    DesignProposal,
    FileDescription,
    ModificationData,
    PlanData,
    PlannerAgent,
    TextGenerator,
)
from codestorm.analysis import LectorService
from codestorm.config.models import PipelineOptions
from codestorm.files import FileRecord, FileSynchronizer, FileSystemCommand, create_commands
from codestorm.segmentation import CodeSplitter, needs_segmentation

from .errors import FileNotFoundInCollectionError, ModificationError, PlanningError
from .models import (
    GenerationOutcome,
    ModificationOutcome,
    ModificationReview,
    ProjectPlan,
    Task,
    TaskType,
)

LOGGER = logging.getLogger(__name__)

VISUAL_MARKUP_PATH = "index.html"
VISUAL_STYLESHEET_PATH = "styles.css"


class Orchestrator:
    """Drive the agents and own the task log, file collection, plan, and design.

    Every agent call is blocking and the pipeline runs strictly in order: plan
    steps as listed, files within a step as listed. Only planning and
    modification failures abort an operation; per-file failures are recorded
    on their task and skipped.
    """

    def __init__(
        self,
        generator: TextGenerator,
        *,
        files: Optional[Iterable[FileRecord]] = None,
        options: Optional[PipelineOptions] = None,
        planner: Optional[PlannerAgent] = None,
        code_generator: Optional[CodeGeneratorAgent] = None,
        modifier: Optional[CodeModifierAgent] = None,
        designer: Optional[DesignArchitectAgent] = None,
        splitter: Optional[CodeSplitter] = None,
        synchronizer: Optional[FileSynchronizer] = None,
        lector: Optional[LectorService] = None,
    ) -> None:
        self.options = options or PipelineOptions()
        self.planner = planner or PlannerAgent(generator)
        self.code_generator = code_generator or CodeGeneratorAgent(generator)
        self.modifier = modifier or CodeModifierAgent(generator)
        self.designer = designer or DesignArchitectAgent(generator)
        self.splitter = splitter or CodeSplitter(min_length=self.options.min_block_length)
        self.synchronizer = synchronizer or FileSynchronizer()
        self.lector = lector

        self._tasks: List[Task] = []
        self._files: List[FileRecord] = list(files or [])
        self._plan: Optional[ProjectPlan] = None
        self._design: Optional[DesignProposal] = None

    # ------------------------------------------------------------------ #
    # Accessors                                                          #
    # ------------------------------------------------------------------ #

    @property
    def tasks(self) -> List[Task]:
        """Return the append-only task log."""
        return self._tasks

    @property
    def files(self) -> List[FileRecord]:
        """Return the current file collection."""
        return self._files

    @property
    def plan(self) -> Optional[ProjectPlan]:
        return self._plan

    @property
    def design(self) -> Optional[DesignProposal]:
        return self._design

    # ------------------------------------------------------------------ #
    # Operations                                                         #
    # ------------------------------------------------------------------ #

    def generate_project(self, instruction: str) -> GenerationOutcome:
        """Plan, generate, split, and synchronize a project for ``instruction``.

        Args:
            instruction: Free-text description of the project.

        Returns:
            GenerationOutcome: Plan, synchronized files, task log, and design.

        Raises:
            PlanningError: If the planning agent fails or returns no plan.
        """

        planner_task = self._start_task("planner", instruction)
        LOGGER.info("Planning project.")
        planner_result = self.planner.execute(instruction)
        planner_task.finish(planner_result.success, planner_result)
        plan_data = planner_result.data if planner_result.success else None
        if not isinstance(plan_data, PlanData):
            raise PlanningError(
                planner_result.error or "The planning agent did not produce a plan."
            )

        plan = ProjectPlan.from_plan_data(plan_data)
        self._plan = plan
        project_context = plan_data.project_structure.description

        if self.options.design_enabled:
            self._run_design(instruction, plan_data)

        generated: List[FileRecord] = []
        for step, step_data in zip(plan.steps, plan_data.implementation_steps):
            plan.current_step_id = step.id
            LOGGER.info("Running step %s (%s).", step.id, step.title)
            for path in step_data.files_to_create:
                description = plan_data.find_file(path)
                if description is None:
                    LOGGER.debug("Step %s lists %s without a description; skipping.", step.id, path)
                    continue
                record = self._generate_file(description, project_context)
                if record is not None:
                    generated.append(record)
            step.transition("completed")

        outputs = self._segment(generated)
        if self.options.visual_files_enabled:
            outputs.extend(self._generate_visual_files(instruction, project_context))

        if outputs:
            self._synchronize(
                create_commands(outputs),
                f"Synchronize {len(outputs)} generated file(s)",
            )

        plan.current_step_id = None
        LOGGER.info("Project generation finished with %d file(s).", len(self._files))
        return GenerationOutcome(
            plan=plan,
            files=self._files,
            tasks=self._tasks,
            design=self._design,
        )

    def modify_file(self, instruction: str, file_id: str) -> ModificationOutcome:
        """Rewrite one file of the collection according to ``instruction``.

        Raises:
            FileNotFoundInCollectionError: If ``file_id`` is not in the collection.
            ModificationError: If the modification agent fails.
        """

        original = self.find_file(file_id)
        if original is None:
            raise FileNotFoundInCollectionError(f"No file with id {file_id} in the collection.")

        task = self._start_task("codeModifier", f"Modify {original.path}: {instruction}")
        LOGGER.info("Modifying %s.", original.path)
        result = self.modifier.execute(instruction, original)
        task.finish(result.success, result)
        data = result.data if result.success else None
        if not isinstance(data, ModificationData):
            raise ModificationError(
                result.error or f"The modification agent could not modify {original.path}."
            )

        modified = data.modified_file
        self._synchronize(
            [FileSystemCommand(type="update", path=modified.path, content=modified.content)],
            f"Synchronize changes to {original.path}",
        )
        return ModificationOutcome(
            original_file=data.original_file,
            modified_file=modified,
            changes=data.changes,
            tasks=self._tasks,
        )

    def review_modification(self, instruction: str, file_id: str) -> ModificationReview:
        """Modify a file and assess the change with the attached Lector service."""

        outcome = self.modify_file(instruction, file_id)
        change = None
        if self.lector is not None:
            change = self.lector.analyze_changes(
                outcome.original_file,
                outcome.modified_file.content,
            )
        return ModificationReview(modification=outcome, change_analysis=change)

    def find_file(self, file_id: str) -> Optional[FileRecord]:
        return next((record for record in self._files if record.id == file_id), None)

    def find_file_by_path(self, path: str) -> Optional[FileRecord]:
        return next((record for record in self._files if record.path == path), None)

    # ------------------------------------------------------------------ #
    # Pipeline stages                                                    #
    # ------------------------------------------------------------------ #

    def _run_design(self, instruction: str, plan_data: PlanData) -> None:
        task = self._start_task("designArchitect", f"Design proposal for: {instruction}")
        LOGGER.info("Requesting design proposal.")
        result = self._call_safely(self.designer.execute, instruction, plan_data)
        task.finish(result.success, result)
        if result.success and isinstance(result.data, DesignProposal):
            self._design = result.data
        else:
            LOGGER.warning("Design proposal unavailable: %s", result.error)

    def _generate_file(
        self,
        description: FileDescription,
        project_context: str,
    ) -> Optional[FileRecord]:
        task = self._start_task(
            "codeGenerator",
            f"Generate {description.path}: {description.description}",
        )
        LOGGER.info("Generating %s.", description.path)
        result = self._call_safely(self.code_generator.execute, description, project_context)
        task.finish(result.success, result)
        if result.success and isinstance(result.data, FileRecord):
            return result.data
        LOGGER.warning("Generation of %s failed: %s", description.path, result.error)
        return None

    def _segment(self, files: List[FileRecord]) -> List[FileRecord]:
        """Replace multi-file blobs by their segments; keep everything else."""

        segmented: List[FileRecord] = []
        for record in files:
            if not needs_segmentation(record.content, self.options.segmentation_threshold):
                segmented.append(record)
                continue

            task = self._start_task("codeSplitter", f"Split {record.path}")
            try:
                result = self.splitter.split(record.content)
            except Exception as exc:
                LOGGER.warning("Segmentation of %s raised: %s", record.path, exc)
                task.finish(False, str(exc))
                segmented.append(record)
                continue

            task.finish(result.success, result)
            if result.success and len(result.files) > 1:
                LOGGER.info("Split %s into %d file(s).", record.path, len(result.files))
                segmented.extend(result.files)
            else:
                segmented.append(record)
        return segmented

    def _generate_visual_files(self, instruction: str, project_context: str) -> List[FileRecord]:
        """Generate the markup and stylesheet entry points; failures are skipped."""

        descriptions = (
            FileDescription(
                path=VISUAL_MARKUP_PATH,
                description=(
                    "Main page of the project with semantic HTML5, SEO meta tags, navigation, "
                    f'content specific to "{instruction}", and a link to styles.css.'
                ),
                dependencies=[VISUAL_STYLESHEET_PATH],
            ),
            FileDescription(
                path=VISUAL_STYLESHEET_PATH,
                description=(
                    "Main stylesheet with CSS variables, a mobile-first responsive layout, and a "
                    f'palette consistent with "{instruction}".'
                ),
            ),
        )
        visual: List[FileRecord] = []
        for description in descriptions:
            record = self._generate_file(description, project_context)
            if record is not None:
                visual.append(record)
        return visual

    def _synchronize(self, commands: List[FileSystemCommand], instruction: str) -> None:
        task = self._start_task("fileSynchronizer", instruction)
        result = self.synchronizer.apply(self._files, commands)
        task.finish(True, result)
        self._files = result.files

    # ------------------------------------------------------------------ #
    # Helpers                                                            #
    # ------------------------------------------------------------------ #

    def _start_task(self, task_type: TaskType, instruction: str) -> Task:
        task = Task(type=task_type, instruction=instruction)
        self._tasks.append(task)
        return task

    @staticmethod
    def _call_safely(func: Any, *args: Any) -> AgentResult:
        try:
            return func(*args)
        except Exception as exc:
            LOGGER.warning("Agent call raised: %s", exc)
            return AgentResult(success=False, error=str(exc) or exc.__class__.__name__)


__all__ = ["Orchestrator", "VISUAL_MARKUP_PATH", "VISUAL_STYLESHEET_PATH"]
