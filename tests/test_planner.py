"""Tests for the planning agent."""

from __future__ import annotations

import json

from conftest import ScriptedGenerator, plan_payload

from codestorm.agents import PlanData, PlannerAgent, fallback_plan


def test_planner_parses_camel_case_plan() -> None:
    generator = ScriptedGenerator(
        plan=plan_payload(
            [("index.html", "Main page"), ("app.js", "Behaviour")],
            steps=[["index.html"], ["app.js"]],
        )
    )

    result = PlannerAgent(generator).execute("Build a landing page")

    assert result.success
    plan = result.data
    assert isinstance(plan, PlanData)
    assert plan.project_structure.name == "Landing page"
    assert [step.files_to_create for step in plan.implementation_steps] == [
        ["index.html"],
        ["app.js"],
    ]
    assert result.metadata["model"] == "scripted"
    assert 'USER REQUEST: "Build a landing page"' in generator.prompts[0]


def test_planner_reads_plan_inside_fenced_json() -> None:
    payload = plan_payload([("main.go", "Entry point")])
    generator = ScriptedGenerator(plan=f"Here is the plan:\n```json\n{payload}\n```\nEnjoy!")

    plan = PlannerAgent(generator).execute("CLI tool").data

    assert plan.find_file("main.go") is not None
    assert plan.find_file("missing.go") is None


def test_planner_falls_back_on_non_json() -> None:
    generator = ScriptedGenerator(plan="I would start with a main module and a readme.")

    result = PlannerAgent(generator).execute("anything")

    assert result.success
    assert result.data == fallback_plan()
    assert [item.path for item in result.data.project_structure.files] == ["main.py", "README.md"]
    assert result.data.implementation_steps[0].title == "Create the basic structure"


def test_planner_falls_back_when_required_keys_are_missing() -> None:
    generator = ScriptedGenerator(plan=json.dumps({"projectStructure": {"name": "Half"}}))

    result = PlannerAgent(generator).execute("anything")

    assert result.data.project_structure.name == "Untitled project"


def test_planner_assigns_missing_step_ids_and_tolerates_nulls() -> None:
    generator = ScriptedGenerator(
        plan=json.dumps(
            {
                "project_structure": {
                    "name": "Snake",
                    "files": [{"path": "a.py", "dependencies": None}],
                },
                "implementation_steps": [
                    {"title": "First", "files_to_create": ["a.py"]},
                    {"title": "Second", "filesToCreate": None},
                ],
            }
        )
    )

    plan = PlannerAgent(generator).execute("anything").data

    assert [step.id for step in plan.implementation_steps] == ["step-1", "step-2"]
    assert plan.implementation_steps[1].files_to_create == []
    assert plan.project_structure.files[0].dependencies == []


def test_planner_reports_generation_failure() -> None:
    result = PlannerAgent(ScriptedGenerator(offline=True)).execute("anything")

    assert not result.success
    assert result.data is None
    assert result.error == "backend offline"


def test_planner_accepts_numeric_step_ids() -> None:
    plan = json.loads(plan_payload([("src/shop.ts", "Storefront")], name="Shop"))
    plan["implementationSteps"][0]["id"] = 1
    generator = ScriptedGenerator(plan=json.dumps(plan))

    parsed = PlannerAgent(generator).execute("Shop").data

    assert parsed.project_structure.name == "Shop"
    assert parsed.implementation_steps[0].id == "1"
    assert parsed.implementation_steps[0].files_to_create == ["src/shop.ts"]
