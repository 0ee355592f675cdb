"""Agent profiles that exist without a markdown file."""
from __future__ import annotations

from flowctl_agent.definitions.types import BuiltInAgent

# Capabilities reported for names no registry knows about
DEFAULT_CAPABILITIES: tuple[str, ...] = ("Research", "Analysis", "Code Generation")

BUILT_IN_AGENTS: tuple[BuiltInAgent, ...] = (
    BuiltInAgent(
        name="coordinator",
        type="coordinator",
        description="Orchestrates tasks and manages workflow between agents",
        capabilities=[
            "Task Management",
            "Workflow Orchestration",
            "Resource Allocation",
            "Coordination",
        ],
    ),
    BuiltInAgent(
        name="researcher",
        type="researcher",
        description="Gathers and analyzes information from various sources",
        capabilities=[
            "Research",
            "Analysis",
            "Information Gathering",
            "Documentation",
        ],
    ),
    BuiltInAgent(
        name="coder",
        type="coder",
        description="Writes, reviews, and maintains code implementations",
        capabilities=[
            "Code Generation",
            "Implementation",
            "Refactoring",
            "Debugging",
        ],
    ),
    BuiltInAgent(
        name="analyst",
        type="analyst",
        description="Performs data analysis and generates insights",
        capabilities=[
            "Data Analysis",
            "Pattern Recognition",
            "Reporting",
            "Optimization",
        ],
    ),
    BuiltInAgent(
        name="architect",
        type="architect",
        description="Designs system architecture and technical solutions",
        capabilities=[
            "System Design",
            "Architecture",
            "Technical Planning",
            "Integration",
        ],
    ),
    BuiltInAgent(
        name="tester",
        type="tester",
        description="Creates and executes tests, ensures quality",
        capabilities=[
            "Testing",
            "Validation",
            "Quality Assurance",
            "Performance Testing",
        ],
    ),
    BuiltInAgent(
        name="reviewer",
        type="reviewer",
        description="Reviews code and documentation for quality and standards",
        capabilities=[
            "Code Review",
            "Documentation Review",
            "Standards Compliance",
            "Feedback",
        ],
    ),
    BuiltInAgent(
        name="optimizer",
        type="optimizer",
        description="Optimizes performance and resource utilization",
        capabilities=[
            "Performance Optimization",
            "Resource Management",
            "Profiling",
            "Tuning",
        ],
    ),
    BuiltInAgent(
        name="general",
        type="general",
        description="General-purpose agent for various tasks",
        capabilities=list(DEFAULT_CAPABILITIES),
    ),
)
