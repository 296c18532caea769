"""Shared constants for prompting, tech detection and guide layout."""

from __future__ import annotations

DEFAULT_MODEL = "gpt-4.1"
DEFAULT_NEW_HIRE_NAME = "New Team Member"

# Analysis limits keep replies within token budgets.
MAX_FILES_TO_ANALYZE = 20
MAX_DISCUSSIONS_TO_FETCH = 10
MAX_ISSUES_TO_FETCH = 15
MAX_PRS_TO_FETCH = 10

ARCHITECTURE_FILES: tuple[str, ...] = (
    "README.md",
    "CONTRIBUTING.md",
    "ARCHITECTURE.md",
    "docs/",
    "package.json",
    "requirements.txt",
    "Cargo.toml",
    "go.mod",
    "pom.xml",
    "build.gradle",
    "Makefile",
    "Dockerfile",
    "docker-compose.yml",
    "docker-compose.yaml",
    ".github/workflows/",
    "tsconfig.json",
    "pyproject.toml",
    "setup.py",
    ".eslintrc",
    ".prettierrc",
    "jest.config",
    "vitest.config",
)

# Order matters: detected technologies are reported in this order.
TECH_PATTERNS: dict[str, tuple[str, ...]] = {
    "Node.js / JavaScript": ("package.json", "node_modules", ".nvmrc"),
    "TypeScript": ("tsconfig.json", "*.ts", "*.tsx"),
    "Python": ("requirements.txt", "pyproject.toml", "setup.py", "Pipfile"),
    "Rust": ("Cargo.toml", "*.rs"),
    "Go": ("go.mod", "go.sum", "*.go"),
    "Java": ("pom.xml", "build.gradle", "*.java"),
    "C# / .NET": ("*.csproj", "*.sln", "Program.cs"),
    "Docker": ("Dockerfile", "docker-compose.yml"),
    "Kubernetes": ("k8s/", "*.yaml"),
    "React": ("react", "jsx", "tsx"),
    "Next.js": ("next.config",),
    "Azure Functions": ("host.json", "function.json"),
    "Terraform": ("*.tf", "terraform/"),
    "Bicep": ("*.bicep", "main.bicep"),
}

ARCHITECTURE_CATEGORY = "Architecture & Best Practices"
TUTORIALS_CATEGORY = "Getting Started Tutorials"

# Data blocks embedded in the synthesis prompt: (payload key, heading, shape).
SYNTHESIS_BLOCKS: tuple[tuple[str, str, str], ...] = (
    ("structure", "Repository Structure", "array"),
    ("techStack", "Detected Tech Stack", "array"),
    ("docs", "Key Documentation Found", "array"),
    ("prActivity", "Recent Pull Requests", "array"),
    ("issues", "Active Issues", "array"),
    ("discussions", "Repository Discussions", "array"),
    ("learningResources", "Learning Resources", "array"),
    ("recentDiscussions", "Recent Team Discussions", "array"),
    ("teamMembers", "Key People to Connect With", "array"),
    ("upcomingEvents", "Upcoming Events to Attend", "array"),
    ("teamNorms", "Team Norms & Processes", "object"),
    ("emailInsights", "Email Insights", "array"),
    ("relatedDocuments", "Related Documents", "array"),
)

# Sections the onboarding guide must contain, in order.
GUIDE_SECTIONS: tuple[str, ...] = (
    "Architecture Overview",
    "Tech Stack",
    "Development Environment Setup",
    "Essential Reading",
    "Current Work in Progress",
    "Good First Issues",
    "Key People to Connect With",
    "Your First Two Weeks",
    "Important Meetings & Events",
    "Communication Guide",
    "Recent Decisions from Email",
    "Key Documents & Resources",
    "30-60-90 Day Goals",
    "Additional Resources",
)


__all__ = [
    "ARCHITECTURE_CATEGORY",
    "ARCHITECTURE_FILES",
    "DEFAULT_MODEL",
    "DEFAULT_NEW_HIRE_NAME",
    "GUIDE_SECTIONS",
    "MAX_DISCUSSIONS_TO_FETCH",
    "MAX_FILES_TO_ANALYZE",
    "MAX_ISSUES_TO_FETCH",
    "MAX_PRS_TO_FETCH",
    "SYNTHESIS_BLOCKS",
    "TECH_PATTERNS",
    "TUTORIALS_CATEGORY",
]
