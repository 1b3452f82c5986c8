"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

REACT_SKILL = """\
---
name: react-fundamentals
description: Components, props and hooks for production React apps.
sasmp_version: "1.3.0"
bonded_agent: react-developer
bond_type: PRIMARY_BOND
retry_logic:
  max_attempts: 3
  backoff: exponential
---

# React Fundamentals

## Quick Start

```jsx
export function Hello() {
  return <h1>Hello</h1>;
}
```

## Validation

Run `scripts/validate-react.sh` against your project.
"""

REDUX_SKILL = """\
---
name: redux-fundamentals
description: Store setup with Redux Toolkit.
bonded_agent: state-manager
bond_type: SECONDARY_BOND
---

# Redux Fundamentals

## Quick Start

Create a store with `configureStore`.
"""

REACT_AGENT = """\
---
name: react-developer
description: Builds React components and hooks.
model: sonnet
tools: Read, Write, Bash
skills:
  - react-fundamentals
---

# React Developer

Owns component work.
"""

STATE_AGENT = """\
---
name: state-manager
description: Designs client state.
skills: redux-fundamentals
---

# State Manager

Owns stores.
"""


def write_files(root: Path, files: dict[str, str]) -> Path:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


@pytest.fixture
def plugin_root(tmp_path: Path) -> Path:
    """A small, lint-clean plugin with two agents and two skills."""
    return write_files(
        tmp_path / "plugin",
        {
            ".claude-plugin/plugin.json": json.dumps(
                {"name": "frontend-dev", "version": "1.2.0", "description": "Frontend skills"}
            ),
            "agents/react-developer.md": REACT_AGENT,
            "agents/state-manager.md": STATE_AGENT,
            "skills/react-fundamentals/SKILL.md": REACT_SKILL,
            "skills/react-fundamentals/scripts/validate-react.sh": "#!/bin/bash\n",
            "skills/redux-fundamentals/SKILL.md": REDUX_SKILL,
            "commands/lint.md": "---\ndescription: Lint the plugin\n---\n\nRun the linter.\n",
            "commands/setup.md": "Set up the plugin.\n",
            "docs/README.md": "# Docs\n",
        },
    )


@pytest.fixture
def frontend_project(tmp_path: Path) -> Path:
    """A small React + TypeScript project."""
    package = {
        "name": "demo-app",
        "scripts": {"dev": "vite", "build": "vite build", "test": "vitest"},
        "dependencies": {"react": "^18.2.0", "react-dom": "^18.2.0"},
        "devDependencies": {"typescript": "^5.4.0", "vite": "^5.2.0"},
    }
    tsconfig = {"compilerOptions": {"strict": True, "target": "ES2022", "jsx": "react-jsx"}}
    return write_files(
        tmp_path / "app",
        {
            "package.json": json.dumps(package, indent=2),
            "tsconfig.json": json.dumps(tsconfig, indent=2),
            ".gitignore": "node_modules\ndist\n*.log\n",
            "src/main.tsx": "import { createRoot } from 'react-dom/client';\nimport App from './App';\n",
            "src/App.tsx": (
                "type Item = { id: number; label: string };\n"
                "export default function App({ items }: { items: Item[] }) {\n"
                "  return <ul>{items.map((i) => <li key={i.id}>{i.label}</li>)}</ul>;\n"
                "}\n"
            ),
            "src/utils/parse.ts": "export function parse(value: any) {\n  return value;\n}\n",
            "dist/assets/index.js": "console.log('built');\n",
            "debug.log": "noise\n",
        },
    )
